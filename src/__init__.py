"""Preset-Resolution-Service: shared configuration presets from Git hosting platforms.

Resolves references such as "owner/repo" + "file/name/subname" by fetching
the preset file from GitHub, GitLab or Gitea and walking into it.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
