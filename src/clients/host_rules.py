"""
Credential lookup for hosting platforms.

Token storage is not handled here; HostRules only answers "which token, if
any, applies to this URL" from rules supplied by configuration.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable
from urllib.parse import urlsplit

from src.core.config import HostRule


@dataclass(frozen=True, slots=True)
class HostCredentials:
    """Credentials found for a host. token None means unauthenticated."""

    token: str | None = None


@runtime_checkable
class HostRulesProtocol(Protocol):
    """Protocol for credential lookup."""

    def find(self, *, host_type: str, url: str) -> HostCredentials:
        """Return credentials for a request to url on a host_type platform."""
        ...


class HostRules:
    """Match configured HostRule entries against request URLs.

    A rule applies when its host_type is unset or equal to the platform, and
    its match_host is unset, equal to the URL host, or a parent domain of it.
    Among applicable rules the most specific wins (match_host beats
    host_type beats catch-all); later rules win ties.

    Example:
        >>> rules = HostRules([HostRule(host_type="github", token="abc")])
        >>> rules.find(host_type="github", url="https://api.github.com/repos/a/b").token
        'abc'
    """

    def __init__(self, rules: Iterable[HostRule] = ()) -> None:
        self._rules = list(rules)

    def find(self, *, host_type: str, url: str) -> HostCredentials:
        hostname = (urlsplit(url).hostname or "").lower()
        best: HostRule | None = None
        best_score = -1
        for rule in self._rules:
            score = self._score(rule, host_type, hostname)
            if score >= best_score and score >= 0:
                best, best_score = rule, score
        return HostCredentials(token=best.token if best else None)

    @staticmethod
    def _score(rule: HostRule, host_type: str, hostname: str) -> int:
        score = 0
        if rule.host_type:
            if rule.host_type != host_type:
                return -1
            score += 1
        if rule.match_host:
            match = rule.match_host.lower()
            if "://" in match:
                match = (urlsplit(match).hostname or "").lower()
            if hostname != match and not hostname.endswith(f".{match}"):
                return -1
            score += 2
        return score
