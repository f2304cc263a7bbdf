"""
Preset service: one PresetResolver per platform over shared collaborators.

The service owns the transport (with its two cache tiers) and the credential
lookup; resolvers and adapters are cheap and built on first use. Nothing here
is a module-level singleton, so tests build their own instance.

Cache lifetimes:
- run cache: one resolve() call; cleared when the next one starts
- global cache: cache_ttl_seconds, or until clear_caches()
"""

from __future__ import annotations

from typing import Any

from src.clients.cache import CacheProtocol, CachingTransport, MemoryCache
from src.clients.host_rules import HostRules, HostRulesProtocol
from src.clients.http import HttpxTransport, TransportProtocol
from src.core.config import Settings
from src.core.logging import get_logger, resolution_context
from src.presets.models import JSONValue, PresetReference
from src.presets.resolver import PresetResolver
from src.providers.base import Platform
from src.providers.registry import build_adapter, parse_platform

logger = get_logger(__name__)


class PresetService:
    """Resolve presets on any supported platform.

    Usage:
        service = PresetService.from_settings(get_settings())
        preset = await service.resolve("gitlab", PresetReference("group/repo"))
        await service.close()
    """

    def __init__(
        self,
        transport: TransportProtocol,
        host_rules: HostRulesProtocol | None = None,
        *,
        default_platform: str | Platform = Platform.GITHUB,
        endpoints: dict[Platform, str] | None = None,
        app_mode: bool = False,
        run_cache: CacheProtocol | None = None,
        global_cache: CacheProtocol | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            transport: Transport shared by every adapter (already cached or not)
            host_rules: Credential lookup
            default_platform: Platform used when resolve() gets none
            endpoints: Per-platform default endpoint overrides
            app_mode: Passed to every resolver
            run_cache: Per-run memo, cleared by start_run()
            global_cache: Cross-run cache, cleared by clear_caches()
        """
        self._transport = transport
        self._host_rules = host_rules or HostRules()
        self.default_platform = parse_platform(default_platform)
        self._endpoints = dict(endpoints or {})
        self.app_mode = app_mode
        self._run_cache = run_cache
        self._global_cache = global_cache
        self._resolvers: dict[Platform, PresetResolver] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: TransportProtocol | None = None,
    ) -> PresetService:
        """Build the service with an httpx transport and in-memory caches."""
        run_cache = MemoryCache()
        global_cache = MemoryCache(default_ttl=settings.cache_ttl_seconds)
        base_transport = transport or HttpxTransport(
            timeout=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
            retry_delay=settings.http_retry_delay_seconds,
        )
        endpoints: dict[Platform, str] = {}
        for platform in Platform:
            endpoint = settings.endpoint_for(platform.value)
            if endpoint:
                endpoints[platform] = endpoint
        return cls(
            CachingTransport(
                base_transport,
                run_cache=run_cache,
                global_cache=global_cache,
                ttl_seconds=settings.cache_ttl_seconds,
            ),
            HostRules(settings.host_rules),
            default_platform=settings.default_platform,
            endpoints=endpoints,
            app_mode=settings.app_mode,
            run_cache=run_cache,
            global_cache=global_cache,
        )

    def resolver_for(self, platform: str | Platform | None = None) -> PresetResolver:
        key = parse_platform(platform) if platform else self.default_platform
        resolver = self._resolvers.get(key)
        if resolver is None:
            adapter = build_adapter(
                key,
                self._transport,
                host_rules=self._host_rules,
                default_endpoint=self._endpoints.get(key),
            )
            resolver = PresetResolver(adapter, app_mode=self.app_mode)
            self._resolvers[key] = resolver
        return resolver

    async def resolve(
        self,
        platform: str | Platform | None,
        reference: PresetReference,
    ) -> JSONValue:
        """Resolve reference on platform (None: default platform).

        Each call is its own run, so fresh upstream content is only masked by
        the TTL-bound global cache.
        """
        resolver = self.resolver_for(platform)
        self.start_run()
        with resolution_context(
            platform=resolver.adapter.platform.value,
            package_name=reference.package_name,
            preset_name=reference.preset_name,
        ):
            logger.info("preset_resolve")
            return await resolver.get_preset(reference)

    def start_run(self) -> None:
        """Begin a new run: forget the per-run memo."""
        if self._run_cache is not None:
            self._run_cache.clear()

    def clear_caches(self) -> None:
        self.start_run()
        if self._global_cache is not None:
            self._global_cache.clear()

    async def close(self) -> None:
        """Close the underlying transport if it holds resources."""
        closer: Any = getattr(self._transport, "close", None)
        if closer is not None:
            await closer()
