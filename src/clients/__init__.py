"""Collaborator ports used by provider adapters: transport, credentials, caches."""
from src.clients.cache import CacheProtocol, CachingTransport, MemoryCache, NullCache
from src.clients.host_rules import HostCredentials, HostRules, HostRulesProtocol
from src.clients.http import (
    FakeTransport,
    HttpResponse,
    HttpxTransport,
    RecordedRequest,
    TransportProtocol,
)

__all__ = [
    "CacheProtocol",
    "CachingTransport",
    "FakeTransport",
    "HostCredentials",
    "HostRules",
    "HostRulesProtocol",
    "HttpResponse",
    "HttpxTransport",
    "MemoryCache",
    "NullCache",
    "RecordedRequest",
    "TransportProtocol",
]
