"""Typed ASGI aliases used by the middleware."""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

# Raw ASGI types (matching the spec)
Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]

# Schemes whose transport is encrypted
SECURE_SCHEMES: frozenset[str] = frozenset({"https", "wss"})


def is_secure_scope(scope: Scope) -> bool:
    """True if the ASGI scope describes a transport-secure connection."""
    return scope.get("scheme", "http") in SECURE_SCHEMES
