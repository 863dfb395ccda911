"""Outgoing ``Set-Cookie`` directives for one response.

The jar never touches a response object directly. It hands each
directive to a ``CookieSink``; ``ResponseCookies`` is the in-memory sink
the middleware flushes into ``http.response.start``.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from crumb.http.cookies import SetCookie


@runtime_checkable
class CookieSink(Protocol):
    """Anything that accepts ``Set-Cookie`` directives, in call order."""

    def set_cookie(self, cookie: SetCookie) -> None: ...


class ResponseCookies:
    """Ordered, append-only list of emitted ``Set-Cookie`` directives."""

    __slots__ = ("_cookies",)

    def __init__(self) -> None:
        self._cookies: list[SetCookie] = []

    def set_cookie(self, cookie: SetCookie) -> None:
        """Append one directive."""
        self._cookies.append(cookie)

    def __iter__(self) -> Iterator[SetCookie]:
        return iter(self._cookies)

    def __len__(self) -> int:
        return len(self._cookies)

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self._cookies)
        return f"ResponseCookies([{names}])"

    @property
    def cookies(self) -> tuple[SetCookie, ...]:
        return tuple(self._cookies)

    def named(self, name: str) -> list[SetCookie]:
        """Return every directive emitted for *name*, oldest first."""
        return [c for c in self._cookies if c.name == name]

    def headers(self) -> list[tuple[str, str]]:
        """Serialize to ``("set-cookie", value)`` header pairs."""
        return [("set-cookie", c.to_header_value()) for c in self._cookies]

    def raw(self) -> list[tuple[bytes, bytes]]:
        """Serialize to raw ASGI header byte pairs."""
        return [(b"set-cookie", c.to_header_value().encode("latin-1")) for c in self._cookies]
