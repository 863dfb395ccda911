"""Cookie parsing and SetCookie serialization.

Consolidates the read side (``parse_cookies``, used to seed a jar from the
request) and the write side (``SetCookie``, one ``Set-Cookie`` directive)
in one module.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import format_datetime

# Expires value used for deletion directives
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Returns an empty dict for empty or missing headers. Values wrapped in
    double quotes (RFC 6265 ``cookie-value``) are unquoted.
    """
    if not header:
        return {}
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        pair = pair.strip()
        if "=" in pair:
            key, _, value = pair.partition("=")
            key = key.strip()
            if not key:
                continue
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] == '"':
                value = value[1:-1]
            cookies[key] = value
    return cookies


def cookie_header(raw_headers: Iterable[tuple[bytes, bytes]]) -> str:
    """Join every ``Cookie`` line of raw ASGI headers into one header value.

    HTTP/2 clients may split cookies across several header lines.
    """
    lines = [value.decode("latin-1") for name, value in raw_headers if name.lower() == b"cookie"]
    return "; ".join(lines)


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive: one cookie record with its attributes."""

    name: str
    value: str
    max_age: int | None = None
    expires: datetime | None = None
    path: str | None = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str | None = None

    @classmethod
    def expired(cls, name: str, path: str | None = "/") -> "SetCookie":
        """Build a minimal directive that expires *name* immediately."""
        return cls(name=name, value="", max_age=0, expires=EPOCH, path=path, httponly=False)

    @property
    def is_deletion(self) -> bool:
        """True if this directive removes the cookie client-side.

        ``Max-Age=0`` or an ``Expires`` at or before the epoch.
        """
        if self.max_age == 0:
            return True
        return self.expires is not None and self.expires <= EPOCH

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={self.value}"]
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.expires is not None:
            parts.append(f"Expires={format_datetime(self.expires.astimezone(UTC), usegmt=True)}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite:
            parts.append(f"SameSite={self.samesite}")
        return "; ".join(parts)
