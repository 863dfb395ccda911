"""Turn a cookie name, value, and raw options into a ``SetCookie``.

Options arrive the way callers like to write them -- ``max_age="2 days"``,
``expires=datetime(...)``, ``samesite=True`` -- and leave as one fully
resolved directive. Duration strings are parsed by ``pytimeparse``.

Nothing here emits headers or touches jar state; a ``ValidationError``
raised here happens before the jar has done anything observable.
"""

import math
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime
from typing import TypeAlias

from pytimeparse.timeparse import timeparse as parse_duration

from crumb.errors import ValidationError
from crumb.http.cookies import SetCookie
from crumb.validation import normalize_samesite

Clock: TypeAlias = Callable[[], datetime]

MaxAge: TypeAlias = int | float | str
Expires: TypeAlias = datetime | int | float | str


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _duration_seconds(field: str, value: str) -> float:
    seconds = parse_duration(value.strip())
    if seconds is None:
        raise ValidationError(field, f"{field} duration string is invalid: {value!r}")
    return seconds


def _whole_seconds(field: str, value: float) -> int:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(field, f"{field} must be finite: {value!r}")
    return int(value)


def resolve_max_age(value: MaxAge) -> int:
    """Normalize ``max_age`` to whole seconds.

    Accepts a number of seconds or a duration string (``"2 days"``,
    ``"1h30m"``). Fractions are truncated.
    """
    if isinstance(value, bool):
        raise ValidationError("max_age", f"max_age is invalid: {value!r}")
    if isinstance(value, str):
        seconds = _whole_seconds("max_age", _duration_seconds("max_age", value))
    elif isinstance(value, int | float):
        seconds = _whole_seconds("max_age", value)
    else:
        raise ValidationError("max_age", f"max_age is invalid: {value!r}")
    if seconds < 0:
        raise ValidationError("max_age", f"max_age must not be negative: {value!r}")
    return seconds


def _parse_timestamp(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None


def resolve_expires(value: Expires, now: Clock = utcnow) -> datetime:
    """Normalize ``expires`` to an aware UTC datetime.

    - ``datetime`` -- used as-is; naive values are taken as UTC.
    - ``int`` / ``float`` -- seconds since the epoch.
    - ``str`` -- a duration relative to *now* (``"1 week"``), else an
      ISO-8601 or HTTP-date timestamp.
    """
    if isinstance(value, bool):
        raise ValidationError("expires", f"expires is invalid: {value!r}")
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, int | float):
        try:
            moment = datetime.fromtimestamp(value, UTC)
        except (OverflowError, OSError, ValueError):
            raise ValidationError("expires", f"expires is out of range: {value!r}") from None
    elif isinstance(value, str):
        seconds = parse_duration(value.strip())
        if seconds is not None:
            try:
                moment = now() + timedelta(seconds=seconds)
            except (OverflowError, ValueError):
                raise ValidationError("expires", f"expires is out of range: {value!r}") from None
        else:
            parsed = _parse_timestamp(value.strip())
            if parsed is None:
                raise ValidationError("expires", f"expires is invalid: {value!r}")
            moment = parsed
    else:
        raise ValidationError("expires", f"expires is invalid: {value!r}")
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def encode_cookie(
    name: str,
    value: str,
    *,
    max_age: MaxAge | None = None,
    expires: Expires | None = None,
    path: str = "/",
    domain: str | None = None,
    secure: bool = False,
    httponly: bool = True,
    samesite: str | bool | None = None,
    now: Clock = utcnow,
) -> SetCookie:
    """Resolve options into one ``SetCookie`` directive.

    Name, value, path, and domain are expected to be validated by the
    caller; this function validates only what it normalizes.
    """
    return SetCookie(
        name=name,
        value=value,
        max_age=None if max_age is None else resolve_max_age(max_age),
        expires=None if expires is None else resolve_expires(expires, now),
        path=path,
        domain=domain,
        secure=secure,
        httponly=httponly,
        samesite=None if samesite is None else normalize_samesite(samesite),
    )
