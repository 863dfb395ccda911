"""Header-field validation for cookie names, values, and attributes.

Every string that ends up in a ``Set-Cookie`` line passes through here
before the jar touches its store or the response. Two kinds of check:

- ``is_field_content`` -- the RFC 7230 section 3.2 ``field-content``
  character set (visible ASCII, space, tab, and obs-text). Rejects CR,
  LF, NUL and other control characters that would allow header
  injection.
- ``normalize_samesite`` -- an enumeration, not a grammar.
"""

import re

from crumb.errors import ValidationError

# field-content = field-vchar [ 1*( SP / HTAB ) field-vchar ]
# field-vchar   = VCHAR / obs-text
# obs-text      = %x80-FF
_FIELD_CONTENT_RE = re.compile(r"^[\t\x20-\x7e\x80-\xff]+$")

# Accepted SameSite spellings, lowercased, to their canonical value
SAME_SITE: dict[str, str] = {
    "true": "Strict",
    "strict": "Strict",
    "lax": "Lax",
    "none": "None",
}


def is_field_content(value: str) -> bool:
    """True if *value* is non-empty RFC 7230 field-content."""
    return isinstance(value, str) and _FIELD_CONTENT_RE.fullmatch(value) is not None


def check_field(field: str, value: str) -> str:
    """Return *value* unchanged, or raise ``ValidationError`` for *field*."""
    if not is_field_content(value):
        raise ValidationError(field, f"{field} is invalid: {value!r}")
    return value


def normalize_samesite(value: str | bool) -> str:
    """Map a SameSite option to ``Strict``, ``Lax``, or ``None``.

    ``True`` is an alias for ``Strict``. Matching is case-insensitive.
    """
    if value is True:
        return SAME_SITE["true"]
    if isinstance(value, str):
        canonical = SAME_SITE.get(value.lower())
        if canonical is not None:
            return canonical
    raise ValidationError("samesite", f"samesite is invalid: {value!r}")
