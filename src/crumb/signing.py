"""Rotating keyring for cookie signatures.

A ``Keyring`` holds secrets ordered most-recent first. New signatures
always use key 0; verification accepts any key and reports *which* one
matched, so the caller can re-sign values that still carry a signature
from a retired key.

Signatures are HMAC digests keyed directly by the secret (no key
derivation), URL-safe base64 without padding, produced by
``itsdangerous.Signer``.
"""

import hashlib
import logging
from collections.abc import Iterable

from itsdangerous import Signer

from crumb.errors import ConfigurationError

logger = logging.getLogger("crumb.signing")

# Digest names accepted by Keyring and JarConfig
DIGESTS: frozenset[str] = frozenset({"sha1", "sha256", "sha512"})


def _digest_method(name: str):
    if name not in DIGESTS:
        msg = f"Unsupported digest {name!r}. Expected one of: {', '.join(sorted(DIGESTS))}"
        raise ConfigurationError(msg)
    return getattr(hashlib, name)


class Keyring:
    """Ordered secret keys; position 0 signs, every position verifies.

    Usage::

        keys = Keyring(["new-secret", "old-secret"])
        sig = keys.sign("theme=dark")
        keys.index("theme=dark", sig)  # 0

    ``index`` returns -1 for a signature no key produced.
    """

    __slots__ = ("_digest", "_keys", "_signers")

    def __init__(self, keys: Iterable[str | bytes], *, digest: str = "sha1") -> None:
        key_list = tuple(keys)
        if not key_list:
            msg = "Keyring requires at least one key."
            raise ConfigurationError(msg)
        if any(not key for key in key_list):
            msg = "Keyring keys must not be empty."
            raise ConfigurationError(msg)
        method = _digest_method(digest)
        self._digest = digest
        self._keys = key_list
        self._signers = tuple(
            Signer(key, key_derivation="none", digest_method=method) for key in key_list
        )

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"Keyring(<{len(self._keys)} keys>, digest={self._digest!r})"

    @property
    def digest(self) -> str:
        return self._digest

    def sign(self, data: str) -> str:
        """Sign *data* with the current key."""
        return self._signers[0].get_signature(data).decode("ascii")

    def index(self, data: str, signature: str) -> int:
        """Return the position of the key that produced *signature*, or -1."""
        for position, signer in enumerate(self._signers):
            if signer.verify_signature(data, signature):
                return position
        return -1

    def verify(self, data: str, signature: str) -> bool:
        """True if any key in the ring produced *signature*."""
        return self.index(data, signature) != -1

    def rotate(self, key: str | bytes, *, keep: int | None = None) -> "Keyring":
        """Return a new keyring with *key* current and the old keys behind it.

        ``keep`` caps the total number of keys; the oldest are dropped.
        """
        keys = (key, *self._keys)
        if keep is not None:
            if keep < 1:
                msg = f"keep must be at least 1, got {keep}"
                raise ConfigurationError(msg)
            keys = keys[:keep]
        logger.debug("Rotated keyring: %d keys, %d retired", len(keys), len(self._keys) + 1 - len(keys))
        return Keyring(keys, digest=self._digest)
