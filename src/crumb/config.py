"""Jar configuration.

JarConfig is a frozen dataclass -- immutable after creation, shared by
every request the middleware serves, never mutated per request.
"""

from dataclasses import dataclass

from crumb.errors import ConfigurationError
from crumb.signing import DIGESTS, Keyring


@dataclass(frozen=True, slots=True)
class JarConfig:
    """Cookie jar configuration. Immutable after creation.

    Override what you need::

        config = JarConfig(keys=("new-secret", "old-secret"))
    """

    # Signing secrets, most recent first. Empty means cookies are unsigned.
    keys: tuple[str, ...] = ()
    digest: str = "sha1"
    max_keys: int | None = None  # Retire keys beyond this many

    # None derives connection security from the ASGI scope scheme
    secure: bool | None = None

    def __post_init__(self) -> None:
        if isinstance(self.keys, str):
            msg = "JarConfig.keys must be a sequence of keys, not a single string."
            raise ConfigurationError(msg)
        if self.digest not in DIGESTS:
            msg = f"JarConfig.digest must be one of: {', '.join(sorted(DIGESTS))}"
            raise ConfigurationError(msg)
        if self.max_keys is not None and self.max_keys < 1:
            msg = "JarConfig.max_keys must be at least 1."
            raise ConfigurationError(msg)
        if any(not key for key in self.keys):
            msg = "JarConfig.keys must not contain empty keys."
            raise ConfigurationError(msg)

    def keyring(self) -> Keyring | None:
        """Build the keyring, or None if no keys are configured."""
        if not self.keys:
            return None
        keys = self.keys if self.max_keys is None else self.keys[: self.max_keys]
        return Keyring(keys, digest=self.digest)
