"""Tests for crumb.signing: Keyring sign/index/rotate."""

import pytest

from crumb.errors import ConfigurationError
from crumb.signing import Keyring


def _tamper(signature: str) -> str:
    """Flip the first character; the last may only carry padding bits."""
    first = "B" if signature[0] != "B" else "C"
    return first + signature[1:]


class TestKeyringInit:
    def test_requires_keys(self) -> None:
        with pytest.raises(ConfigurationError, match="at least one key"):
            Keyring([])

    def test_rejects_empty_key(self) -> None:
        with pytest.raises(ConfigurationError, match="must not be empty"):
            Keyring(["k1", ""])

    def test_rejects_unknown_digest(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported digest"):
            Keyring(["k1"], digest="md5")

    def test_repr_hides_keys(self) -> None:
        assert "s3cret" not in repr(Keyring(["s3cret"]))


class TestSign:
    def test_deterministic(self) -> None:
        keys = Keyring(["k1"])
        assert keys.sign("a=1") == keys.sign("a=1")

    def test_url_safe_without_padding(self) -> None:
        sig = Keyring(["k1"]).sign("LastVisit=100")

        assert sig
        assert "=" not in sig
        assert "+" not in sig
        assert "/" not in sig

    def test_depends_on_data(self) -> None:
        keys = Keyring(["k1"])
        assert keys.sign("a=1") != keys.sign("a=2")

    def test_depends_on_key(self) -> None:
        assert Keyring(["k1"]).sign("a=1") != Keyring(["k2"]).sign("a=1")

    def test_depends_on_digest(self) -> None:
        assert Keyring(["k1"]).sign("a=1") != Keyring(["k1"], digest="sha256").sign("a=1")

    def test_uses_first_key(self) -> None:
        assert Keyring(["k2", "k1"]).sign("a=1") == Keyring(["k2"]).sign("a=1")


class TestIndex:
    def test_current_key(self) -> None:
        keys = Keyring(["k1"])
        assert keys.index("a=1", keys.sign("a=1")) == 0

    def test_older_key(self) -> None:
        sig = Keyring(["k1"]).sign("a=1")
        assert Keyring(["k3", "k2", "k1"]).index("a=1", sig) == 2

    def test_unknown_key(self) -> None:
        sig = Keyring(["other"]).sign("a=1")
        assert Keyring(["k1"]).index("a=1", sig) == -1

    def test_tampered_signature(self) -> None:
        keys = Keyring(["k1"])
        assert keys.index("a=1", _tamper(keys.sign("a=1"))) == -1

    def test_wrong_data(self) -> None:
        keys = Keyring(["k1"])
        assert keys.index("a=2", keys.sign("a=1")) == -1

    @pytest.mark.parametrize("garbage", ["", "!!!", "not base64 at all", "\xe9\xe9"])
    def test_garbage_signature(self, garbage: str) -> None:
        assert Keyring(["k1"]).index("a=1", garbage) == -1

    def test_verify(self) -> None:
        keys = Keyring(["k1"])
        assert keys.verify("a=1", keys.sign("a=1"))
        assert not keys.verify("a=1", "nope")


class TestRotate:
    def test_new_key_signs(self) -> None:
        rotated = Keyring(["k1"]).rotate("k2")

        assert len(rotated) == 2
        assert rotated.sign("a=1") == Keyring(["k2"]).sign("a=1")
        assert rotated.index("a=1", Keyring(["k1"]).sign("a=1")) == 1

    def test_keep_drops_oldest(self) -> None:
        rotated = Keyring(["k2", "k1"]).rotate("k3", keep=2)

        assert len(rotated) == 2
        assert rotated.index("a=1", Keyring(["k1"]).sign("a=1")) == -1

    def test_keeps_digest(self) -> None:
        assert Keyring(["k1"], digest="sha512").rotate("k2").digest == "sha512"

    def test_keep_must_be_positive(self) -> None:
        with pytest.raises(ConfigurationError, match="keep must be at least 1"):
            Keyring(["k1"]).rotate("k2", keep=0)

    def test_original_unchanged(self) -> None:
        keys = Keyring(["k1"])
        keys.rotate("k2")
        assert len(keys) == 1
