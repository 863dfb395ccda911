"""Request-scoped cookie jar with rotating-key signatures.

A ``CookieJar`` lives for exactly one request/response exchange. It is
seeded from the request's ``Cookie`` header, and every mutation is
mirrored twice: into its own store (so later reads in the same handler
see the change) and onto the response as a ``Set-Cookie`` directive.

Signed cookies travel as a pair -- ``name`` and ``name.sig`` -- where the
shadow holds a keyring signature over ``"name=value"``. The pair is
created, re-signed, and deleted together.

Usage::

    from crumb import CookieJar, ResponseCookies

    response = ResponseCookies()
    jar = CookieJar(request_cookie_header, response, keys=["s3cret"], secure=True)

    jar.set("theme", "dark", max_age="30 days", samesite="lax")
    jar.get("theme")  # "dark", verified against theme.sig

All validation and policy checks run before the first directive of a
call is emitted, so a call that raises leaves no trace.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from crumb.config import JarConfig
from crumb.encoder import Clock, Expires, MaxAge, encode_cookie, utcnow
from crumb.errors import ConfigurationError, PolicyError
from crumb.http.cookies import EPOCH, SetCookie, parse_cookies
from crumb.http.response import CookieSink
from crumb.signing import Keyring
from crumb.store import CookieStore
from crumb.validation import check_field, normalize_samesite

logger = logging.getLogger("crumb.jar")

# Name suffix of the shadow cookie holding a signature
SIGNATURE_SUFFIX = ".sig"


def signature_name(name: str) -> str:
    """Name of the shadow cookie that carries *name*'s signature."""
    return f"{name}{SIGNATURE_SUFFIX}"


class CookieJar:
    """Read, write, and delete the cookies of one request/response exchange.

    ``keys`` is a sequence of secrets (most recent first) or a prebuilt
    ``Keyring``. With keys configured, ``get`` and ``set`` sign by default.
    ``secure`` must be True only when the connection itself is encrypted;
    it gates the ``secure`` cookie attribute.
    """

    __slots__ = ("_clock", "_keys", "_response", "_secure", "_store")

    def __init__(
        self,
        cookies: str | Mapping[str, str],
        response: CookieSink,
        *,
        keys: Sequence[str] | Keyring | None = None,
        secure: bool = False,
        clock: Clock = utcnow,
    ) -> None:
        if isinstance(keys, str):
            msg = "keys must be a sequence of keys or a Keyring, not a single string."
            raise ConfigurationError(msg)
        if keys is None or isinstance(keys, Keyring):
            self._keys = keys
        else:
            self._keys = Keyring(keys) if keys else None
        self._response = response
        self._secure = bool(secure)
        self._clock = clock
        pairs = parse_cookies(cookies) if isinstance(cookies, str) else cookies
        self._store = CookieStore(pairs.items())

    @classmethod
    def from_config(
        cls,
        cookies: str | Mapping[str, str],
        response: CookieSink,
        config: JarConfig,
        *,
        secure: bool = False,
        clock: Clock = utcnow,
    ) -> "CookieJar":
        """Build a jar from shared configuration.

        ``config.secure`` wins over *secure* when it is set.
        """
        return cls(
            cookies,
            response,
            keys=config.keyring(),
            secure=secure if config.secure is None else config.secure,
            clock=clock,
        )

    def __repr__(self) -> str:
        signed = "signed" if self._keys is not None else "unsigned"
        return f"<CookieJar {len(self._store)} cookies, {signed}, secure={self._secure}>"

    # -- Policy --

    def _signing(self, signed: bool | None) -> bool:
        return self._keys is not None if signed is None else signed

    def _require_keys(self) -> Keyring:
        if self._keys is None:
            msg = "keys are required for signed cookies"
            raise PolicyError(msg)
        return self._keys

    def _require_secure(self, secure: bool | None) -> None:
        if secure and not self._secure:
            msg = "Cannot send secure cookie over unencrypted connection"
            raise PolicyError(msg)

    def _emit(self, cookies: Sequence[SetCookie]) -> None:
        for cookie in cookies:
            self._response.set_cookie(cookie)
            if cookie.is_deletion:
                self._store.remove(cookie.name)
            else:
                self._store.write(cookie.name, cookie.value)

    # -- Public API --

    def get(self, name: str, *, signed: bool | None = None) -> str | None:
        """Return the cookie's value, or None.

        Signed reads (the default when keys are configured) return None
        unless ``name.sig`` verifies against some key. A forged signature
        is deleted; a signature from a retired key is re-issued under the
        current key before the value is returned. The refreshed signature
        is sent with default attributes (``Path=/``, ``HttpOnly``); a cookie
        set with another path or domain gets a second ``name.sig`` there.
        """
        signing = self._signing(signed)
        keys = self._require_keys() if signing else None
        value = self._store.read(name)
        if value is None or keys is None:
            return value

        sig_name = signature_name(name)
        signature = self._store.read(sig_name)
        if signature is None:
            logger.debug("Cookie %r has no signature; not trusted", name)
            return None

        data = f"{name}={value}"
        position = keys.index(data, signature)
        if position == -1:
            logger.warning("Signature mismatch for cookie %r; discarding signature", name)
            self.delete(sig_name)
            return None
        if position > 0:
            logger.debug("Cookie %r signed with retired key %d; re-signing", name, position)
            self._emit([encode_cookie(sig_name, keys.sign(data), now=self._clock)])
        return value

    def set(
        self,
        name: str,
        value: Any,
        *,
        max_age: MaxAge | None = None,
        expires: Expires | None = None,
        path: str | None = None,
        domain: str | None = None,
        secure: bool | None = None,
        httponly: bool | None = None,
        signed: bool | None = None,
        overwrite: bool = False,
        samesite: str | bool | None = None,
    ) -> bool:
        """Set a cookie; return True if any directive was emitted.

        ``value=None`` deletes the cookie instead and returns what
        ``delete`` returns. An existing cookie is left alone unless
        ``overwrite=True`` -- the first write of a name wins.

        Defaults: ``path="/"``, ``httponly=True``, ``secure=False``,
        ``signed`` = whether keys are configured.

        Raises ``ValidationError`` for malformed input and ``PolicyError``
        for a secure cookie on an insecure connection or signing without
        keys; either way nothing is emitted.
        """
        if value is None:
            return self.delete(
                name,
                path=path,
                domain=domain,
                secure=secure,
                httponly=httponly,
                samesite=samesite,
                signed=signed,
            )
        if not isinstance(value, str):
            value = str(value)

        check_field("name", name)
        check_field("value", value)
        if path is not None:
            check_field("path", path)
        if domain is not None:
            check_field("domain", domain)
        if samesite is not None:
            samesite = normalize_samesite(samesite)

        if not overwrite and self._store.contains(name):
            logger.debug("Cookie %r already set; pass overwrite=True to replace it", name)
            return False

        self._require_secure(secure)
        keys = self._require_keys() if self._signing(signed) else None

        cookie = encode_cookie(
            name,
            value,
            max_age=max_age,
            expires=expires,
            path="/" if path is None else path,
            domain=domain,
            secure=bool(secure),
            httponly=True if httponly is None else httponly,
            samesite=samesite,
            now=self._clock,
        )
        cookies = [cookie]
        if keys is not None:
            signature = keys.sign(f"{name}={value}")
            cookies.append(replace(cookie, name=signature_name(name), value=signature))
        self._emit(cookies)
        return True

    def has(self, name: str) -> bool:
        """True if the jar knows a value for *name*. Signatures are not checked."""
        return self._store.contains(name)

    def delete(
        self,
        name: str,
        *,
        path: str | None = None,
        domain: str | None = None,
        secure: bool | None = None,
        httponly: bool | None = None,
        samesite: str | bool | None = None,
        signed: bool | None = None,
    ) -> bool:
        """Expire a cookie (and its signature); return whether it was known.

        Browsers only drop a cookie when path, domain, and the other
        attributes match the ones it was set with. Pass them here for
        cookies set with non-default attributes; without any, a minimal
        ``Path=/`` expiring directive is sent.
        """
        check_field("name", name)
        names = [name]
        sig_name = signature_name(name)
        if not name.endswith(SIGNATURE_SUFFIX) and (
            self._store.contains(sig_name) or self._signing(signed)
        ):
            names.append(sig_name)

        attributes = (path, domain, secure, httponly, samesite)
        if all(option is None for option in attributes):
            cookies = [SetCookie.expired(n) for n in names]
        else:
            if path is not None:
                check_field("path", path)
            if domain is not None:
                check_field("domain", domain)
            self._require_secure(secure)
            expired = encode_cookie(
                name,
                "",
                max_age=0,
                expires=EPOCH,
                path="/" if path is None else path,
                domain=domain,
                secure=bool(secure),
                httponly=True if httponly is None else httponly,
                samesite=samesite,
                now=self._clock,
            )
            cookies = [replace(expired, name=n) for n in names]

        existed = self._store.contains(name)
        self._emit(cookies)
        return existed

    def clear(self) -> None:
        """Expire every cookie the jar knows, signatures included."""
        names = self._store.names()
        self._emit([SetCookie.expired(name) for name in names])
        logger.debug("Cleared %d cookies", len(names))