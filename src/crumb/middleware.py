"""ASGI middleware -- one cookie jar per request.

Builds a ``CookieJar`` from the request's ``Cookie`` headers, makes it
available via ``get_cookie_jar()`` from any handler, then appends the
jar's ``Set-Cookie`` directives to the response start message.

Usage::

    from crumb.config import JarConfig
    from crumb.middleware import CookieJarMiddleware, get_cookie_jar

    app = CookieJarMiddleware(app, JarConfig(keys=("new-secret", "old-secret")))

    # In a handler:
    jar = get_cookie_jar()
    visits = int(jar.get("visits") or 0) + 1
    jar.set("visits", visits, overwrite=True)
"""

import logging
from contextvars import ContextVar

from crumb._internal.asgi import ASGIApp, Message, Receive, Scope, Send, is_secure_scope
from crumb.config import JarConfig
from crumb.http.cookies import cookie_header
from crumb.http.response import ResponseCookies
from crumb.jar import CookieJar

logger = logging.getLogger("crumb.middleware")

# -- Jar ContextVar --

_jar_var: ContextVar[CookieJar | None] = ContextVar("crumb_cookie_jar", default=None)


def get_cookie_jar() -> CookieJar:
    """Return the current request's cookie jar.

    Raises ``LookupError`` if called outside a request with
    ``CookieJarMiddleware`` active.
    """
    jar = _jar_var.get()
    if jar is None:
        msg = (
            "No active cookie jar. Ensure CookieJarMiddleware wraps "
            "the app before accessing cookies."
        )
        raise LookupError(msg)
    return jar


class CookieJarMiddleware:
    """Attach a request-scoped ``CookieJar`` to every HTTP request.

    The keyring is built once from ``config`` and shared read-only by
    every jar. Connection security comes from ``config.secure`` when set,
    otherwise from the scope's scheme.

    Errors raised by the jar propagate to the caller; the middleware
    does not translate them into responses.
    """

    __slots__ = ("_app", "_config", "_keys")

    def __init__(self, app: ASGIApp, config: JarConfig | None = None) -> None:
        self._app = app
        self._config = config or JarConfig()
        self._keys = self._config.keyring()

    def _build_jar(self, scope: Scope, response: ResponseCookies) -> CookieJar:
        secure = self._config.secure
        if secure is None:
            secure = is_secure_scope(scope)
        header = cookie_header(scope.get("headers", ()))
        return CookieJar(header, response, keys=self._keys, secure=secure)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        response = ResponseCookies()
        jar = self._build_jar(scope, response)
        scope.setdefault("state", {})["cookie_jar"] = jar

        async def send_with_cookies(message: Message) -> None:
            if message["type"] == "http.response.start" and len(response):
                headers = list(message.get("headers", ()))
                headers.extend(response.raw())
                message["headers"] = headers
                logger.debug("Emitting %d Set-Cookie headers", len(response))
            await send(message)

        token = _jar_var.set(jar)
        try:
            await self._app(scope, receive, send_with_cookies)
        finally:
            _jar_var.reset(token)
