"""Crumb: request-scoped cookie jars with rotating-key signatures.

Reads the request's cookies, writes ``Set-Cookie`` directives, and keeps
signed cookies honest across secret rotation.

Basic usage::

    from crumb import CookieJar, ResponseCookies

    response = ResponseCookies()
    jar = CookieJar("theme=dark", response, keys=["s3cret"])

    jar.set("last_visit", "1700000000", max_age="30 days")
    response.headers()  # [("set-cookie", "last_visit=..."), ("set-cookie", "last_visit.sig=...")]

ASGI::

    from crumb import CookieJarMiddleware, JarConfig

    app = CookieJarMiddleware(app, JarConfig(keys=("s3cret",)))
"""

__version__ = "0.1.0-dev"
__all__ = [
    "ConfigurationError",
    "CookieJar",
    "CookieJarMiddleware",
    "CookieSink",
    "CrumbError",
    "JarConfig",
    "Keyring",
    "PolicyError",
    "ResponseCookies",
    "SetCookie",
    "ValidationError",
    "get_cookie_jar",
    "parse_cookies",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import crumb`` fast while providing a clean top-level API.
    """
    if name == "CookieJar":
        from crumb.jar import CookieJar

        return CookieJar

    if name == "JarConfig":
        from crumb.config import JarConfig

        return JarConfig

    if name == "Keyring":
        from crumb.signing import Keyring

        return Keyring

    if name in ("SetCookie", "parse_cookies"):
        from crumb.http import cookies as _cookies

        return getattr(_cookies, name)

    if name in ("CookieSink", "ResponseCookies"):
        from crumb.http import response as _resp

        return getattr(_resp, name)

    if name in ("CookieJarMiddleware", "get_cookie_jar"):
        from crumb import middleware as _mw

        return getattr(_mw, name)

    if name in ("CrumbError", "ConfigurationError", "PolicyError", "ValidationError"):
        from crumb import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
