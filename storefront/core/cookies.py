# storefront/core/cookies.py
from typing import Mapping

from fastapi import Request, Response

from storefront.core.config import get_settings

settings = get_settings()


def cookie_options(max_age: int | None = None) -> dict:
    """
    Options shared by every cookie this backend writes:
    httpOnly, SameSite=Lax, whole-site path, 30 days unless overridden.
    """
    return {
        "httponly": True,
        "secure": settings.COOKIE_SECURE,
        "samesite": "lax",
        "path": "/",
        "max_age": settings.COOKIE_MAX_AGE_S if max_age is None else max_age,
    }


class CookieJar:
    """
    Per-request view of the client's cookies.

    Reads come from the incoming request, overlaid with whatever this
    request has already written, so a value stored earlier in the request
    is visible to later reads. Writes are queued and flushed onto the
    outgoing response with `apply()`.
    """

    def __init__(self, incoming: Mapping[str, str] | None = None):
        self._values: dict[str, str] = dict(incoming or {})
        self._writes: dict[str, tuple[str, dict] | None] = {}

    def get(self, name: str) -> str | None:
        value = self._values.get(name)
        return value or None

    def set(self, name: str, value: str, max_age: int | None = None) -> None:
        self._values[name] = value
        self._writes[name] = (value, cookie_options(max_age))

    def delete(self, name: str) -> None:
        self._values.pop(name, None)
        self._writes[name] = None

    def apply(self, response: Response) -> Response:
        for name, write in self._writes.items():
            if write is None:
                response.delete_cookie(
                    name,
                    path="/",
                    secure=settings.COOKIE_SECURE,
                    httponly=True,
                    samesite="lax",
                )
            else:
                value, options = write
                response.set_cookie(name, value, **options)
        return response


def get_cookie_jar(request: Request) -> CookieJar:
    """
    FastAPI dependency yielding one CookieJar per request.

    Usage:

        @router.get("/example")
        def example(jar: CookieJar = Depends(get_cookie_jar)):
            ...
            return jar.apply(JSONResponse(...))
    """
    return CookieJar(request.cookies)
