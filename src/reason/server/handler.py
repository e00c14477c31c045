"""ASGI handler — translates ASGI scope/messages to reason types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through the router, and sends the
Response back through ASGI send().
"""

from urllib.parse import quote

from reason._internal.asgi import Receive, Scope, Send
from reason.errors import HTTPError
from reason.http.request import Request
from reason.http.response import Response, redirect
from reason.routing.router import Router
from reason.server.sender import send_response
from reason.server.writer import write_http_error, write_internal_error

# Methods a browser may replay as GET after a permanent redirect
_SAFE_METHODS = frozenset({"GET", "HEAD"})


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    redirect_trailing_slash: bool = True,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await dispatch(request, router, redirect_trailing_slash=redirect_trailing_slash)
    except HTTPError as exc:
        response = write_http_error(exc, request)
    except Exception as exc:
        response = write_internal_error(exc, request)

    await send_response(response, send)


async def dispatch(
    request: Request,
    router: Router,
    *,
    redirect_trailing_slash: bool = True,
) -> Response:
    """Match the request and run the route's endpoint.

    Raises whatever the router or endpoint raises; callers turn that
    into a response.
    """
    match = router.match(request.method, request.path)

    if redirect_trailing_slash and len(request.path) > 1 and request.path.endswith("/"):
        return _canonical_redirect(request)

    return await match.route.handler(request.with_path_params(match.path_params))


def _canonical_redirect(request: Request) -> Response:
    """Redirect ``/books/`` to ``/books``, keeping the query string."""
    # scope["path"] is percent-decoded; the header must be ASCII again
    location = quote(request.path.rstrip("/") or "/", safe="/")
    qs = request.query.raw
    if qs:
        location = f"{location}?{qs.decode('latin-1')}"
    status = 301 if request.method in _SAFE_METHODS else 307
    return redirect(location, status=status)
