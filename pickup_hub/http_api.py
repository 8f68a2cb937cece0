"""WSGI application that routes pick-up point requests through logging and auth."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any, Protocol

from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound
from werkzeug.routing import BaseConverter, Map, Rule
from werkzeug.wrappers import Request, Response

from pickup_hub.model import HttpRequest, RequestMessage

logger = logging.getLogger(__name__)

View = Callable[..., Response]


class Sender(Protocol):
    def send_message(self, message: RequestMessage) -> None: ...


class _DigitsConverter(BaseConverter):
    regex = "[0-9]+"


def _basic_credentials(request: Request) -> tuple[str, str] | None:
    auth = request.authorization
    if auth is None or (auth.type or "").lower() != "basic":
        return None
    return auth.username or "", auth.password or ""


def _describe(request: Request) -> HttpRequest:
    url = request.path
    if request.query_string:
        url += "?" + request.query_string.decode("latin-1")
    credentials = _basic_credentials(request)
    return HttpRequest(
        method=request.method,
        url=url,
        body=request.get_data(cache=True),
        login=credentials[0] if credentials else "",
    )


class AuthMiddleware:
    """Lets through only requests with basic credentials of a known user."""

    def __init__(self, users: Iterable[tuple[str, str]]) -> None:
        self._users = list(users)

    def _is_valid(self, login: str, secret: str) -> bool:
        return any(login == user and secret == known for user, known in self._users)

    def wrap(self, view: View) -> View:
        @functools.wraps(view)
        def guarded(request: Request, **kwargs: Any) -> Response:
            credentials = _basic_credentials(request)
            if credentials is None or not self._is_valid(*credentials):
                return Response(status=401)
            return view(request, **kwargs)

        return guarded


class LogMiddleware:
    """Sends a description of every routed request before handling it."""

    def __init__(self, sender: Sender) -> None:
        self._sender = sender

    def wrap(self, view: View) -> View:
        @functools.wraps(view)
        def logged(request: Request, **kwargs: Any) -> Response:
            message = RequestMessage(caught_time=datetime.now(timezone.utc), request=_describe(request))
            try:
                self._sender.send_message(message)
            except Exception as exc:
                logger.error("%s", exc)
                return Response()
            return view(request, **kwargs)

        return logged


class _Application:
    def __init__(self, url_map: Map, views: dict[str, View]) -> None:
        self._url_map = url_map
        self._views = views

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        adapter = self._url_map.bind_to_environ(environ)
        try:
            endpoint, args = adapter.match()
        except NotFound:
            response = Response("404 page not found\n", status=404, mimetype="text/plain")
        except MethodNotAllowed:
            response = Response(status=405)
        except HTTPException as exc:
            return exc(environ, start_response)
        else:
            response = self._views[endpoint](Request(environ), **args)
        return response(environ, start_response)


def make_app(handler: Any, auth_middleware: AuthMiddleware, log_middleware: LogMiddleware) -> _Application:
    """Build the WSGI app; matched routes pass the log middleware, then auth."""
    url_map = Map(
        [
            Rule("/pickpoint", methods=["POST"], endpoint="create"),
            Rule("/pickpoint", methods=["PUT"], endpoint="update"),
            Rule("/pickpoint/<digits:point_id>", methods=["DELETE"], endpoint="delete"),
            Rule("/pickpoint/<digits:point_id>", methods=["GET"], endpoint="read"),
        ],
        converters={"digits": _DigitsConverter},
        merge_slashes=False,
    )
    views = {
        name: log_middleware.wrap(auth_middleware.wrap(getattr(handler, name)))
        for name in ("create", "update", "delete", "read")
    }
    return _Application(url_map, views)