"""
Request dispatcher for API Gateway proxy events.

Routes are an explicit list of Route(method, path, handler) entries built once
per process. Resolution is an exact, case-sensitive string match on both the
HTTP method and the path; for REST API events the path is the resource template
(`/tables/{tableId}`), so placeholders are matched literally and never expanded.
Anything unregistered yields a 404 response without calling a handler.

The dispatcher does not authenticate callers. Caller identity, where a handler
needs it, is the claim attached to the request context by the upstream API
Gateway authorizer and is trusted as-is (see handlers.utils.auth).
"""

from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from serverless_tasks.handlers.utils.observability import count_metric, logger, tracer
from serverless_tasks.handlers.utils.responses import create_api_response

RouteHandler = Callable[[Dict[str, Any]], Dict[str, Any]]

UNKNOWN_METHOD = 'UNKNOWN'
DEFAULT_PATH = '/'


class Route(NamedTuple):
    """A single (method, path) registration."""

    method: str
    path: str
    handler: RouteHandler


def extract_route_key(event: Dict[str, Any]) -> Tuple[str, str]:
    """
    Get the (method, path) pair from a REST (v1) or HTTP API (v2) event.

    REST events carry `httpMethod` and the matched `resource` template; HTTP API
    events carry `requestContext.http.method` and `rawPath`.
    """
    request_context = event.get('requestContext') or {}
    http_context = request_context.get('http') or {}

    method = event.get('httpMethod') or http_context.get('method') or UNKNOWN_METHOD
    path = event.get('resource') or event.get('rawPath') or event.get('path') or DEFAULT_PATH
    return method, path


class RouteDispatcher:
    """Maps (method, path) pairs to handler callables."""

    def __init__(self, routes: Iterable[Route], cors_enabled: bool = True):
        self.cors_enabled = cors_enabled
        self._routes: Dict[Tuple[str, str], RouteHandler] = {}
        for route in routes:
            key = (route.method, route.path)
            if key in self._routes:
                raise ValueError(f"Duplicate route registration: {route.method} {route.path}")
            self._routes[key] = route.handler

    @property
    def routes(self) -> List[Tuple[str, str]]:
        return list(self._routes)

    def match(self, method: str, path: str) -> Optional[RouteHandler]:
        return self._routes.get((method, path))

    def not_found(self, method: str, path: str) -> Dict[str, Any]:
        logger.warning("No route registered", extra={"http_method": method, "path": path})
        count_metric("RouteNotFound")
        return create_api_response(
            status_code=404,
            body={"message": "Not Found"},
            cors_enabled=self.cors_enabled,
        )

    @tracer.capture_method
    def resolve(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """Invoke the handler registered for the event's route, or answer 404."""
        method, path = extract_route_key(event)
        tracer.put_annotation("route", f"{method} {path}")

        handler = self.match(method, path)
        if handler is None:
            return self.not_found(method, path)

        logger.debug("Route matched", extra={"http_method": method, "path": path})
        return handler(event)
