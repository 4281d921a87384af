"""The root and version handlers, the full route table and a request router."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Iterable

from starest.methods import Route
from starest.observation_routes import (
    create_observations_routes,
    feature_of_interest_routes,
    observation_routes,
    observed_property_routes,
    sensor_routes,
)
from starest.reader import Request
from starest.thing_routes import (
    datastream_routes,
    historical_location_routes,
    location_routes,
    thing_routes,
)
from starest.writer import (
    ApiError,
    NotFoundError,
    ResponseRecorder,
    send_error,
    send_json_response,
)


class _MethodNotAllowedError(ApiError):
    status_code = HTTPStatus.METHOD_NOT_ALLOWED.value


def handle_api_root(response: ResponseRecorder, request: Request, api: Any) -> None:
    """Answer with the list of available resource endpoints."""
    send_json_response(
        response,
        HTTPStatus.OK.value,
        api.get_base_path_info(),
        None,
        api.config.indented_json,
    )


def handle_version(response: ResponseRecorder, request: Request, api: Any) -> None:
    """Answer with the server and API version information."""
    send_json_response(
        response,
        HTTPStatus.OK.value,
        api.get_version_info(),
        None,
        api.config.indented_json,
    )


def all_routes() -> list[Route]:
    """Every route the server answers."""
    return [
        Route("GET", "/version", handle_version),
        Route("GET", "/v1.0", handle_api_root),
        *thing_routes(),
        *datastream_routes(),
        *observed_property_routes(),
        *location_routes(),
        *sensor_routes(),
        *observation_routes(),
        *feature_of_interest_routes(),
        *historical_location_routes(),
        *create_observations_routes(),
    ]


class Router:
    """Sends each request to the handler of the first route that fits it."""

    def __init__(self, api: Any, routes: Iterable[Route] | None = None) -> None:
        self.api = api
        self.routes = list(routes) if routes is not None else all_routes()

    def dispatch(self, request: Request) -> ResponseRecorder:
        """Handle the request and return the recorded response."""
        response = ResponseRecorder()
        path_known = False
        for route in self.routes:
            params = route.match(request.method, request.path)
            if params is not None:
                request.path_params = params
                route.handler(response, request, self.api)
                return response
            if route.match(route.method, request.path) is not None:
                path_known = True

        if path_known:
            error: ApiError = _MethodNotAllowedError(
                f"Method {request.method} not allowed for {request.path}"
            )
        else:
            error = NotFoundError(f"No endpoint found for {request.path}")
        send_error(response, [error], self.api.config.indented_json)
        return response