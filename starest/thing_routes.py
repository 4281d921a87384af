"""Routes and handlers for Things, Locations, HistoricalLocations and Datastreams.

Every handler is called as ``handler(response, request, api)``. The ``api``
object carries a ``config`` attribute (a ServerConfig) and the data methods
named in the routes below. Each data method returns the data to send, or
raises an exception that becomes the error response.
"""

from __future__ import annotations

from typing import Any, Callable

from starest.entities import Datastream, Entity, HistoricalLocation, Location, Thing
from starest.methods import (
    Route,
    handle_delete_request,
    handle_get_request,
    handle_patch_request,
    handle_post_request,
    handle_put_request,
)
from starest.reader import Request, get_entity_id
from starest.writer import QueryOptions, ResponseRecorder

Handler = Callable[[ResponseRecorder, Request, Any], None]
_BodyDispatch = Callable[[ResponseRecorder, Request, Entity, Callable[[], Any], bool], None]


def _get(api_method: str, by_id: bool) -> Handler:
    """A GET handler that calls api_method with the query options and path."""

    def handler(response: ResponseRecorder, request: Request, api: Any) -> None:
        config = api.config
        fetch = getattr(api, api_method)

        def run(query_options: QueryOptions, path: str) -> Any:
            if by_id:
                return fetch(get_entity_id(request), query_options, path)
            return fetch(query_options, path)

        handle_get_request(
            response,
            request,
            run,
            config.indented_json,
            config.max_entity_response,
            config.external_uri,
        )

    return handler


def _with_body(
    dispatch: _BodyDispatch, api_method: str, entity_class: type[Entity], by_id: bool
) -> Handler:
    """A handler that parses the body into a fresh entity and calls api_method."""

    def handler(response: ResponseRecorder, request: Request, api: Any) -> None:
        entity = entity_class()
        call = getattr(api, api_method)

        def run() -> Any:
            if by_id:
                return call(get_entity_id(request), entity)
            return call(entity)

        dispatch(response, request, entity, run, api.config.indented_json)

    return handler


def _delete(api_method: str) -> Handler:
    """A DELETE handler that calls api_method with the id from the path."""

    def handler(response: ResponseRecorder, request: Request, api: Any) -> None:
        remove = getattr(api, api_method)
        handle_delete_request(
            response,
            request,
            lambda: remove(get_entity_id(request)),
            api.config.indented_json,
        )

    return handler


def thing_routes() -> list[Route]:
    """The routes serving Things."""
    return [
        Route("GET", "/v1.0/things", _get("get_things", False)),
        Route("GET", "/v1.0/things{id}", _get("get_thing", True)),
        Route(
            "GET",
            "/v1.0/historicallocations{id}/thing",
            _get("get_thing_by_historical_location", True),
        ),
        Route("GET", "/v1.0/datastreams{id}/thing", _get("get_thing_by_datastream", True)),
        Route("GET", "/v1.0/locations{id}/things", _get("get_things_by_location", True)),
        Route(
            "POST",
            "/v1.0/things",
            _with_body(handle_post_request, "post_thing", Thing, False),
        ),
        Route("DELETE", "/v1.0/things{id}", _delete("delete_thing")),
        Route(
            "PATCH",
            "/v1.0/things{id}",
            _with_body(handle_patch_request, "patch_thing", Thing, True),
        ),
        Route(
            "PUT",
            "/v1.0/things{id}",
            _with_body(handle_put_request, "put_thing", Thing, True),
        ),
    ]


def location_routes() -> list[Route]:
    """The routes serving Locations."""
    return [
        Route("GET", "/v1.0/locations", _get("get_locations", False)),
        Route("GET", "/v1.0/locations{id}", _get("get_location", True)),
        Route(
            "GET",
            "/v1.0/historicallocations{id}/locations",
            _get("get_locations_by_historical_location", True),
        ),
        Route("GET", "/v1.0/things{id}/locations", _get("get_locations_by_thing", True)),
        Route(
            "POST",
            "/v1.0/locations",
            _with_body(handle_post_request, "post_location", Location, False),
        ),
        Route(
            "POST",
            "/v1.0/things{id}/locations",
            _with_body(handle_post_request, "post_location_by_thing", Location, True),
        ),
        Route("DELETE", "/v1.0/locations{id}", _delete("delete_location")),
        Route(
            "PATCH",
            "/v1.0/locations{id}",
            _with_body(handle_patch_request, "patch_location", Location, True),
        ),
        Route(
            "PUT",
            "/v1.0/locations{id}",
            _with_body(handle_put_request, "put_location", Location, True),
        ),
    ]


def historical_location_routes() -> list[Route]:
    """The routes serving HistoricalLocations."""
    return [
        Route(
            "GET", "/v1.0/historicallocations", _get("get_historical_locations", False)
        ),
        Route(
            "GET", "/v1.0/historicallocations{id}", _get("get_historical_location", True)
        ),
        Route(
            "GET",
            "/v1.0/things{id}/historicallocations",
            _get("get_historical_locations_by_thing", True),
        ),
        Route(
            "GET",
            "/v1.0/locations{id}/historicallocations",
            _get("get_historical_locations_by_location", True),
        ),
        Route(
            "POST",
            "/v1.0/historicallocations",
            _with_body(
                handle_post_request, "post_historical_location", HistoricalLocation, False
            ),
        ),
        Route(
            "DELETE",
            "/v1.0/historicallocations{id}",
            _delete("delete_historical_location"),
        ),
        Route(
            "PATCH",
            "/v1.0/historicallocations{id}",
            _with_body(
                handle_patch_request, "patch_historical_location", HistoricalLocation, True
            ),
        ),
        Route(
            "PUT",
            "/v1.0/historicallocations{id}",
            _with_body(
                handle_put_request, "put_historical_location", HistoricalLocation, True
            ),
        ),
    ]


def datastream_routes() -> list[Route]:
    """The routes serving Datastreams."""
    return [
        Route("GET", "/v1.0/datastreams", _get("get_datastreams", False)),
        Route("GET", "/v1.0/datastreams{id}", _get("get_datastream", True)),
        Route(
            "GET",
            "/v1.0/observedproperties{id}/datastreams",
            _get("get_datastreams_by_observed_property", True),
        ),
        Route(
            "GET",
            "/v1.0/observations{id}/datastream",
            _get("get_datastream_by_observation", True),
        ),
        Route(
            "GET", "/v1.0/sensors{id}/datastreams", _get("get_datastreams_by_sensor", True)
        ),
        Route(
            "GET", "/v1.0/things{id}/datastreams", _get("get_datastreams_by_thing", True)
        ),
        Route(
            "POST",
            "/v1.0/datastreams",
            _with_body(handle_post_request, "post_datastream", Datastream, False),
        ),
        Route(
            "POST",
            "/v1.0/things{id}/datastreams",
            _with_body(handle_post_request, "post_datastream_by_thing", Datastream, True),
        ),
        Route("DELETE", "/v1.0/datastreams{id}", _delete("delete_datastream")),
        Route(
            "PATCH",
            "/v1.0/datastreams{id}",
            _with_body(handle_patch_request, "patch_datastream", Datastream, True),
        ),
        Route(
            "PUT",
            "/v1.0/datastreams{id}",
            _with_body(handle_put_request, "put_datastream", Datastream, True),
        ),
    ]