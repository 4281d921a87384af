"""Shared handling of GET, POST, PUT, PATCH and DELETE requests, and routes."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Callable

from starest.entities import Entity
from starest.reader import (
    Request,
    check_and_get_body,
    check_content_type,
    parse_entity,
    parse_query_options,
)
from starest.writer import (
    BadRequestError,
    QueryOptions,
    ResponseRecorder,
    send_error,
    send_json_response,
)

_VARIABLE = re.compile(r"\{(\w+)\}")


@dataclass
class ServerConfig:
    """Settings of the HTTP server that shape responses."""

    name: str = "SensorThings Server"
    host: str = "0.0.0.0"
    port: int = 8080
    external_uri: str = "http://localhost:8080"
    indented_json: bool = False
    max_entity_response: int = 200


@dataclass
class Route:
    """A method and path template, such as '/v1.0/things{id}', with its handler."""

    method: str
    path: str
    handler: Callable[..., Any]
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        parts = _VARIABLE.split(self.path)
        literals, names = parts[0::2], parts[1::2]
        regex = re.escape(literals[0]) + "".join(
            f"(?P<{name}>[^/]+){re.escape(literal)}"
            for name, literal in zip(names, literals[1:])
        )
        self._pattern = re.compile(regex)

    def match(self, method: str, path: str) -> dict[str, str] | None:
        """The path variables if method and path fit this route, else None."""
        if method.upper() != self.method.upper():
            return None
        found = self._pattern.fullmatch(path)
        return found.groupdict() if found else None


def handle_get_request(
    response: ResponseRecorder,
    request: Request,
    handler: Callable[[QueryOptions, str], Any],
    indent_json: bool,
    max_entities: int,
    external_uri: str,
) -> None:
    """Read query options, run the handler and answer with its data."""
    try:
        query_options = parse_query_options(request, max_entities)
    except ValueError as error:
        send_error(response, [error], indent_json)
        return

    try:
        data = handler(query_options, external_uri + request.path)
    except Exception as error:
        send_error(response, [error], indent_json)
        return

    send_json_response(response, HTTPStatus.OK.value, data, query_options, indent_json)


def _handle_body_request(
    response: ResponseRecorder,
    request: Request,
    entity: Entity,
    handler: Callable[[], Any],
    indent_json: bool,
    status: int,
) -> None:
    if not check_content_type(response, request, indent_json):
        return

    body = check_and_get_body(response, request, indent_json)
    if body is None:
        return

    try:
        parse_entity(entity, body)
    except BadRequestError as error:
        send_error(response, [error], indent_json)
        return

    try:
        data = handler()
    except Exception as error:
        send_error(response, [error], indent_json)
        return

    response.headers["Location"] = entity.self_link or ""
    send_json_response(response, status, data, None, indent_json)


def handle_post_request(
    response: ResponseRecorder,
    request: Request,
    entity: Entity,
    handler: Callable[[], Any],
    indent_json: bool,
) -> None:
    """Parse the body into entity, run the handler and answer 201."""
    _handle_body_request(
        response, request, entity, handler, indent_json, HTTPStatus.CREATED.value
    )


def handle_put_request(
    response: ResponseRecorder,
    request: Request,
    entity: Entity,
    handler: Callable[[], Any],
    indent_json: bool,
) -> None:
    """Parse the body into entity, run the handler and answer 200."""
    _handle_body_request(
        response, request, entity, handler, indent_json, HTTPStatus.OK.value
    )


def handle_patch_request(
    response: ResponseRecorder,
    request: Request,
    entity: Entity,
    handler: Callable[[], Any],
    indent_json: bool,
) -> None:
    """Parse the body into entity, run the handler and answer 200."""
    _handle_body_request(
        response, request, entity, handler, indent_json, HTTPStatus.OK.value
    )


def handle_delete_request(
    response: ResponseRecorder,
    request: Request,
    handler: Callable[[], Any],
    indent_json: bool,
) -> None:
    """Run the handler and answer 200 with no body, or with the error."""
    try:
        handler()
    except Exception as error:
        send_error(response, [error], indent_json)
        return
    send_json_response(response, HTTPStatus.OK.value, None, None, indent_json)