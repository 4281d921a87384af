"""Reading ids, headers, bodies and query options from incoming requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import parse_qsl

from starest.entities import Entity
from starest.writer import BadRequestError, QueryOptions, ResponseRecorder, send_error


@dataclass
class Request:
    """An incoming HTTP request, with the variables its route matched."""

    method: str = "GET"
    path: str = "/"
    query: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    path_params: dict[str, str] = field(default_factory=dict)


def _header(request: Request, name: str) -> str:
    wanted = name.lower()
    return next(
        (value for key, value in request.headers.items() if key.lower() == wanted), ""
    )


def get_entity_id(request: Request) -> str:
    """The id inside the parentheses matched as '{id}', e.g. '35' for '(35)'."""
    value = request.path_params.get("id", "")
    if len(value) < 2:
        raise ValueError(f"no entity id in request path {request.path!r}")
    return value[1:-1]


def check_content_type(
    response: ResponseRecorder, request: Request, indent_json: bool
) -> bool:
    """Accept requests without Content-Type or with application/json; else answer 400."""
    content_type = _header(request, "Content-Type")
    if content_type and "application/json" not in content_type:
        send_error(
            response,
            [BadRequestError("Missing or wrong Content-Type, accepting: application/json")],
            indent_json,
        )
        return False
    return True


def check_and_get_body(
    response: ResponseRecorder, request: Request, indent_json: bool
) -> bytes | None:
    """The request body, or None after answering 400 when there is none."""
    if request.body is None:
        send_error(response, [BadRequestError("No body found in request")], indent_json)
        return None
    return bytes(request.body)


def parse_entity(entity: Entity, data: bytes | str | None) -> None:
    """Fill the entity from data, raising BadRequestError if that fails."""
    try:
        entity.parse_entity(data)
    except ValueError as error:
        raise BadRequestError(str(error)) from error


def _non_negative(key: str, value: str, problems: list[str]) -> int | None:
    try:
        number = int(value)
    except ValueError:
        problems.append(f"Invalid value for {key}: {value!r} is not an integer")
        return None
    if number < 0:
        problems.append(f"Invalid value for {key}: {number} is negative")
        return None
    return number


def _items(key: str, value: str, problems: list[str]) -> list[str] | None:
    items = [item.strip() for item in value.split(",")]
    if not all(items):
        problems.append(f"Invalid value for {key}: {value!r}")
        return None
    return items


def _order_items(key: str, value: str, problems: list[str]) -> list[str] | None:
    items = _items(key, value, problems)
    if items is None:
        return None
    for item in items:
        words = item.split()
        if len(words) > 2 or (len(words) == 2 and words[1].lower() not in ("asc", "desc")):
            problems.append(f"Invalid value for {key}: {item!r}")
            return None
    return items


def parse_query_options(request: Request, max_entities: int) -> QueryOptions:
    """Read the OData query options of a request; raise ValueError if any is invalid."""
    options = QueryOptions(top=max_entities)
    problems: list[str] = []

    for key, value in parse_qsl(request.query, keep_blank_values=True):
        if not key.startswith("$"):
            continue
        if key == "$top":
            top = _non_negative(key, value, problems)
            if top is not None:
                options.top = min(top, max_entities)
        elif key == "$skip":
            options.skip = _non_negative(key, value, problems)
        elif key == "$count":
            if value.lower() not in ("true", "false"):
                problems.append(f"Invalid value for $count: {value!r}")
            else:
                options.count = value.lower() == "true"
        elif key == "$filter":
            if not value.strip():
                problems.append("Invalid value for $filter: empty expression")
            else:
                options.filter = value
        elif key == "$orderby":
            options.orderby = _order_items(key, value, problems)
        elif key == "$expand":
            options.expand = _items(key, value, problems)
        elif key == "$select":
            options.select = _items(key, value, problems)
        else:
            problems.append(f"Query parameter '{key}' is not supported")

    if problems:
        raise ValueError("; ".join(problems))

    segments = [segment for segment in request.path.split("/") if segment]
    if segments:
        last = segments[-1]
        if last == "$value":
            options.value = True
            if len(segments) > 1:
                options.select = [segments[-2]]
        elif last == "$count":
            options.collection_count = True
        elif last == "$ref":
            options.ref = True
    return options