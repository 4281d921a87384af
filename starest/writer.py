"""JSON responses and error responses for the SensorThings REST interface."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, is_dataclass
from http import HTTPStatus
from typing import Any, Iterable

_COUNT_KEY = "@iot.count"
_BAD_REQUEST_MARKERS = (
    "Encoding not supported",
    "No matching token",
    "invalid input syntax",
    "Error executing query",
)


class ApiError(Exception):
    """An error that carries the HTTP status code to answer with."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value


class BadRequestError(ApiError):
    """The request was malformed."""

    status_code = HTTPStatus.BAD_REQUEST.value


class NotFoundError(ApiError):
    """The requested entity does not exist."""

    status_code = HTTPStatus.NOT_FOUND.value


class InternalServerError(ApiError):
    """The server failed to produce the response."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value


@dataclass
class QueryOptions:
    """OData query options of a request."""

    top: int | None = None
    skip: int | None = None
    count: bool | None = None
    filter: str | None = None
    orderby: list[str] | None = None
    expand: list[str] | None = None
    select: list[str] | None = None
    value: bool | None = None
    collection_count: bool | None = None
    ref: bool | None = None


@dataclass
class ResponseRecorder:
    """Collects the status, headers and body written for one response."""

    status: int = HTTPStatus.OK.value
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    _header_written: bool = field(default=False, repr=False)

    def write_header(self, status: int) -> None:
        """Set the status; only the first call has an effect."""
        if self._header_written:
            return
        self.status = status
        self._header_written = True

    def write(self, data: bytes) -> None:
        """Append to the body, sending status 200 if none was set."""
        if not self._header_written:
            self.write_header(HTTPStatus.OK.value)
        self.body += data

    def json(self) -> Any:
        """The body decoded as JSON."""
        return json.loads(self.body)


def _default(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def json_marshal(data: Any, safe_encoding: bool, indent_json: bool) -> bytes:
    """Encode data as JSON; with safe_encoding, '<', '>' and '&' stay literal."""
    if indent_json:
        text = json.dumps(
            data, default=_default, ensure_ascii=False, allow_nan=False, indent="   "
        )
    else:
        text = json.dumps(
            data, default=_default, ensure_ascii=False, allow_nan=False,
            separators=(",", ":"),
        )
    text = text.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")
    if not safe_encoding:
        text = (
            text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
        )
    return text.encode("utf-8")


def _raw(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _convert_for_value_response(body: bytes, query_options: QueryOptions) -> bytes:
    selected = query_options.select or []
    message = f"Unable to retrieve $value for [{' '.join(selected)}]"
    try:
        decoded = json.loads(body)
    except ValueError:
        decoded = None
    if not isinstance(decoded, dict) or not selected:
        raise InternalServerError(message)

    found: str | None = None
    for key, value in decoded.items():
        if key.lower() == selected[0]:
            found = _raw(value)
    if not found:
        raise BadRequestError(message)

    if found.startswith('"'):
        found = found[1:]
    if found.endswith('"'):
        found = found[:-1]
    return found.encode("utf-8")


def _convert_for_count_response(body: bytes) -> bytes:
    try:
        decoded = json.loads(body)
    except ValueError:
        decoded = None
    if isinstance(decoded, dict) and _COUNT_KEY in decoded:
        return _raw(decoded[_COUNT_KEY]).encode("utf-8")
    raise BadRequestError("/$count not available for endpoint")


def send_json_response(
    response: ResponseRecorder,
    status: int,
    data: Any,
    query_options: QueryOptions | None,
    indent_json: bool,
) -> None:
    """Write data as a JSON response with the given status."""
    response.headers["Content-Type"] = "application/json; charset=UTF-8"
    if data is None:
        return

    body = json_marshal(data, True, indent_json)
    if query_options is not None:
        try:
            if query_options.collection_count:
                body = _convert_for_count_response(body)
            elif query_options.value:
                body = _convert_for_value_response(body, query_options)
        except ApiError as error:
            send_error(response, [error], indent_json)
            return

    response.write_header(status)
    response.write(body)


def _api_error_in(error: BaseException) -> ApiError | None:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        if isinstance(current, ApiError):
            return current
        seen.add(id(current))
        current = current.__cause__
    return None


def send_error(
    response: ResponseRecorder,
    errors: Iterable[BaseException] | None,
    indent_json: bool,
) -> None:
    """Write an error response built from the given errors."""
    error_list = list(errors or [])
    messages = [str(error) for error in error_list]
    status = HTTPStatus.INTERNAL_SERVER_ERROR.value

    if error_list:
        if any(marker in messages[0] for marker in _BAD_REQUEST_MARKERS):
            status = HTTPStatus.BAD_REQUEST.value
        api_error = _api_error_in(error_list[0])
        if api_error is not None:
            status = api_error.status_code

    try:
        status_text = HTTPStatus(status).phrase
    except ValueError:
        status_text = ""

    payload = {"error": {"status": status_text, "code": status, "message": messages}}
    send_json_response(response, status, payload, None, indent_json)