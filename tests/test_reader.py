import pytest

from starest.entities import (
    Datastream,
    FeatureOfInterest,
    HistoricalLocation,
    Location,
    Observation,
    ObservedProperty,
    Sensor,
    Thing,
)
from starest.reader import (
    Request,
    check_and_get_body,
    check_content_type,
    get_entity_id,
    parse_entity,
    parse_query_options,
)
from starest.writer import BadRequestError, ResponseRecorder


def test_get_entity_id():
    request = Request(path="/v1.0/Things(35)", path_params={"id": "(35)"})
    assert get_entity_id(request) == "35"


def test_get_entity_id_without_id_raises():
    with pytest.raises(ValueError):
        get_entity_id(Request(path="/v1.0/Things"))


def test_check_content_type_without_headers_is_true():
    response = ResponseRecorder()
    assert check_content_type(response, Request(path="/v1.0/Things(1)"), False) is True
    assert response.body == b""


def test_check_content_type_with_json_is_true():
    request = Request(path="/v1.0/Things(1)", headers={"Content-Type": "application/json"})
    assert check_content_type(ResponseRecorder(), request, False) is True


def test_check_content_type_header_name_is_case_insensitive():
    request = Request(headers={"content-type": "superformat"})
    response = ResponseRecorder()
    assert check_content_type(response, request, False) is False
    assert response.status == 400


def test_check_content_type_with_other_type_is_false():
    request = Request(path="/v1.0/Things(1)", headers={"Content-Type": "superformat"})
    response = ResponseRecorder()
    assert check_content_type(response, request, False) is False
    assert response.status == 400
    assert response.json()["error"]["code"] == 400


def test_check_and_get_body_with_no_body():
    response = ResponseRecorder()
    assert check_and_get_body(response, Request(path="/bla"), False) is None
    assert response.status == 400


def test_check_and_get_body_with_empty_body():
    response = ResponseRecorder()
    assert check_and_get_body(response, Request(path="/bla", body=b""), False) == b""
    assert response.status == 200
    assert response.body == b""


def test_parse_entity():
    thing = Thing()
    parse_entity(thing, b'{"name": "thing1", "description": "test thing 1"}')
    assert thing.name == "thing1"
    assert thing.description == "test thing 1"


@pytest.mark.parametrize(
    "cls",
    [Location, HistoricalLocation, Datastream, Sensor, ObservedProperty, Observation, FeatureOfInterest],
)
def test_parse_entity_without_data_is_bad_request(cls):
    with pytest.raises(BadRequestError) as info:
        parse_entity(cls(), None)
    assert info.value.status_code == 400


def test_query_options_default_top_is_max():
    options = parse_query_options(Request(path="/v1.0/Things"), 20)
    assert options.top == 20


def test_query_options_top_and_select():
    request = Request(path="/v1.0/Things", query="$top=1&$select=name,id,description")
    options = parse_query_options(request, 20)
    assert options.top == 1
    assert options.select == ["name", "id", "description"]


def test_query_options_top_is_capped():
    options = parse_query_options(Request(query="$top=500"), 20)
    assert options.top == 20


@pytest.mark.parametrize(
    "query", ["$sort=bla&$skip='10'", "$skip='10'", "$top=-1", "$count=maybe", "$orderby=name sideways"]
)
def test_query_options_invalid(query):
    with pytest.raises(ValueError):
        parse_query_options(Request(path="/things", query=query), 10)


def test_query_options_filter_and_orderby():
    request = Request(query="$filter=name eq 'test1'&$orderby=id desc,name")
    options = parse_query_options(request, 10)
    assert options.filter == "name eq 'test1'"
    assert options.orderby == ["id desc", "name"]


def test_query_options_value_from_path():
    options = parse_query_options(Request(path="/v1.0/Things(1)/name/$value"), 10)
    assert options.value is True
    assert options.select == ["name"]


def test_query_options_collection_count_from_path():
    options = parse_query_options(Request(path="/v1.0/Things/$count"), 10)
    assert options.collection_count is True
    assert options.value is None