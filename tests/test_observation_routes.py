import dataclasses
import json

import pytest

from starest.entities import FeatureOfInterest, Observation, ObservedProperty, Sensor
from starest.methods import ServerConfig
from starest.observation_routes import (
    create_observations_routes,
    feature_of_interest_routes,
    observation_routes,
    observed_property_routes,
    sensor_routes,
)
from starest.reader import Request
from starest.writer import NotFoundError, ResponseRecorder


def _mock_observation(i):
    return Observation(
        id=i, result=35, phenomenon_time="2017-07-17T07:03:09.194Z", result_quality="high"
    )


def _mock_observed_property(i):
    return ObservedProperty(
        id=i, name=f"sensor {i}", description=f"description of sensor {i}", definition="none"
    )


def _mock_sensor(i):
    return Sensor(
        id=i,
        name=f"sensor {i}",
        description=f"description of sensor {i}",
        encoding_type="PDF",
        metadata="none",
    )


def _mock_foi(i):
    return FeatureOfInterest(
        id=i,
        name=f"foi {i}",
        description=f"description of foi {i}",
        encoding_type="application/vnd.geo+json",
    )


def _one(factory, entity_id, name):
    try:
        number = int(entity_id)
    except (TypeError, ValueError):
        number = None
    if number != 1:
        raise NotFoundError(f"{name} does not exist")
    return factory(number)


def _many(factory):
    return {"@iot.count": 2, "value": [factory(1), factory(2)]}


class MockApi:
    config = ServerConfig(indented_json=True, max_entity_response=200, external_uri="localhost")

    def get_observation(self, i, qo, path):
        return _one(_mock_observation, i, "Observation")

    def get_observations(self, qo, path):
        return _many(_mock_observation)

    def get_observations_by_datastream(self, i, qo, path):
        return _many(_mock_observation)

    def get_observations_by_feature_of_interest(self, i, qo, path):
        return _many(_mock_observation)

    def post_observation(self, entity):
        return entity

    def post_observation_by_datastream(self, i, entity):
        return entity

    def patch_observation(self, i, entity):
        return entity

    def put_observation(self, i, entity):
        return entity

    def delete_observation(self, i):
        return None

    def get_observed_property(self, i, qo, path):
        return _one(_mock_observed_property, i, "ObservedProperty")

    def get_observed_properties(self, qo, path):
        return _many(_mock_observed_property)

    def get_observed_property_by_datastream(self, i, qo, path):
        return _one(_mock_observed_property, i, "ObservedProperty")

    def post_observed_property(self, entity):
        return entity

    def patch_observed_property(self, i, entity):
        return entity

    def put_observed_property(self, i, entity):
        return entity

    def delete_observed_property(self, i):
        return None

    def get_sensor(self, i, qo, path):
        return _one(_mock_sensor, i, "Sensor")

    def get_sensor_by_datastream(self, i, qo, path):
        return _one(_mock_sensor, i, "Sensor")

    def get_sensors(self, qo, path):
        return _many(_mock_sensor)

    def post_sensor(self, entity):
        return entity

    def patch_sensor(self, i, entity):
        return entity

    def put_sensor(self, i, entity):
        return entity

    def delete_sensor(self, i):
        return None

    def get_feature_of_interest(self, i, qo, path):
        return _one(_mock_foi, i, "featureOfInterest")

    def get_feature_of_interest_by_observation(self, i, qo, path):
        return _one(_mock_foi, 1, "featureOfInterest")

    def get_feature_of_interests(self, qo, path):
        return _many(_mock_foi)

    def post_feature_of_interest(self, entity):
        return entity

    def patch_feature_of_interest(self, i, entity):
        return entity

    def put_feature_of_interest(self, i, entity):
        return entity

    def delete_feature_of_interest(self, i):
        return None

    def post_create_observations(self, entity):
        return []


ROUTES = (
    observation_routes()
    + observed_property_routes()
    + sensor_routes()
    + feature_of_interest_routes()
    + create_observations_routes()
)

OBS_KEYS = ("@iot.id", "result", "phenomenonTime")
OP_KEYS = ("@iot.id", "name", "description")
SENSOR_KEYS = ("@iot.id", "name", "description", "encodingType", "metadata")
FOI_KEYS = ("@iot.id", "name", "description", "encodingType")


def _request(method, path, body=None):
    request = Request(method=method, path=path, body=body)
    response = ResponseRecorder()
    for route in ROUTES:
        params = route.match(method, path)
        if params is not None:
            request.path_params = params
            route.handler(response, request, MockApi())
            return response
    raise AssertionError(f"no route for {method} {path}")


def _body(entity):
    return json.dumps(entity.to_dict()).encode()


def _assert_entity(expected, returned, keys):
    wanted = expected.to_dict()
    for key in keys:
        assert returned.get(key) == wanted.get(key)


@pytest.mark.parametrize(
    "path, factory, keys",
    [
        ("/v1.0/observations(1)", _mock_observation, OBS_KEYS),
        ("/v1.0/observedproperties(1)", _mock_observed_property, OP_KEYS),
        ("/v1.0/datastreams(1)/observedproperty", _mock_observed_property, OP_KEYS),
        ("/v1.0/sensors(1)", _mock_sensor, SENSOR_KEYS),
        ("/v1.0/datastreams(1)/sensor", _mock_sensor, SENSOR_KEYS),
        ("/v1.0/featuresofinterest(1)", _mock_foi, FOI_KEYS),
        ("/v1.0/observations(1)/featureofinterest", _mock_foi, FOI_KEYS),
    ],
)
def test_get_single_entity(path, factory, keys):
    response = _request("GET", path)
    assert response.status == 200
    _assert_entity(factory(1), response.json(), keys)


@pytest.mark.parametrize(
    "path, factory, keys",
    [
        ("/v1.0/observations", _mock_observation, OBS_KEYS),
        ("/v1.0/datastreams(1)/observations", _mock_observation, OBS_KEYS),
        ("/v1.0/featuresofinterest(1)/observations", _mock_observation, OBS_KEYS),
        ("/v1.0/featureofinterest(1)/observations", _mock_observation, OBS_KEYS),
        ("/v1.0/observedproperties", _mock_observed_property, OP_KEYS),
        ("/v1.0/sensors", _mock_sensor, SENSOR_KEYS),
        ("/v1.0/featuresofinterest", _mock_foi, FOI_KEYS),
    ],
)
def test_get_collection(path, factory, keys):
    response = _request("GET", path)
    assert response.status == 200
    decoded = response.json()
    assert decoded["@iot.count"] == 2
    assert len(decoded["value"]) == 2
    for item in decoded["value"]:
        _assert_entity(factory(item["@iot.id"]), item, keys)


@pytest.mark.parametrize(
    "path, entity, keys",
    [
        ("/v1.0/observations", _mock_observation(1), OBS_KEYS),
        ("/v1.0/datastreams(1)/observations", _mock_observation(1), OBS_KEYS),
        ("/v1.0/observedproperties", _mock_observed_property(1), OP_KEYS),
        ("/v1.0/sensors", _mock_sensor(1), SENSOR_KEYS),
        ("/v1.0/featuresofinterest", _mock_foi(1), FOI_KEYS),
    ],
)
def test_post_entity(path, entity, keys):
    response = _request("POST", path, _body(entity))
    assert response.status == 201
    _assert_entity(entity, response.json(), keys)


@pytest.mark.parametrize("method", ["PUT", "PATCH"])
@pytest.mark.parametrize(
    "path, entity, keys",
    [
        (
            "/v1.0/observations(1)",
            dataclasses.replace(
                _mock_observation(1), phenomenon_time="2017-07-17T05:13:09.161Z"
            ),
            OBS_KEYS,
        ),
        (
            "/v1.0/observedproperties(1)",
            dataclasses.replace(_mock_observed_property(1), name="patched"),
            OP_KEYS,
        ),
        ("/v1.0/sensors(1)", dataclasses.replace(_mock_sensor(1), name="patched"), SENSOR_KEYS),
        (
            "/v1.0/featuresofinterest(1)",
            dataclasses.replace(_mock_foi(1), name="patched"),
            FOI_KEYS,
        ),
    ],
)
def test_put_and_patch_entity(method, path, entity, keys):
    response = _request(method, path, _body(entity))
    assert response.status == 200
    _assert_entity(entity, response.json(), keys)


@pytest.mark.parametrize(
    "path",
    [
        "/v1.0/observations(1)",
        "/v1.0/observedproperties(1)",
        "/v1.0/sensors(1)",
        "/v1.0/featuresofinterest(1)",
    ],
)
def test_delete_entity(path):
    response = _request("DELETE", path)
    assert response.status == 200
    assert response.body == b""


def test_get_missing_sensor_answers_not_found():
    response = _request("GET", "/v1.0/sensors(7)")
    assert response.status == 404
    assert response.json()["error"]["message"] == ["Sensor does not exist"]


def test_post_sensor_with_wrong_body_answers_bad_request():
    response = _request("POST", "/v1.0/sensors", b'{"name": 10}')
    assert response.status == 400


def test_post_observation_with_wrong_content_type_answers_bad_request():
    request = Request(
        method="POST",
        path="/v1.0/observations",
        headers={"Content-Type": "text/plain"},
        body=_body(_mock_observation(1)),
    )
    response = ResponseRecorder()
    route = next(r for r in observation_routes() if r.match("POST", "/v1.0/observations") is not None)
    route.handler(response, request, MockApi())
    assert response.status == 400


def test_create_observations():
    body = json.dumps(
        {
            "Datastream": {"@iot.id": 1},
            "components": ["phenomenonTime", "result"],
            "dataArray": [["2017-07-17T07:03:09.194Z", 20]],
        }
    ).encode()
    response = _request("POST", "/v1.0/createobservations", body)
    assert response.status == 201
    assert response.json() == []


def test_create_observations_with_wrong_body():
    response = _request("POST", "/v1.0/createobservations", b'{"components": 5}')
    assert response.status == 400