"""Routes and handlers for Observations, ObservedProperties, Sensors,
FeaturesOfInterest and batch creation of Observations.

Handlers are called as ``handler(response, request, api)``. The ``api`` object
has a ``config`` attribute (a ServerConfig) and the data methods named in the
routes. Each data method returns the data to send, or raises an exception that
becomes the error response.
"""

from __future__ import annotations

from starest.entities import (
    CreateObservations,
    FeatureOfInterest,
    Observation,
    ObservedProperty,
    Sensor,
)
from starest.methods import (
    Route,
    handle_patch_request,
    handle_post_request,
    handle_put_request,
)
from starest.thing_routes import _delete, _get, _with_body


def observation_routes() -> list[Route]:
    """The routes serving Observations."""
    return [
        Route("GET", "/v1.0/observations", _get("get_observations", False)),
        Route("GET", "/v1.0/observations{id}", _get("get_observation", True)),
        Route(
            "GET",
            "/v1.0/datastreams{id}/observations",
            _get("get_observations_by_datastream", True),
        ),
        Route(
            "GET",
            "/v1.0/featureofinterest{id}/observations",
            _get("get_observations_by_feature_of_interest", True),
        ),
        Route(
            "GET",
            "/v1.0/featuresofinterest{id}/observations",
            _get("get_observations_by_feature_of_interest", True),
        ),
        Route(
            "POST",
            "/v1.0/observations",
            _with_body(handle_post_request, "post_observation", Observation, False),
        ),
        Route(
            "POST",
            "/v1.0/datastreams{id}/observations",
            _with_body(
                handle_post_request, "post_observation_by_datastream", Observation, True
            ),
        ),
        Route("DELETE", "/v1.0/observations{id}", _delete("delete_observation")),
        Route(
            "PATCH",
            "/v1.0/observations{id}",
            _with_body(handle_patch_request, "patch_observation", Observation, True),
        ),
        Route(
            "PUT",
            "/v1.0/observations{id}",
            _with_body(handle_put_request, "put_observation", Observation, True),
        ),
    ]


def observed_property_routes() -> list[Route]:
    """The routes serving ObservedProperties."""
    return [
        Route("GET", "/v1.0/observedproperties", _get("get_observed_properties", False)),
        Route("GET", "/v1.0/observedproperties{id}", _get("get_observed_property", True)),
        Route(
            "GET",
            "/v1.0/datastreams{id}/observedproperty",
            _get("get_observed_property_by_datastream", True),
        ),
        Route(
            "POST",
            "/v1.0/observedproperties",
            _with_body(
                handle_post_request, "post_observed_property", ObservedProperty, False
            ),
        ),
        Route(
            "DELETE",
            "/v1.0/observedproperties{id}",
            _delete("delete_observed_property"),
        ),
        Route(
            "PATCH",
            "/v1.0/observedproperties{id}",
            _with_body(
                handle_patch_request, "patch_observed_property", ObservedProperty, True
            ),
        ),
        Route(
            "PUT",
            "/v1.0/observedproperties{id}",
            _with_body(handle_put_request, "put_observed_property", ObservedProperty, True),
        ),
    ]


def sensor_routes() -> list[Route]:
    """The routes serving Sensors."""
    return [
        Route("GET", "/v1.0/sensors", _get("get_sensors", False)),
        Route("GET", "/v1.0/sensors{id}", _get("get_sensor", True)),
        Route("GET", "/v1.0/datastreams{id}/sensor", _get("get_sensor_by_datastream", True)),
        Route(
            "POST",
            "/v1.0/sensors",
            _with_body(handle_post_request, "post_sensor", Sensor, False),
        ),
        Route("DELETE", "/v1.0/sensors{id}", _delete("delete_sensor")),
        Route(
            "PATCH",
            "/v1.0/sensors{id}",
            _with_body(handle_patch_request, "patch_sensor", Sensor, True),
        ),
        Route(
            "PUT",
            "/v1.0/sensors{id}",
            _with_body(handle_put_request, "put_sensor", Sensor, True),
        ),
    ]


def feature_of_interest_routes() -> list[Route]:
    """The routes serving FeaturesOfInterest."""
    return [
        Route(
            "GET", "/v1.0/featuresofinterest", _get("get_feature_of_interests", False)
        ),
        Route(
            "GET", "/v1.0/featuresofinterest{id}", _get("get_feature_of_interest", True)
        ),
        Route(
            "GET",
            "/v1.0/observations{id}/featureofinterest",
            _get("get_feature_of_interest_by_observation", True),
        ),
        Route(
            "POST",
            "/v1.0/featuresofinterest",
            _with_body(
                handle_post_request, "post_feature_of_interest", FeatureOfInterest, False
            ),
        ),
        Route(
            "DELETE",
            "/v1.0/featuresofinterest{id}",
            _delete("delete_feature_of_interest"),
        ),
        Route(
            "PATCH",
            "/v1.0/featuresofinterest{id}",
            _with_body(
                handle_patch_request, "patch_feature_of_interest", FeatureOfInterest, True
            ),
        ),
        Route(
            "PUT",
            "/v1.0/featuresofinterest{id}",
            _with_body(
                handle_put_request, "put_feature_of_interest", FeatureOfInterest, True
            ),
        ),
    ]


def create_observations_routes() -> list[Route]:
    """The route that creates a batch of Observations for one Datastream."""
    return [
        Route(
            "POST",
            "/v1.0/createobservations",
            _with_body(
                handle_post_request, "post_create_observations", CreateObservations, False
            ),
        ),
    ]