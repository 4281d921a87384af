"""SensorThings entities and their parsing from JSON request bodies."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class EntityType(Enum):
    """The kinds of entity served by the SensorThings interface."""

    THING = "Thing"
    LOCATION = "Location"
    HISTORICAL_LOCATION = "HistoricalLocation"
    DATASTREAM = "Datastream"
    SENSOR = "Sensor"
    OBSERVED_PROPERTY = "ObservedProperty"
    OBSERVATION = "Observation"
    FEATURE_OF_INTEREST = "FeatureOfInterest"
    CREATE_OBSERVATIONS = "CreateObservations"
    VERSION = "Version"
    UNKNOWN = "Unknown"


_ENDPOINT_NAMES = {
    EntityType.THING: "Things",
    EntityType.LOCATION: "Locations",
    EntityType.HISTORICAL_LOCATION: "HistoricalLocations",
    EntityType.DATASTREAM: "Datastreams",
    EntityType.SENSOR: "Sensors",
    EntityType.OBSERVED_PROPERTY: "ObservedProperties",
    EntityType.OBSERVATION: "Observations",
    EntityType.FEATURE_OF_INTEREST: "FeaturesOfInterest",
    EntityType.CREATE_OBSERVATIONS: "CreateObservations",
    EntityType.VERSION: "Version",
    EntityType.UNKNOWN: "",
}

_ID_KEY = "@iot.id"
_SELF_LINK_KEY = "@iot.selfLink"

_STR = (str,)
_DICT = (dict,)
_LIST = (list,)
_ANY: tuple[type, ...] | None = None

_JSON_TYPE_NAMES = {
    str: "string",
    int: "number",
    float: "number",
    bool: "bool",
    dict: "object",
    list: "array",
}


def _json_type(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


@dataclass
class Entity:
    """Base of all entities: an id, a self link and typed JSON fields."""

    id: Any = None
    self_link: str | None = field(default=None, compare=False)

    entity_type: ClassVar[EntityType] = EntityType.UNKNOWN
    _fields: ClassVar[dict[str, tuple[str, tuple[type, ...] | None]]] = {}

    def parse_entity(self, data: bytes | str | None) -> None:
        """Fill this entity from a JSON object; raise ValueError if it does not fit."""
        if data is None or len(data) == 0:
            raise ValueError("unexpected end of JSON input")
        try:
            decoded = json.loads(data)
        except ValueError as error:
            raise ValueError(f"invalid JSON: {error}") from error
        if not isinstance(decoded, dict):
            raise ValueError(
                f"cannot unmarshal {_json_type(decoded)} into {type(self).__name__}"
            )

        updates: dict[str, Any] = {}
        if decoded.get(_ID_KEY) is not None:
            entity_id = decoded[_ID_KEY]
            if isinstance(entity_id, bool) or not isinstance(entity_id, (int, float, str)):
                raise ValueError(
                    f"cannot unmarshal {_json_type(entity_id)} into {_ID_KEY}"
                )
            updates["id"] = entity_id

        for key, (attribute, kinds) in self._fields.items():
            value = decoded.get(key)
            if value is None:
                continue
            if kinds is not None and not isinstance(value, kinds):
                raise ValueError(
                    f"cannot unmarshal {_json_type(value)} into field "
                    f"{type(self).__name__}.{key} of type {kinds[0].__name__}"
                )
            updates[attribute] = value

        for attribute, value in updates.items():
            setattr(self, attribute, value)

    def set_all_links(self, external_uri: str) -> None:
        """Set the self link of this entity below the given external URI."""
        identifier = "" if self.id is None else self.id
        name = _ENDPOINT_NAMES[self.entity_type]
        self.self_link = f"{external_uri}/v1.0/{name}({identifier})"

    def to_dict(self) -> dict[str, Any]:
        """The JSON object for this entity, leaving out unset fields."""
        result: dict[str, Any] = {}
        if self.id is not None:
            result[_ID_KEY] = self.id
        if self.self_link:
            result[_SELF_LINK_KEY] = self.self_link
        for key, (attribute, _) in self._fields.items():
            value = getattr(self, attribute)
            if value is not None:
                result[key] = value
        return result


@dataclass
class Thing(Entity):
    """An object of the physical or the information world."""

    name: str | None = None
    description: str | None = None
    properties: dict[str, Any] | None = None

    entity_type = EntityType.THING
    _fields = {
        "name": ("name", _STR),
        "description": ("description", _STR),
        "properties": ("properties", _DICT),
    }


@dataclass
class Location(Entity):
    """Where a Thing is or was."""

    name: str | None = None
    description: str | None = None
    encoding_type: str | None = None
    location: Any = None

    entity_type = EntityType.LOCATION
    _fields = {
        "name": ("name", _STR),
        "description": ("description", _STR),
        "encodingType": ("encoding_type", _STR),
        "location": ("location", _ANY),
    }


@dataclass
class HistoricalLocation(Entity):
    """A time at which a Thing was at its Locations."""

    time: str | None = None

    entity_type = EntityType.HISTORICAL_LOCATION
    _fields = {"time": ("time", _STR)}


@dataclass
class Datastream(Entity):
    """A series of Observations of one ObservedProperty by one Sensor."""

    name: str | None = None
    description: str | None = None
    unit_of_measurement: dict[str, Any] | None = None
    observation_type: str | None = None
    observed_area: dict[str, Any] | None = None
    phenomenon_time: str | None = None
    result_time: str | None = None

    entity_type = EntityType.DATASTREAM
    _fields = {
        "name": ("name", _STR),
        "description": ("description", _STR),
        "unitOfMeasurement": ("unit_of_measurement", _DICT),
        "observationType": ("observation_type", _STR),
        "observedArea": ("observed_area", _DICT),
        "phenomenonTime": ("phenomenon_time", _STR),
        "resultTime": ("result_time", _STR),
    }


@dataclass
class Sensor(Entity):
    """An instrument that observes a property."""

    name: str | None = None
    description: str | None = None
    encoding_type: str | None = None
    metadata: str | None = None

    entity_type = EntityType.SENSOR
    _fields = {
        "name": ("name", _STR),
        "description": ("description", _STR),
        "encodingType": ("encoding_type", _STR),
        "metadata": ("metadata", _STR),
    }


@dataclass
class ObservedProperty(Entity):
    """The phenomenon that a Datastream observes."""

    name: str | None = None
    description: str | None = None
    definition: str | None = None

    entity_type = EntityType.OBSERVED_PROPERTY
    _fields = {
        "name": ("name", _STR),
        "description": ("description", _STR),
        "definition": ("definition", _STR),
    }


@dataclass
class Observation(Entity):
    """A measured value of a property at a time."""

    phenomenon_time: str | None = None
    result: Any = None
    result_time: str | None = None
    result_quality: Any = None
    valid_time: str | None = None
    parameters: dict[str, Any] | None = None

    entity_type = EntityType.OBSERVATION
    _fields = {
        "phenomenonTime": ("phenomenon_time", _STR),
        "result": ("result", _ANY),
        "resultTime": ("result_time", _STR),
        "resultQuality": ("result_quality", _ANY),
        "validTime": ("valid_time", _STR),
        "parameters": ("parameters", _DICT),
    }


@dataclass
class FeatureOfInterest(Entity):
    """The feature that an Observation is about."""

    name: str | None = None
    description: str | None = None
    encoding_type: str | None = None
    feature: Any = None

    entity_type = EntityType.FEATURE_OF_INTEREST
    _fields = {
        "name": ("name", _STR),
        "description": ("description", _STR),
        "encodingType": ("encoding_type", _STR),
        "feature": ("feature", _ANY),
    }


@dataclass
class CreateObservations(Entity):
    """A batch of observation values for one Datastream."""

    datastream: dict[str, Any] | None = None
    components: list[str] | None = None
    data_array: list[Any] | None = None

    entity_type = EntityType.CREATE_OBSERVATIONS
    _fields = {
        "Datastream": ("datastream", _DICT),
        "components": ("components", _LIST),
        "dataArray": ("data_array", _LIST),
    }