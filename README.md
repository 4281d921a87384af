# starest

`starest` is the REST layer of a SensorThings API server. It reads requests,
parses entities from JSON bodies, reads OData query options, writes JSON
responses with the right status codes, and routes requests to handlers for
Things, Locations, HistoricalLocations, Datastreams, Sensors,
ObservedProperties, Observations, FeaturesOfInterest and batch observation
creation. It has no runtime dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `starest.timetools` converts time periods between ISO 8601
  (`2014-03-01T13:00:00Z/2015-05-11T15:30:00Z`) and the PostgreSQL range form
  (`["2014-03-01 13:00:00+00","2015-05-11 15:30:00+00"]`) with
  `iso8601_to_postgres_period` and `postgres_to_iso8601_period`. It also has
  `Period`, `get_period_from_postgres_string`, `parse_postgres_time`,
  `time_to_iso8601`, `time_to_postgres_format` and `to_time`. Malformed input
  raises `ValueError`.
- `starest.writer` writes responses to a `ResponseRecorder` (which holds
  `status`, `headers` and `body`): `send_json_response`, `send_error` and
  `json_marshal`. It defines `QueryOptions` and the error types `ApiError`,
  `BadRequestError` (400), `NotFoundError` (404) and `InternalServerError`
  (500), each carrying its `status_code`. When query options ask for
  `$count` or `$value`, the response body is reduced to the count or to the
  selected property's value.
- `starest.entities` defines `EntityType`, the base `Entity` with
  `parse_entity`, `set_all_links` and `to_dict`, and the entities `Thing`,
  `Location`, `HistoricalLocation`, `Datastream`, `Sensor`,
  `ObservedProperty`, `Observation`, `FeatureOfInterest` and
  `CreateObservations`.
- `starest.reader` defines `Request` and the helpers `get_entity_id`,
  `check_content_type`, `check_and_get_body`, `parse_entity` and
  `parse_query_options`. Query options understood are `$top` (capped at the
  maximum entity count), `$skip`, `$count`, `$filter`, `$orderby`, `$expand`
  and `$select`; any other `$` option is an error. A path ending in `$value`,
  `$count` or `$ref` sets the matching option.
- `starest.methods` holds `ServerConfig`, `Route` (a method and a path
  template such as `/v1.0/things{id}`) and the generic handlers
  `handle_get_request`, `handle_post_request` (answers 201),
  `handle_put_request`, `handle_patch_request` and `handle_delete_request`
  (answer 200).
- `starest.thing_routes` and `starest.observation_routes` build the routes for
  each entity kind: `thing_routes`, `location_routes`,
  `historical_location_routes`, `datastream_routes`, `observation_routes`,
  `observed_property_routes`, `sensor_routes`, `feature_of_interest_routes`
  and `create_observations_routes`.
- `starest.router` has `handle_api_root`, `handle_version`, `all_routes` and
  `Router`, whose `dispatch` sends a request to the first matching route and
  answers 404 for an unknown path or 405 for a known path with the wrong
  method.

## The api object

Handlers are called as `handler(response, request, api)`. The `api` object is
supplied by you. It needs a `config` attribute (a `ServerConfig`, giving
`indented_json`, `max_entity_response` and `external_uri`) and the data
methods named by the routes, for example:

- `get_things(query_options, path)`, `get_thing(id, query_options, path)`
- `post_thing(entity)`, `put_thing(id, entity)`, `patch_thing(id, entity)`,
  `delete_thing(id)`
- `get_base_path_info()` and `get_version_info()` for `/v1.0` and `/version`

Each method returns the data to send (entities are serialised through
`to_dict`), or raises an exception; an `ApiError` gives its own status code,
any other exception gives 500.

## Example

```python
from starest.entities import Thing
from starest.methods import ServerConfig
from starest.reader import Request
from starest.router import Router


class Api:
    config = ServerConfig()

    def get_thing(self, entity_id, query_options, path):
        return Thing(id=int(entity_id), name="lamp")


response = Router(Api()).dispatch(Request(method="GET", path="/v1.0/things(1)"))
response.status   # 200
response.json()   # {'@iot.id': 1, 'name': 'lamp'}
```

Period conversion:

```python
from starest.timetools import iso8601_to_postgres_period, postgres_to_iso8601_period

pg = iso8601_to_postgres_period("2014-03-01T13:00:00Z/2015-05-11T15:30:00Z")
# '["2014-03-01 13:00:00+00","2015-05-11 15:30:00+00"]'
postgres_to_iso8601_period(pg)
# '2014-03-01T13:00:00.000Z/2015-05-11T15:30:00.000Z'
```

Error responses have this shape:

```json
{"error": {"status": "Bad Request", "code": 400, "message": ["..."]}}
```

## What it does not do

`starest` does not listen on a socket or run an HTTP server: `Router.dispatch`
takes a `Request` object and returns a `ResponseRecorder`, and connecting it
to a real server is up to you. It stores no data and evaluates no `$filter`,
`$orderby` or `$expand` expressions; those are passed, as parsed
`QueryOptions`, to the `api` object you provide. There is no command-line
program.