"""REST request handling for a SensorThings API server: entities, request reading, JSON responses, routing and period conversion."""

__version__ = "0.1.0"