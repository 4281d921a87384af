[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "starest"
version = "0.1.0"
description = "REST request handling for a SensorThings API server: request reading, entity parsing, JSON responses, routing and period conversion"
requires-python = ">=3.10"
dependencies = []
keywords = ["sensorthings", "ogc", "iot", "rest", "odata", "json"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["starest"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
