"""Shared fixtures: a small weather service model and generation helpers."""

import copy
import importlib
import logging
import sys

import pytest

from eventstream_codegen.codegen import quick_generate
from eventstream_codegen.codegen.core.output import write_output_units
from eventstream_codegen.codegen.core.shapes import load_shape_graph

SERVICE_ID = "acme.weather#WeatherService"

WEATHER_MODEL = {
    "smithy": "2.0",
    "shapes": {
        SERVICE_ID: {
            "type": "service",
            "version": "2024-01-01",
            "operations": [
                {"target": "acme.weather#SubscribeToAlerts"},
                {"target": "acme.weather#GetForecast"},
            ],
        },
        "acme.weather#GetForecast": {
            "type": "operation",
            "input": {"target": "acme.weather#GetForecastRequest"},
            "output": {"target": "acme.weather#GetForecastResponse"},
            "errors": [{"target": "acme.weather#InvalidCityError"}],
            "traits": {"smithy.api#documentation": "Forecast for a city."},
        },
        "acme.weather#SubscribeToAlerts": {
            "type": "operation",
            "input": {"target": "acme.weather#SubscribeToAlertsRequest"},
            "output": {"target": "acme.weather#SubscribeToAlertsResponse"},
        },
        "acme.weather#GetForecastRequest": {
            "type": "structure",
            "members": {
                "city": {
                    "target": "smithy.api#String",
                    "traits": {"smithy.api#required": {}},
                },
                "days": {"target": "smithy.api#Integer"},
                "unit": {"target": "acme.weather#TemperatureUnit"},
            },
        },
        "acme.weather#GetForecastResponse": {
            "type": "structure",
            "members": {
                "forecast": {"target": "acme.weather#DayForecastList"},
                "stations": {"target": "acme.weather#ReadingMapList"},
                "chart": {"target": "smithy.api#Blob"},
                "issuedAt": {"target": "smithy.api#Timestamp"},
                "notes": {"target": "acme.weather#StringMap"},
            },
        },
        "acme.weather#InvalidCityError": {
            "type": "structure",
            "members": {"message": {"target": "smithy.api#String"}},
            "traits": {"smithy.api#error": "client"},
        },
        "acme.weather#TemperatureUnit": {
            "type": "enum",
            "members": {
                "CELSIUS": {
                    "target": "smithy.api#Unit",
                    "traits": {"smithy.api#enumValue": "celsius"},
                },
                "FAHRENHEIT": {
                    "target": "smithy.api#Unit",
                    "traits": {"smithy.api#enumValue": "fahrenheit"},
                },
            },
        },
        "acme.weather#Reading": {
            "type": "structure",
            "members": {
                "temperature": {
                    "target": "smithy.api#Double",
                    "traits": {"smithy.api#required": {}},
                },
                "observedAt": {"target": "smithy.api#Timestamp"},
                "unit": {"target": "acme.weather#TemperatureUnit"},
            },
        },
        "acme.weather#ReadingList": {
            "type": "list",
            "member": {"target": "acme.weather#Reading"},
        },
        "acme.weather#ReadingMap": {
            "type": "map",
            "key": {"target": "smithy.api#String"},
            "value": {"target": "acme.weather#Reading"},
        },
        "acme.weather#ReadingMapList": {
            "type": "list",
            "member": {"target": "acme.weather#ReadingMap"},
        },
        "acme.weather#StringMap": {
            "type": "map",
            "key": {"target": "smithy.api#String"},
            "value": {"target": "smithy.api#String"},
        },
        "acme.weather#DayForecast": {
            "type": "structure",
            "members": {
                "date": {
                    "target": "smithy.api#String",
                    "traits": {"smithy.api#required": {}},
                },
                "readings": {"target": "acme.weather#ReadingList"},
            },
        },
        "acme.weather#DayForecastList": {
            "type": "list",
            "member": {"target": "acme.weather#DayForecast"},
        },
        "acme.weather#SubscribeToAlertsRequest": {
            "type": "structure",
            "members": {
                "city": {
                    "target": "smithy.api#String",
                    "traits": {"smithy.api#required": {}},
                },
            },
        },
        "acme.weather#SubscribeToAlertsResponse": {
            "type": "structure",
            "members": {"events": {"target": "acme.weather#AlertStream"}},
        },
        "acme.weather#AlertStream": {
            "type": "union",
            "members": {
                "alert": {"target": "acme.weather#Alert"},
                "clear": {"target": "acme.weather#AlertCleared"},
            },
            "traits": {"smithy.api#streaming": {}},
        },
        "acme.weather#Alert": {
            "type": "structure",
            "members": {
                "severity": {
                    "target": "smithy.api#Integer",
                    "traits": {"smithy.api#required": {}},
                },
                "message": {"target": "smithy.api#String"},
            },
        },
        "acme.weather#AlertCleared": {
            "type": "structure",
            "members": {"reason": {"target": "smithy.api#String"}},
        },
    },
}


def make_simple_model():
    """Op1: StructA{x: Integer, y: List<StructB>} -> StructC, with StructB{z: String}."""
    return {
        "shapes": {
            "ns.simple#Svc": {
                "type": "service",
                "version": "1",
                "operations": [{"target": "ns.simple#Op1"}],
            },
            "ns.simple#Op1": {
                "type": "operation",
                "input": {"target": "ns.simple#StructA"},
                "output": {"target": "ns.simple#StructC"},
            },
            "ns.simple#StructA": {
                "type": "structure",
                "members": {
                    "x": {"target": "smithy.api#Integer"},
                    "y": {"target": "ns.simple#ListOfB"},
                },
            },
            "ns.simple#ListOfB": {
                "type": "list",
                "member": {"target": "ns.simple#StructB"},
            },
            "ns.simple#StructB": {
                "type": "structure",
                "members": {"z": {"target": "smithy.api#String"}},
            },
            "ns.simple#StructC": {"type": "structure", "members": {}},
        }
    }


@pytest.fixture
def weather_model():
    return copy.deepcopy(WEATHER_MODEL)


@pytest.fixture
def weather_graph(weather_model):
    return load_shape_graph(weather_model)


@pytest.fixture
def simple_model():
    return make_simple_model()


@pytest.fixture
def generate():
    """Generate units for the weather service, or another model."""

    def _generate(language, model=None, **settings):
        settings.setdefault("service_shape_id", SERVICE_ID)
        return quick_generate(copy.deepcopy(model or WEATHER_MODEL), language, **settings)

    return _generate


@pytest.fixture
def python_package(tmp_path, monkeypatch, generate):
    """Write generated Python units to disk and import them."""
    loaded = []

    def _load(model=None, **settings):
        settings.setdefault("generate_client_stubs", True)
        settings.setdefault("module_override_directory", "")
        units = generate("python", model, **settings)
        write_output_units(units, tmp_path)
        monkeypatch.syspath_prepend(str(tmp_path))

        package = units[0].path.split("/")[0]
        loaded.append(package)
        modules = {"model": importlib.import_module(f"{package}.model")}
        if settings["generate_client_stubs"]:
            modules["client"] = importlib.import_module(f"{package}.client")
        return modules

    yield _load

    for package in loaded:
        for name in [m for m in sys.modules if m == package or m.startswith(package + ".")]:
            del sys.modules[name]


@pytest.fixture(autouse=True)
def reset_package_logger():
    """The CLI configures its own handler; put the logger back afterwards."""
    yield
    root = logging.getLogger("eventstream_codegen")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.propagate = True
    root.setLevel(logging.NOTSET)
