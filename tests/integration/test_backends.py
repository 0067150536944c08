"""End-to-end generation for each backend."""

import pytest

from eventstream_codegen.codegen import generate_from_model, quick_generate
from eventstream_codegen.codegen.core.errors import CodegenError

SERVICE_ID = "acme.weather#WeatherService"


def _paths(units):
    return [unit.path for unit in units]


def _content(units, path):
    return next(unit.content for unit in units if unit.path == path)


def _ping_model():
    return {
        "shapes": {
            "ns.ping#PingService": {
                "type": "service",
                "version": "1",
                "operations": [{"target": "ns.ping#Ping"}],
            },
            "ns.ping#Ping": {"type": "operation"},
        }
    }


class TestTypeScript:
    def test_units(self, generate):
        units = generate("javascript", generate_client_stubs=True)
        assert _paths(units) == [
            "acme/weather/weatherservice/model.ts",
            "acme/weather/weatherservice/model_utils.ts",
            "acme/weather/weatherservice/client.ts",
        ]

        model = _content(units, "acme/weather/weatherservice/model.ts")
        assert "export interface Reading {" in model
        assert "export enum TemperatureUnit {" in model
        assert "export function normalizeGetForecastResponse(" in model
        assert model.index("export interface Reading {") < model.index(
            "export interface DayForecast {"
        )

        client = _content(units, "acme/weather/weatherservice/client.ts")
        assert "export class WeatherServiceClient {" in client
        assert "Promise<model.GetForecastResponse>" in client
        assert "getForecastBlocking" not in client

    @pytest.mark.parametrize("kind", ["bigInteger", "set"])
    def test_unsupported_shapes(self, kind):
        shapes = {
            "ns.big#Svc": {"type": "service", "operations": [{"target": "ns.big#Op"}]},
            "ns.big#Op": {
                "type": "operation",
                "input": {"target": "ns.big#In"},
                "output": {"target": "ns.big#In"},
            },
            "ns.big#In": {"type": "structure", "members": {"v": {"target": "ns.big#Value"}}},
        }
        if kind == "set":
            shapes["ns.big#Value"] = {"type": "set", "member": {"target": "smithy.api#String"}}
        else:
            shapes["ns.big#In"]["members"]["v"] = {"target": "smithy.api#BigInteger"}

        result = generate_from_model({"shapes": shapes}, "ts", {"serviceShapeId": "ns.big#Svc"})
        assert not result.success
        assert "Javascript codegen does not yet support" in result.error_message
        assert result.units == []


class TestCpp:
    def test_units(self, generate):
        units = generate("cpp", generate_client_stubs=True)
        assert _paths(units) == [
            "include/aws/WeatherServiceModel.h",
            "source/WeatherServiceModel.cpp",
            "include/aws/WeatherServiceClient.h",
            "source/WeatherServiceClient.cpp",
        ]

        header = _content(units, "include/aws/WeatherServiceModel.h")
        assert "namespace Acme::Weather" in header
        assert "AWS_EVENTSTREAMRPC_API" in header
        assert header.index("class AWS_EVENTSTREAMRPC_API Reading") < header.index(
            "class AWS_EVENTSTREAMRPC_API DayForecast"
        )

        source = _content(units, "source/WeatherServiceClient.cpp")
        assert "#include <aws/WeatherServiceClient.h>" in source
        assert "GetForecastAsync" in source

    def test_custom_subdirectories(self, generate):
        units = generate("cpp", include_subdirectory="inc/acme", source_subdirectory="src")
        assert _paths(units) == ["inc/acme/WeatherServiceModel.h", "src/WeatherServiceModel.cpp"]


class TestJava:
    def test_units(self, generate):
        paths = _paths(generate("java", generate_client_stubs=True))
        assert paths[0] == "software/amazon/awssdk/iot/model/ServiceError.java"
        assert "software/amazon/awssdk/iot/model/Reading.java" in paths
        assert "software/amazon/awssdk/iot/model/TemperatureUnit.java" in paths
        assert paths[-1] == "software/amazon/awssdk/iot/WeatherServiceClient.java"

    def test_enum_and_error(self, generate):
        units = generate("java", java_base_package="com.acme.weather")
        unit_enum = _content(units, "com/acme/weather/model/TemperatureUnit.java")
        assert "package com.acme.weather.model;" in unit_enum
        assert "IllegalArgumentException" in unit_enum

        error = _content(units, "com/acme/weather/model/InvalidCityError.java")
        assert "extends ServiceError" in error


class TestPipeline:
    @pytest.mark.parametrize("language", ["python", "javascript", "cpp", "java"])
    def test_server_stubs_not_implemented(self, generate, language):
        with pytest.raises(CodegenError, match="Server stub generation not implemented yet!"):
            generate(language, generate_server_stubs=True)

    def test_unknown_service(self, generate):
        with pytest.raises(CodegenError, match="No service shape ID found for"):
            generate("python", service_shape_id="acme.weather#Nope")

    def test_missing_operation_io(self, caplog):
        with pytest.raises(CodegenError, match="Operations found with no defined input or output"):
            quick_generate(_ping_model(), "python", serviceShapeId="ns.ping#PingService")
        assert "ns.ping#Ping must define both an input shape and output shape" in caplog.text

    @pytest.mark.parametrize("language", ["python", "javascript", "cpp", "java"])
    def test_placeholders_when_io_is_optional(self, language):
        units = quick_generate(
            _ping_model(),
            language,
            serviceShapeId="ns.ping#PingService",
            requireOperationIO=False,
            generateClientStubs=True,
        )
        code = "\n".join(unit.content for unit in units)
        assert "PingRequest" in code
        assert "PingResponse" in code

    def test_result_metadata_and_warnings(self, weather_model):
        weather_model["shapes"]["acme.weather#Reading"]["members"]["unit"]["traits"] = {
            "smithy.api#deprecated": {}
        }
        result = generate_from_model(
            weather_model, "py", {"serviceShapeId": SERVICE_ID, "generateClientStubs": True}
        )

        assert result.success
        assert result.metadata == {
            "language": "python",
            "file_extension": ".py",
            "service": SERVICE_ID,
            "operation_count": 2,
            "unit_count": 2,
            "client_stubs": True,
        }
        assert "Member Reading.unit is deprecated" in result.warnings
        assert result.get_unit("acme/weather/weatherservice/client.py").suffix == ".py"

    def test_failure_has_no_units(self):
        result = generate_from_model(_ping_model(), "java", {"serviceShapeId": "ns.ping#PingService"})
        assert not result.success
        assert result.error_message.startswith("Code generation failed:")
        assert isinstance(result.exception, CodegenError)
        assert result.units == []

    def test_generation_is_deterministic(self, generate):
        first = generate("cpp", generate_client_stubs=True)
        second = generate("cpp", generate_client_stubs=True)
        assert [u.content for u in first] == [u.content for u in second]

    @pytest.mark.parametrize("language", ["python", "javascript", "cpp", "java"])
    def test_enum_literals_are_emitted(self, generate, language):
        code = "\n".join(unit.content for unit in generate(language))
        assert '"celsius"' in code or "'celsius'" in code
        assert '"fahrenheit"' in code or "'fahrenheit'" in code
