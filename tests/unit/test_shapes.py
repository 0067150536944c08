"""Tests for the shape graph and the Smithy JSON loader."""

import json

import pytest

from eventstream_codegen.codegen.core.errors import CodegenError
from eventstream_codegen.codegen.core.shapes import (
    ShapeGraph,
    ShapeId,
    ShapeKind,
    load_shape_graph,
    load_shape_graph_file,
)


class TestShapeId:
    def test_parse_absolute(self):
        shape_id = ShapeId.parse("acme.weather#Reading")
        assert shape_id.namespace == "acme.weather"
        assert shape_id.name == "Reading"
        assert str(shape_id) == "acme.weather#Reading"

    def test_bare_name_is_prelude(self):
        assert ShapeId.parse("String") == ShapeId("smithy.api", "String")

    @pytest.mark.parametrize("value", ["#Name", "ns#", "ns#Shape$member"])
    def test_invalid(self, value):
        with pytest.raises(CodegenError, match="Invalid shape id"):
            ShapeId.parse(value)


class TestLoader:
    def test_structure_members_keep_order(self, weather_graph):
        shape = weather_graph.get_shape("acme.weather#GetForecastResponse")
        assert shape.kind == ShapeKind.STRUCTURE
        assert [m.name for m in shape.members] == [
            "forecast",
            "stations",
            "chart",
            "issuedAt",
            "notes",
        ]

    def test_required_trait(self, weather_graph):
        shape = weather_graph.get_shape("acme.weather#GetForecastRequest")
        assert shape.get_member("city").required
        assert not shape.get_member("days").required

    def test_enum_values(self, weather_graph):
        shape = weather_graph.get_shape("acme.weather#TemperatureUnit")
        assert shape.is_enum
        assert [(v.name, v.value) for v in shape.enum_values] == [
            ("CELSIUS", "celsius"),
            ("FAHRENHEIT", "fahrenheit"),
        ]

    def test_legacy_enum_trait(self):
        graph = load_shape_graph(
            {
                "shapes": {
                    "ns#Color": {
                        "type": "string",
                        "traits": {"enum": [{"value": "dark-red"}, {"value": "blue", "name": "BLUE"}]},
                    }
                }
            }
        )
        shape = graph.get_shape("ns#Color")
        assert shape.kind == ShapeKind.ENUM
        assert [(v.name, v.value) for v in shape.enum_values] == [
            ("DARK_RED", "dark-red"),
            ("BLUE", "blue"),
        ]

    def test_error_trait(self, weather_graph):
        shape = weather_graph.get_shape("acme.weather#InvalidCityError")
        assert shape.is_error
        assert shape.error == "client"

    def test_collections(self, weather_graph):
        readings = weather_graph.get_shape("acme.weather#ReadingList")
        assert readings.element.target == ShapeId.parse("acme.weather#Reading")

        readings_by_station = weather_graph.get_shape("acme.weather#ReadingMap")
        assert weather_graph.resolve(readings_by_station.key).kind == ShapeKind.STRING
        assert weather_graph.resolve(readings_by_station.value).name == "Reading"

    def test_prelude_is_available(self, weather_graph):
        assert "smithy.api#Timestamp" in weather_graph
        assert weather_graph.get_shape("Blob").kind == ShapeKind.BLOB

    def test_unit_io_is_absent(self):
        graph = load_shape_graph(
            {
                "shapes": {
                    "ns#Svc": {"type": "service", "operations": [{"target": "ns#Ping"}]},
                    "ns#Ping": {
                        "type": "operation",
                        "input": {"target": "smithy.api#Unit"},
                        "output": {"target": "smithy.api#Unit"},
                    },
                }
            }
        )
        operation = graph.get_operation("ns#Ping")
        assert operation.input is None
        assert operation.output is None

    def test_resources_are_ignored(self):
        graph = load_shape_graph({"shapes": {"ns#Thing": {"type": "resource"}}})
        assert "ns#Thing" not in graph

    def test_unsupported_type(self):
        with pytest.raises(CodegenError, match="Unsupported shape type"):
            load_shape_graph({"shapes": {"ns#Odd": {"type": "intEnum2"}}})

    def test_dangling_member_target(self):
        model = {
            "shapes": {
                "ns#Holder": {
                    "type": "structure",
                    "members": {"thing": {"target": "ns#Missing"}},
                }
            }
        }
        with pytest.raises(CodegenError, match="Unresolvable shape id: ns#Missing"):
            load_shape_graph(model)

    def test_dangling_operation(self):
        model = {"shapes": {"ns#Svc": {"type": "service", "operations": [{"target": "ns#Nope"}]}}}
        with pytest.raises(CodegenError, match="Unresolvable shape id: ns#Nope"):
            load_shape_graph(model)

    def test_not_a_model(self):
        with pytest.raises(CodegenError, match="'shapes'"):
            load_shape_graph({"metadata": {}})

    def test_load_from_file(self, tmp_path, weather_model):
        path = tmp_path / "weather.json"
        path.write_text(json.dumps(weather_model), encoding="utf-8")
        graph = load_shape_graph_file(path)
        assert graph.get_service("acme.weather#WeatherService").version == "2024-01-01"

    def test_load_from_bad_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CodegenError, match="Invalid JSON"):
            load_shape_graph_file(path)


class TestShapeGraph:
    def test_operations_sorted_by_id(self, weather_graph):
        names = [op.name for op in weather_graph.operations_of("acme.weather#WeatherService")]
        assert names == ["GetForecast", "SubscribeToAlerts"]

    def test_unknown_service(self, weather_graph):
        assert weather_graph.find_service("acme.weather#Nope") is None
        with pytest.raises(CodegenError, match="No service shape ID found for: acme.weather#Nope"):
            weather_graph.get_service("acme.weather#Nope")

    def test_unknown_shape(self, weather_graph):
        with pytest.raises(CodegenError, match="Unresolvable shape id"):
            weather_graph.get_shape("acme.weather#Nope")

    def test_resolve_member(self, weather_graph):
        member = weather_graph.get_shape("acme.weather#Reading").get_member("observedAt")
        assert weather_graph.resolve(member).kind == ShapeKind.TIMESTAMP

    def test_event_stream_metadata(self, weather_graph):
        operation = weather_graph.get_operation("acme.weather#SubscribeToAlerts")
        assert operation.is_streaming
        assert operation.output_event_stream.member_name == "events"
        assert operation.output_event_stream.event_stream_target == ShapeId.parse(
            "acme.weather#AlertStream"
        )
        assert operation.input_event_stream is None
        assert not weather_graph.get_operation("acme.weather#GetForecast").is_streaming

    def test_streaming_members_are_not_fields(self, weather_graph):
        response = weather_graph.get_shape("acme.weather#SubscribeToAlertsResponse")
        assert weather_graph.members_of(response) == []
        streaming = weather_graph.members_of(response, include_streaming=True)
        assert [m.name for m in streaming] == ["events"]
        assert streaming[0].streaming

    def test_empty_graph_has_prelude_only(self):
        graph = ShapeGraph()
        assert len(graph) > 0
        assert all(shape.namespace == "smithy.api" for shape in graph)
        assert graph.services == []
