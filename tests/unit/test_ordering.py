"""Tests for declaration ordering."""

import pytest

from eventstream_codegen.codegen.core.errors import CodegenError
from eventstream_codegen.codegen.core.ordering import (
    DataModelObject,
    DependencyOrderer,
    order_service_shapes,
)
from eventstream_codegen.codegen.core.shapes import ShapeKind, load_shape_graph


def _order(model, service_id, prefix="smithy"):
    graph = load_shape_graph(model)
    return graph, order_service_shapes(graph, graph.get_service(service_id), prefix)


def _named_dependencies(graph, shape):
    """Named types a shape reaches through fields and collections."""
    found = set()
    pending = list(graph.members_of(shape))
    while pending:
        target = graph.resolve(pending.pop())
        if target.kind in (ShapeKind.LIST, ShapeKind.SET, ShapeKind.MAP):
            pending.extend(target.members)
        elif target.kind in (ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.ENUM):
            if target.namespace != "smithy.api":
                found.add(target.name)
    return found


def test_contained_types_come_first(simple_model):
    _, units = _order(simple_model, "ns.simple#Svc")
    assert [unit.name for unit in units] == ["StructB", "StructA", "StructC"]


def test_every_dependency_is_declared_earlier(weather_model):
    graph, units = _order(weather_model, "acme.weather#WeatherService")
    position = {unit.name: index for index, unit in enumerate(units)}

    for unit in units:
        for dependency in _named_dependencies(graph, unit.shape):
            assert position[dependency] < position[unit.name], (
                f"{dependency} must precede {unit.name}"
            )


def test_units_are_unique_and_named_kinds_only(weather_model):
    _, units = _order(weather_model, "acme.weather#WeatherService")
    keys = [unit.key for unit in units]
    assert len(keys) == len(set(keys))
    assert all(unit.kind in (ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.ENUM) for unit in units)
    assert "ReadingList" not in {unit.name for unit in units}


def test_event_stream_union_is_emitted(weather_model):
    _, units = _order(weather_model, "acme.weather#WeatherService")
    names = [unit.name for unit in units]
    assert "AlertStream" in names
    assert names.index("Alert") < names.index("AlertStream")
    assert names.index("AlertCleared") < names.index("AlertStream")


def test_order_is_deterministic(weather_model):
    _, first = _order(weather_model, "acme.weather#WeatherService")
    _, second = _order(weather_model, "acme.weather#WeatherService")
    assert [unit.key for unit in first] == [unit.key for unit in second]


def test_placeholders_come_last(simple_model):
    simple_model["shapes"]["ns.simple#Svc"]["operations"].append({"target": "ns.simple#Ping"})
    simple_model["shapes"]["ns.simple#Ping"] = {"type": "operation"}

    _, units = _order(simple_model, "ns.simple#Svc")
    names = [unit.name for unit in units]
    assert names == ["StructB", "StructA", "StructC", "PingRequest", "PingResponse"]
    request = units[-2]
    assert request.is_placeholder
    assert request.application_type == "ns.simple#PingRequest"
    assert request.kind is None


def test_recursive_shapes_terminate():
    model = {
        "shapes": {
            "ns#Svc": {"type": "service", "operations": [{"target": "ns#Walk"}]},
            "ns#Walk": {
                "type": "operation",
                "input": {"target": "ns#Node"},
                "output": {"target": "ns#Node"},
            },
            "ns#Node": {
                "type": "structure",
                "members": {
                    "label": {"target": "smithy.api#String"},
                    "children": {"target": "ns#NodeList"},
                },
            },
            "ns#NodeList": {"type": "list", "member": {"target": "ns#Node"}},
        }
    }
    _, units = _order(model, "ns#Svc")
    assert [unit.name for unit in units] == ["Node"]


def test_local_simple_shape_has_no_generator(simple_model):
    simple_model["shapes"]["ns.simple#Name"] = {"type": "string"}
    simple_model["shapes"]["ns.simple#StructB"]["members"]["z"]["target"] = "ns.simple#Name"

    with pytest.raises(CodegenError, match="No generator for type with shape ID: ns.simple#Name"):
        _order(simple_model, "ns.simple#Svc")


def test_foreign_simple_shapes_are_allowed(simple_model):
    simple_model["shapes"]["other.ns#Name"] = {"type": "string"}
    simple_model["shapes"]["ns.simple#StructB"]["members"]["z"]["target"] = "other.ns#Name"

    _, units = _order(simple_model, "ns.simple#Svc")
    assert [unit.name for unit in units] == ["StructB", "StructA", "StructC"]


def test_builtin_prefix_is_configurable(simple_model):
    simple_model["shapes"]["shared.types#Extra"] = {"type": "structure", "members": {}}
    simple_model["shapes"]["ns.simple#StructC"]["members"] = {
        "extra": {"target": "shared.types#Extra"}
    }

    _, with_shared = _order(simple_model, "ns.simple#Svc")
    assert "Extra" in [unit.name for unit in with_shared]

    graph = load_shape_graph(simple_model)
    orderer = DependencyOrderer(graph, graph.get_service("ns.simple#Svc"), "shared")
    assert "Extra" not in [unit.name for unit in orderer.order()]


def test_units_compare_by_shape(weather_graph):
    shape = weather_graph.get_shape("acme.weather#Reading")
    first = DataModelObject("Reading", shape, "acme.weather#Reading")
    second = DataModelObject("Renamed", shape, "acme.weather#Reading")
    assert first == second
    assert len({first, second}) == 1
