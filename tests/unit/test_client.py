"""Tests for client stub composition."""

import pytest

from eventstream_codegen.codegen.core.client import (
    CALLBACKS,
    HANDLER,
    PLAIN,
    ClientStubComposer,
    FaultRule,
)
from eventstream_codegen.codegen.core.shapes import load_shape_graph
from eventstream_codegen.codegen.core.types import TypeMapper
from eventstream_codegen.codegen.languages.cpp import create_cpp_profile
from eventstream_codegen.codegen.languages.java import create_java_profile
from eventstream_codegen.codegen.languages.javascript import create_typescript_profile
from eventstream_codegen.codegen.languages.python import create_python_profile


def _compose(graph, profile):
    service = graph.get_service("acme.weather#WeatherService")
    return ClientStubComposer(graph, service, TypeMapper(graph, profile), profile).compose()


@pytest.fixture
def python_client(weather_graph):
    return _compose(weather_graph, create_python_profile())


def test_client_class_and_operation_order(python_client):
    assert python_client.client_class == "WeatherServiceClient"
    assert [op.name for op in python_client.operations] == ["GetForecast", "SubscribeToAlerts"]
    assert python_client.has_streaming


def test_python_plain_methods(python_client):
    stubs = python_client.get_operation("GetForecast")
    assert stubs.model_name == "acme.weather#GetForecast"
    assert stubs.request_type == "GetForecastRequest"
    assert stubs.response_type == "GetForecastResponse"
    assert not stubs.is_streaming
    assert [(m.name, m.blocking, m.style) for m in stubs.methods] == [
        ("get_forecast_async", False, PLAIN),
        ("get_forecast", True, PLAIN),
    ]
    assert stubs.method(PLAIN, True).parameter_names == ["request"]


def test_python_streaming_methods(python_client):
    stubs = python_client.get_operation("SubscribeToAlerts")
    assert stubs.stream.handler_type == "SubscribeToAlertsStreamHandler"
    assert stubs.stream.event_type == "AlertStream"
    assert stubs.stream.event_member == "events"
    assert [m.name for m in stubs.methods] == [
        "subscribe_to_alerts_async",
        "subscribe_to_alerts",
        "subscribe_to_alerts_with_callbacks_async",
        "subscribe_to_alerts_with_callbacks",
    ]
    assert stubs.method(HANDLER, False).parameter_names == ["request", "stream_handler"]
    assert stubs.method(CALLBACKS, True).parameter_names == [
        "request",
        "on_stream_event",
        "on_stream_error",
        "on_stream_closed",
    ]


def test_fault_rule(python_client):
    assert python_client.faults == FaultRule("ServiceError", "RuntimeError")


def test_decorator_redispatches_all_but_errors(python_client):
    decorator = python_client.decorator
    assert decorator.redispatched == ("on_stream_event", "on_stream_closed")
    assert decorator.direct == ("on_stream_error",)


def test_typescript_has_no_blocking_variant(weather_graph):
    client = _compose(weather_graph, create_typescript_profile())
    stubs = client.get_operation("SubscribeToAlerts")
    assert all(not m.blocking for m in stubs.methods)
    assert [m.name for m in stubs.methods] == [
        "subscribeToAlerts",
        "subscribeToAlertsWithCallbacks",
    ]
    assert stubs.methods[0].return_type == "Promise<model.SubscribeToAlertsResponse>"


def test_cpp_spelling(weather_graph):
    client = _compose(weather_graph, create_cpp_profile())
    stubs = client.get_operation("GetForecast")
    assert [m.name for m in stubs.methods] == ["GetForecastAsync", "GetForecast"]
    assert stubs.method(PLAIN, False).return_type == "std::future<GetForecastResponse>"
    assert client.faults.runtime_fault == "std::runtime_error"


def test_java_spelling(weather_graph):
    client = _compose(weather_graph, create_java_profile())
    stubs = client.get_operation("SubscribeToAlerts")
    assert stubs.method(HANDLER, True).name == "subscribeToAlerts"
    assert stubs.method(CALLBACKS, False).name == "subscribeToAlertsAsync"
    assert stubs.method(HANDLER, False).return_type == (
        "CompletableFuture<SubscribeToAlertsResponse>"
    )
    assert stubs.method(CALLBACKS, True).parameter_names[1:] == [
        "onStreamEvent",
        "onStreamError",
        "onStreamClosed",
    ]


def test_missing_io_uses_placeholder_names(simple_model):
    simple_model["shapes"]["ns.simple#Svc"]["operations"].append({"target": "ns.simple#Ping"})
    simple_model["shapes"]["ns.simple#Ping"] = {"type": "operation"}
    graph = load_shape_graph(simple_model)
    profile = create_python_profile()
    client = ClientStubComposer(
        graph, graph.get_service("ns.simple#Svc"), TypeMapper(graph, profile), profile
    ).compose()

    stubs = client.get_operation("Ping")
    assert stubs.request_type == "PingRequest"
    assert stubs.response_type == "PingResponse"
