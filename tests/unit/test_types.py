"""Tests for type mapping and naming helpers."""

import pytest

from eventstream_codegen.codegen.core.errors import CodegenError
from eventstream_codegen.codegen.core.naming import (
    LocalNames,
    NameSanitizer,
    NamingCase,
    convert_case,
    to_camel_case,
    to_pascal_case,
    to_snake_case,
)
from eventstream_codegen.codegen.core.shapes import ShapeKind, load_shape_graph
from eventstream_codegen.codegen.core.types import TypeMapper
from eventstream_codegen.codegen.languages.cpp import create_cpp_profile
from eventstream_codegen.codegen.languages.java import create_java_profile
from eventstream_codegen.codegen.languages.javascript import create_typescript_profile
from eventstream_codegen.codegen.languages.python import create_python_profile


def _member(graph, shape_id, name):
    return graph.get_shape(shape_id).get_member(name)


class TestPythonTypes:
    @pytest.fixture
    def types(self, weather_graph):
        return TypeMapper(weather_graph, create_python_profile())

    def test_named_types(self, types):
        assert types.type_name("acme.weather#Reading") == "Reading"
        assert types.class_name("acme.weather#TemperatureUnit") == "TemperatureUnit"

    def test_enum_is_plain_string(self, types):
        assert types.type_name("acme.weather#TemperatureUnit") == "str"

    def test_collections(self, types):
        assert types.type_name("acme.weather#ReadingList") == "typing.List[Reading]"
        assert types.type_name("acme.weather#ReadingMapList") == (
            "typing.List[typing.Dict[str, Reading]]"
        )

    def test_simple_kinds(self, types):
        assert types.type_name("smithy.api#Timestamp") == "datetime.datetime"
        assert types.type_name("smithy.api#Blob") == "bytes"
        assert types.type_name("smithy.api#Float") == "float"
        assert types.type_name("smithy.api#BigInteger") == "int"

    def test_optional_members(self, types, weather_graph):
        days = _member(weather_graph, "acme.weather#GetForecastRequest", "days")
        city = _member(weather_graph, "acme.weather#GetForecastRequest", "city")
        assert types.member_type_name(days) == "typing.Optional[int]"
        assert types.member_type_name(city) == "str"


class TestCppTypes:
    @pytest.fixture
    def types(self, weather_graph):
        return TypeMapper(weather_graph, create_cpp_profile())

    def test_float_and_double_stay_distinct(self, types):
        assert types.type_name("smithy.api#Float") == "float"
        assert types.type_name("smithy.api#Double") == "double"

    def test_required_members_are_optional_too(self, types, weather_graph):
        city = _member(weather_graph, "acme.weather#GetForecastRequest", "city")
        assert types.member_type_name(city) == "Aws::Crt::Optional<Aws::Crt::String>"

    def test_map_type(self, types):
        assert types.type_name("acme.weather#StringMap") == (
            "Aws::Crt::Map<Aws::Crt::String, Aws::Crt::String>"
        )


class TestJavaTypes:
    def test_boxed_types(self, weather_graph):
        types = TypeMapper(weather_graph, create_java_profile())
        assert types.type_name("smithy.api#Integer") == "Integer"
        assert types.type_name("acme.weather#ReadingList") == "List<Reading>"
        assert types.type_name("acme.weather#TemperatureUnit") == "TemperatureUnit"


class TestTypeScriptTypes:
    @pytest.fixture
    def types(self, weather_graph):
        return TypeMapper(weather_graph, create_typescript_profile())

    def test_map_type(self, types):
        assert types.type_name("acme.weather#StringMap") == "Map<string, string>"

    def test_big_integer_is_rejected(self, types):
        with pytest.raises(CodegenError, match="Javascript codegen does not yet support BigInteger"):
            types.type_name("smithy.api#BigInteger")

    def test_set_is_rejected(self):
        graph = load_shape_graph(
            {"shapes": {"ns#Names": {"type": "set", "member": {"target": "smithy.api#String"}}}}
        )
        types = TypeMapper(graph, create_typescript_profile())
        assert not types.profile.is_supported(ShapeKind.SET)
        with pytest.raises(CodegenError, match="does not yet support Set"):
            types.type_name("ns#Names")


def test_map_keys_must_be_strings():
    graph = load_shape_graph(
        {
            "shapes": {
                "ns#Counts": {
                    "type": "map",
                    "key": {"target": "smithy.api#Integer"},
                    "value": {"target": "smithy.api#Integer"},
                }
            }
        }
    )
    types = TypeMapper(graph, create_python_profile())
    with pytest.raises(CodegenError, match="map keys must be strings"):
        types.type_name("ns#Counts")


class TestNaming:
    @pytest.mark.parametrize(
        "name,snake,camel,pascal",
        [
            ("issuedAt", "issued_at", "issuedAt", "IssuedAt"),
            ("GetForecast", "get_forecast", "getForecast", "GetForecast"),
            ("HTTPStatus", "http_status", "httpStatus", "HttpStatus"),
            ("stream-handler", "stream_handler", "streamHandler", "StreamHandler"),
        ],
    )
    def test_case_conversion(self, name, snake, camel, pascal):
        assert to_snake_case(name) == snake
        assert to_camel_case(name) == camel
        assert to_pascal_case(name) == pascal

    def test_screaming_snake(self):
        assert convert_case("maxValue", NamingCase.SCREAMING_SNAKE) == "MAX_VALUE"

    def test_reserved_words_get_suffix(self):
        sanitizer = NameSanitizer({"class"})
        assert sanitizer.sanitize_name("class", NamingCase.SNAKE_CASE) == "class_"
        assert sanitizer.sanitize_name("2fa", NamingCase.SNAKE_CASE) == "_2fa"

    def test_sanitize_is_stable(self):
        sanitizer = NameSanitizer()
        first = sanitizer.sanitize_name("issuedAt", NamingCase.SNAKE_CASE)
        assert sanitizer.sanitize_name("issuedAt", NamingCase.SNAKE_CASE) == first

    def test_local_names_never_collide(self):
        names = LocalNames(NamingCase.CAMEL_CASE, reserved={"readingsItem"})
        assert names.fresh("readings", "Item") == "readingsItem2"
        assert names.fresh("readings", "Item") == "readingsItem3"

        snake = LocalNames(NamingCase.SNAKE_CASE)
        assert snake.fresh("readings", "Item") == "readings_item"
