"""Tests for the eventstream-codegen command line."""

import json

import pytest

from eventstream_codegen.cli import main

SERVICE_ID = "acme.weather#WeatherService"


@pytest.fixture
def model_file(tmp_path, weather_model):
    path = tmp_path / "weather.json"
    path.write_text(json.dumps(weather_model), encoding="utf-8")
    return path


def test_list_languages(capsys):
    assert main(["--list-languages"]) == 0
    out = capsys.readouterr().out
    for language in ("python", "javascript", "cpp", "java"):
        assert language in out


def test_language_info(capsys):
    assert main(["--language-info", "c++"]) == 0
    assert "CppGenerator" in capsys.readouterr().out


def test_language_info_unknown():
    assert main(["--language-info", "cobol"]) == 1


def test_generate_to_directory(tmp_path, model_file):
    out_dir = tmp_path / "out"
    code = main(["-q", "-l", "python", "-s", SERVICE_ID, "--client-stubs", "-o", str(out_dir), str(model_file)])

    assert code == 0
    assert (out_dir / "acme/weather/weatherservice/model.py").is_file()
    assert (out_dir / "acme/weather/weatherservice/client.py").is_file()


def test_existing_files_are_kept(tmp_path, model_file):
    out_dir = tmp_path / "out"
    target = out_dir / "acme/weather/weatherservice/model.py"
    target.parent.mkdir(parents=True)
    target.write_text("# hand edited\n", encoding="utf-8")

    assert main(["-q", "-l", "py", "-s", SERVICE_ID, "-o", str(out_dir), str(model_file)]) == 0
    assert target.read_text(encoding="utf-8") == "# hand edited\n"

    assert main(["-q", "-l", "py", "-s", SERVICE_ID, "--clobber", "-o", str(out_dir), str(model_file)]) == 0
    assert target.read_text(encoding="utf-8") != "# hand edited\n"


def test_print_to_stdout(capsys, model_file):
    assert main(["-q", "-l", "ts", "-s", SERVICE_ID, str(model_file)]) == 0
    out = capsys.readouterr().out
    assert "TemperatureUnit" in out


def test_config_file(tmp_path, model_file):
    config = tmp_path / "codegen.json"
    config.write_text(
        json.dumps({"serviceShapeId": SERVICE_ID, "moduleOverrideDirectory": "gen"}),
        encoding="utf-8",
    )
    out_dir = tmp_path / "out"

    assert main(["-q", "-l", "python", "--config", str(config), "-o", str(out_dir), str(model_file)]) == 0
    assert (out_dir / "gen/weatherservice/model.py").is_file()


def test_generation_failure(model_file):
    assert main(["-q", "-l", "python", "-s", "acme.weather#Missing", str(model_file)]) == 1


def test_unsupported_language(model_file):
    assert main(["-l", "cobol", "-s", SERVICE_ID, str(model_file)]) == 1


def test_language_required(model_file):
    assert main(["-s", SERVICE_ID, str(model_file)]) == 1


def test_input_required():
    assert main(["-l", "python", "-s", SERVICE_ID]) == 1


def test_not_a_model(tmp_path):
    path = tmp_path / "data.json"
    path.write_text('{"items": []}', encoding="utf-8")
    assert main(["-l", "python", "-s", SERVICE_ID, str(path)]) == 1


def test_unsupported_kind_writes_nothing(tmp_path):
    model = {
        "shapes": {
            "ns.big#Svc": {"type": "service", "operations": [{"target": "ns.big#Op"}]},
            "ns.big#Op": {
                "type": "operation",
                "input": {"target": "ns.big#In"},
                "output": {"target": "ns.big#In"},
            },
            "ns.big#In": {
                "type": "structure",
                "members": {"v": {"target": "smithy.api#BigInteger"}},
            },
        }
    }
    path = tmp_path / "big.json"
    path.write_text(json.dumps(model), encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    assert main(["-q", "-l", "ts", "-s", "ns.big#Svc", "--client-stubs", "-o", str(out_dir), str(path)]) == 1
    assert list(out_dir.iterdir()) == []
