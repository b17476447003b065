from pathlib import Path

import pytest

from config import ConfigurationManager, get_config, load_settings, resolve_paths


def test_default_settings_are_loaded():
    assert get_config("parser.markers.account_number") == "Account Number"
    assert get_config("parser.currency_prefixes") == ["C$", "$"]
    assert get_config("capture.operation_name") == "getDigitalInvoiceDetails"
    assert get_config("parser.missing.key", "fallback") == "fallback"


def test_relative_paths_resolve_against_project_root():
    output_dir = Path(get_config("paths.output_dir"))
    assert output_dir.is_absolute()
    assert output_dir.resolve() == Path(__file__).resolve().parents[1] / "outputs"


def test_empty_settings_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    config = ConfigurationManager(str(path))
    assert config.get_all() == {}
    assert get_config("parser.markers.total", "Total") == "Total"


def test_missing_settings_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(str(tmp_path / "missing.yaml"))


def test_failed_load_does_not_become_the_shared_instance(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigurationManager(str(tmp_path / "missing.yaml"))

    assert get_config("parser.markers.total") == "Total"


def test_settings_root_must_be_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(path)


def test_resolve_paths_keeps_absolute_entries(tmp_path):
    settings = {"paths": {"output_dir": "out", "log_dir": str(tmp_path), "cache": None}}
    resolved = resolve_paths(settings, Path("/srv/app"))
    assert resolved["paths"] == {
        "output_dir": str(Path("/srv/app") / "out"),
        "log_dir": str(tmp_path),
        "cache": None,
    }


def test_get_stops_at_non_mapping_values():
    config = ConfigurationManager()
    assert config.get("parser.currency_prefixes.0", "none") == "none"
    assert config.get("output.json.indent") == 2
