"""Tests for TOML configuration loading."""

import tomllib

import pytest

from pymemspec.config import (
    PyMemSpecConfig,
    find_config_file,
    generate_default_config,
    init_config,
    load_config,
)


def test_defaults():
    config = PyMemSpecConfig()
    assert config.backend.address_width == 64
    assert config.limits.max_array_elements == 4096
    assert config.output.format == "text"
    assert config.config_file is None


def test_load_project_file(tmp_path):
    path = tmp_path / "pymemspec.toml"
    path.write_text(
        "[backend]\naddress_width = 32\n\n[limits]\nmax_string_length = 16\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.backend.address_width == 32
    assert config.limits.max_string_length == 16
    assert config.config_file == path
    assert config.project_root == tmp_path


def test_load_pyproject_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.pymemspec.output]\nshow_constraints = true\n',
        encoding="utf-8",
    )
    nested = tmp_path / "harnesses"
    nested.mkdir()
    assert find_config_file(nested) == tmp_path / "pyproject.toml"
    assert load_config(start_dir=nested).output.show_constraints is True


def test_pyproject_without_table_is_skipped(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")
    (tmp_path / ".pymemspec.toml").write_text("[output]\nquiet = true\n", encoding="utf-8")
    assert find_config_file(tmp_path) == tmp_path / ".pymemspec.toml"


def test_invalid_toml_falls_back_to_defaults(tmp_path, quiet_logger):
    path = tmp_path / "pymemspec.toml"
    path.write_text("[backend\n", encoding="utf-8")
    config = load_config(path)
    assert config.backend.address_width == 64


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "pymemspec.toml"
    path.write_text("[backend]\nno_such_key = 1\naddress_width = 16\n", encoding="utf-8")
    config = load_config(path)
    assert config.backend.address_width == 16
    assert not hasattr(config.backend, "no_such_key")


def test_generated_config_round_trips(tmp_path):
    data = tomllib.loads(generate_default_config())
    assert data["tool"]["pymemspec"]["limits"]["max_array_elements"] == 4096
    path = init_config(tmp_path)
    assert path.name == "pymemspec.toml"
    assert load_config(path).to_dict() == PyMemSpecConfig().to_dict()


def test_init_refuses_existing_file(tmp_path):
    init_config(tmp_path)
    with pytest.raises(FileExistsError):
        init_config(tmp_path)
