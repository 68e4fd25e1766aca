"""Configuration system for PyMemSpec.
Supports TOML configuration files with project-level and user-level settings.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pymemspec.logging import get_logger

CONFIG_FILES = [
    "pymemspec.toml",
    ".pymemspec.toml",
    "pyproject.toml",
]


@dataclass
class BackendConfig:
    """Settings of the default z3 backend."""

    address_width: int = 64
    solver_timeout_ms: int = 10000
    check_types: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "address_width": self.address_width,
            "solver_timeout_ms": self.solver_timeout_ms,
            "check_types": self.check_types,
        }


@dataclass
class HarnessLimits:
    """Upper bounds on what a single builder call may create."""

    max_array_elements: int = 4096
    max_string_length: int = 65536

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_array_elements": self.max_array_elements,
            "max_string_length": self.max_string_length,
        }


@dataclass
class OutputConfig:
    """Configuration for output and reporting."""

    format: str = "text"
    color: bool = True
    verbose: bool = False
    quiet: bool = False
    show_facts: bool = True
    show_constraints: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "color": self.color,
            "verbose": self.verbose,
            "quiet": self.quiet,
            "show_facts": self.show_facts,
            "show_constraints": self.show_constraints,
        }


@dataclass
class PyMemSpecConfig:
    """Main configuration for PyMemSpec."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    limits: HarnessLimits = field(default_factory=HarnessLimits)
    output: OutputConfig = field(default_factory=OutputConfig)
    project_root: Path | None = None
    config_file: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "backend": self.backend.to_dict(),
            "limits": self.limits.to_dict(),
            "output": self.output.to_dict(),
        }

    def to_toml(self) -> str:
        """Generate TOML configuration string."""
        lines = ["[tool.pymemspec]"]
        for section, values in self.to_dict().items():
            lines.append("")
            lines.append(f"[tool.pymemspec.{section}]")
            for key, value in values.items():
                lines.append(f"{key} = {_toml_value(value)}")
        return "\n".join(lines) + "\n"


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by walking up directory tree."""
    if start_dir is None:
        start_dir = Path.cwd()
    current = start_dir.resolve()
    while True:
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists() and _has_settings(config_path):
                return config_path
        if current == current.parent:
            break
        current = current.parent
    home = Path.home()
    for config_name in [".pymemspec.toml", "pymemspec.toml"]:
        config_path = home / config_name
        if config_path.exists():
            return config_path
    return None


def _has_settings(path: Path) -> bool:
    """pyproject.toml only counts when it has a [tool.pymemspec] table."""
    if path.name != "pyproject.toml":
        return True
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return "pymemspec" in data.get("tool", {})


def load_config(
    config_path: Path | None = None,
    start_dir: Path | None = None,
) -> PyMemSpecConfig:
    """Load configuration from file or use defaults.
    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching for config
    Returns:
        Loaded configuration
    """
    config = PyMemSpecConfig()
    if config_path is None:
        config_path = find_config_file(start_dir)
    if config_path is None or not config_path.exists():
        return config
    config.config_file = config_path
    config.project_root = config_path.parent
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        get_logger().warning(f"Failed to parse config file {config_path}: {e}")
        return config
    if config_path.name == "pyproject.toml":
        settings = data.get("tool", {}).get("pymemspec", {})
    else:
        settings = data.get("tool", {}).get("pymemspec", data)
    _apply_config(config, settings)
    return config


def _apply_config(config: PyMemSpecConfig, data: dict[str, Any]) -> None:
    """Apply configuration data to config object."""
    sections = {
        "backend": config.backend,
        "limits": config.limits,
        "output": config.output,
    }
    for section_name, target in sections.items():
        section = data.get(section_name, {})
        for key, value in section.items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                get_logger().warning(f"Unknown config key {section_name}.{key}")


def generate_default_config() -> str:
    """Generate default configuration file content."""
    return PyMemSpecConfig().to_toml()


def init_config(directory: Path | None = None) -> Path:
    """Initialize a new configuration file in the given directory.
    Args:
        directory: Directory to create config in (default: current)
    Returns:
        Path to created config file
    """
    if directory is None:
        directory = Path.cwd()
    config_path = directory / "pymemspec.toml"
    if config_path.exists():
        raise FileExistsError(f"Config file already exists: {config_path}")
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path


__all__ = [
    "PyMemSpecConfig",
    "BackendConfig",
    "HarnessLimits",
    "OutputConfig",
    "load_config",
    "find_config_file",
    "generate_default_config",
    "init_config",
]
