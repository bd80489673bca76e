"""Code generation configuration (xdrc.toml) loading and validation."""
from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_ANNOTATIONS = ["#[derive(Debug, Clone, PartialEq)]"]

# A Rust path such as `super` or `crate::xdr::runtime`.
PATH_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(::[A-Za-z_][A-Za-z0-9_]*)*$")


class ConfigError(Exception):
    pass


@dataclass
class CodegenConfig:
    default_annotations: list[str] = field(default_factory=lambda: list(DEFAULT_ANNOTATIONS))
    type_annotations: dict[str, list[str]] = field(default_factory=dict)
    prelude: bool = True
    prelude_path: str = "super"

    def annotations_for(self, name: str) -> list[str]:
        """Per-type list if configured, else the default list."""
        return self.type_annotations.get(name, self.default_annotations)

    def validate(self) -> None:
        if not PATH_PATTERN.match(self.prelude_path):
            raise ConfigError(f"Invalid [codegen] prelude_path '{self.prelude_path}'. Must be a Rust path.")
        for annotation in self.default_annotations:
            _check_annotation(annotation, "[annotations] default")
        for name, annotations in self.type_annotations.items():
            for annotation in annotations:
                _check_annotation(annotation, f"[annotations.types] {name}")


def load_config(path: Path) -> CodegenConfig:
    """Load and validate a TOML configuration file."""
    if not path.exists():
        raise ConfigError(f"No configuration file found at {path}")
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e
    return _parse_config(data)


def load_config_from_string(text: str) -> CodegenConfig:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(e)) from e
    return _parse_config(data)


def _parse_config(data: dict) -> CodegenConfig:
    annotations = _table(data, "annotations", "")
    codegen = _table(data, "codegen", "")
    types = _table(annotations, "types", "annotations.")

    config = CodegenConfig()
    if "default" in annotations:
        config.default_annotations = _string_list(annotations["default"], "[annotations] default")
    config.type_annotations = {
        name: _string_list(value, f"[annotations.types] {name}")
        for name, value in types.items()
    }
    if "prelude" in codegen:
        if not isinstance(codegen["prelude"], bool):
            raise ConfigError("[codegen] prelude must be true or false")
        config.prelude = codegen["prelude"]
    if "prelude_path" in codegen:
        if not isinstance(codegen["prelude_path"], str):
            raise ConfigError("[codegen] prelude_path must be a string")
        config.prelude_path = codegen["prelude_path"]

    config.validate()
    return config


def _table(data: dict, key: str, prefix: str) -> dict:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{prefix}{key}] must be a table")
    return value


def _string_list(value, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{where} must be a list of strings")
    return list(value)


def _check_annotation(annotation: str, where: str) -> None:
    text = annotation.strip()
    if not (text.startswith("#[") and text.endswith("]")):
        raise ConfigError(f"{where}: '{annotation}' is not a Rust attribute (expected '#[...]')")
