import pytest

from xdrc.compiler.config import (
    DEFAULT_ANNOTATIONS,
    CodegenConfig,
    ConfigError,
    load_config,
    load_config_from_string,
)


def test_defaults():
    config = CodegenConfig()
    assert config.annotations_for("Anything") == DEFAULT_ANNOTATIONS
    assert config.prelude is True
    assert config.prelude_path == "super"


def test_full_config():
    config = load_config_from_string("""
        [annotations]
        default = ["#[derive(Debug)]"]

        [annotations.types]
        Point = ["#[derive(Debug, Clone, Copy, PartialEq, Eq)]"]

        [codegen]
        prelude = false
        prelude_path = "crate::xdr_support"
    """)
    assert config.annotations_for("Point") == ["#[derive(Debug, Clone, Copy, PartialEq, Eq)]"]
    assert config.annotations_for("Other") == ["#[derive(Debug)]"]
    assert config.prelude is False
    assert config.prelude_path == "crate::xdr_support"


def test_empty_annotation_list_is_allowed():
    config = load_config_from_string("[annotations]\ndefault = []\n")
    assert config.annotations_for("Point") == []


def test_load_from_file(tmp_path):
    path = tmp_path / "xdrc.toml"
    path.write_text('[annotations.types]\nId = ["#[derive(Copy, Clone)]"]\n')
    config = load_config(path)
    assert config.annotations_for("Id") == ["#[derive(Copy, Clone)]"]
    assert config.annotations_for("Point") == DEFAULT_ANNOTATIONS


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="No configuration file"):
        load_config(tmp_path / "absent.toml")


@pytest.mark.parametrize("text", [
    "this is not toml",
    "annotations = 3",
    "[annotations]\ndefault = \"#[derive(Debug)]\"",
    "[annotations]\ndefault = [\"derive(Debug)\"]",
    "[annotations.types]\nPoint = [1]",
    "[codegen]\nprelude = \"yes\"",
    "[codegen]\nprelude_path = \"not a path\"",
])
def test_malformed_config(text):
    with pytest.raises(ConfigError):
        load_config_from_string(text)
