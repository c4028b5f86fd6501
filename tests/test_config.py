"""
Tests for loading engine settings from YAML.
"""

from pathlib import Path

import pytest

from minty import ConfigError, EngineConfig, Template, load_config
from minty.config import DEFAULT_CFG_FILE
from tests.infrastructure import write, write_yaml


def test_missing_file_gives_defaults(tmp_path: Path):
    assert load_config(tmp_path / DEFAULT_CFG_FILE) == EngineConfig()


def test_empty_file_gives_defaults(tmp_path: Path):
    path = write(tmp_path / DEFAULT_CFG_FILE, "")
    assert load_config(path) == EngineConfig()


def test_values_loaded(tmp_path: Path):
    path = write_yaml(tmp_path / DEFAULT_CFG_FILE, """
        max_depth: 8
        cache_size: 0
        encoding: latin-1
    """)
    config = load_config(path)
    assert config == EngineConfig(max_depth=8, cache_size=0, encoding="latin-1")


def test_relative_template_dir(tmp_path: Path):
    path = write_yaml(tmp_path / "conf" / DEFAULT_CFG_FILE, "template_dir: ../templates")
    config = load_config(path)
    assert Path(config.template_dir) == (tmp_path / "templates").resolve()


def test_absolute_template_dir_kept(tmp_path: Path):
    target = (tmp_path / "abs").resolve()
    path = write_yaml(tmp_path / DEFAULT_CFG_FILE, f"template_dir: '{target.as_posix()}'")
    assert Path(load_config(path).template_dir) == target


def test_unknown_key(tmp_path: Path):
    path = write_yaml(tmp_path / DEFAULT_CFG_FILE, "max_depht: 3")
    with pytest.raises(ConfigError, match="Unknown config keys: max_depht"):
        load_config(path)


def test_wrong_type(tmp_path: Path):
    path = write_yaml(tmp_path / DEFAULT_CFG_FILE, "cache_size: lots")
    with pytest.raises(ConfigError, match="cache_size"):
        load_config(path)


def test_non_mapping_root(tmp_path: Path):
    path = write_yaml(tmp_path / DEFAULT_CFG_FILE, "- a\n- b")
    with pytest.raises(ConfigError, match="Config root must be a mapping"):
        load_config(path)


def test_invalid_yaml(tmp_path: Path):
    path = write(tmp_path / DEFAULT_CFG_FILE, "max_depth: [1, 2\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_config_drives_engine(tmp_path: Path):
    write(tmp_path / "templates" / "hello.txt", "Hi {{ who }}")
    path = write_yaml(tmp_path / DEFAULT_CFG_FILE, "template_dir: templates")
    engine = Template.from_config(load_config(path))
    assert engine.render_file("hello.txt", {"who": "there"}) == "Hi there"
