from __future__ import annotations

from pathlib import Path

import pytest

from fix_pipeline.config import (
    DEFAULT_EXCLUDED_DIR,
    DEFAULT_PRODUCT,
    HIDE_RC_ENV,
    ROOT_ENV,
    VersionConfig,
    build_config,
    guess_root_dir,
    load_config,
)
from fix_pipeline.errors import ConfigError


def test_defaults(tmp_path: Path) -> None:
    cfg = VersionConfig(root_dir=str(tmp_path))
    assert cfg.root_dir == tmp_path
    assert cfg.base_file == tmp_path / "versioning" / "base.txt"
    assert cfg.product_name == DEFAULT_PRODUCT
    assert cfg.excluded_dir == DEFAULT_EXCLUDED_DIR
    assert cfg.hide_rc is None


def test_empty_values_disable(tmp_path: Path) -> None:
    cfg = VersionConfig(root_dir=tmp_path, excluded_dir="", hide_rc="")
    assert cfg.excluded_dir is None
    assert cfg.hide_rc is None


def test_relative_versioning_dir(tmp_path: Path) -> None:
    cfg = VersionConfig(root_dir=tmp_path, versioning_dir="meta/version")
    assert cfg.release_file == tmp_path / "meta" / "version" / "release.txt"


def test_load_config_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.yaml"))


def test_load_config_not_mapping(tmp_path: Path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_load_config_creates_logs_dir(tmp_path: Path) -> None:
    p = tmp_path / "cfg.yaml"
    logs = tmp_path / "logs"
    p.write_text(f"logs_dir: {logs}\n")
    assert load_config(str(p))["logs_dir"] == str(logs)
    assert logs.is_dir()


def test_build_config_layers(tmp_path: Path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text(f"root_dir: {tmp_path / 'from_file'}\nproduct_name: From File\nexcluded_dir: Examples\n")
    env = {ROOT_ENV: str(tmp_path / "from_env"), HIDE_RC_ENV: "v1.0"}

    cfg = build_config(config_path=str(p), environ=env)
    assert cfg.root_dir == tmp_path / "from_env"
    assert cfg.product_name == "From File"
    assert cfg.excluded_dir == "Examples"
    assert cfg.hide_rc == "v1.0"

    cfg = build_config(root_dir=str(tmp_path / "from_arg"), config_path=str(p), environ=env, product_name=None)
    assert cfg.root_dir == tmp_path / "from_arg"
    assert cfg.product_name == "From File"


def test_build_config_guesses_root() -> None:
    cfg = build_config(environ={})
    assert cfg.root_dir == guess_root_dir()
    assert cfg.hide_rc is None


def test_build_config_rejects_unknown_option(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        build_config(root_dir=str(tmp_path), environ={}, colour="red")


def test_unknown_yaml_key_rejected(tmp_path: Path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text(f"root_dir: {tmp_path}\nhide_cr: v4.3.0\n")
    with pytest.raises(ConfigError, match="hide_cr"):
        build_config(config_path=str(p), environ={})


def test_numeric_yaml_scalars_become_text(tmp_path: Path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text(f"root_dir: {tmp_path}\nhide_rc: 1.068\nversioning_dir: 2024\nproduct_name: 7\n")
    cfg = build_config(config_path=str(p), environ={})
    assert cfg.hide_rc == "1.068"
    assert cfg.versioning_dir == tmp_path / "2024"
    assert cfg.product_name == "7"


def test_non_scalar_yaml_value_rejected(tmp_path: Path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text(f"root_dir: {tmp_path}\nexcluded_dir: [examples, docs]\n")
    with pytest.raises(ConfigError, match="excluded_dir"):
        build_config(config_path=str(p), environ={})
