# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from runtime.config import Settings, load_settings
from runtime.errors import ConfigError


def test_defaults_when_no_config_file(isolated_config):
    settings = load_settings()

    assert settings == Settings()
    assert settings.output == Path("analysis.json")
    assert settings.parallel_load is True


def test_config_dir_file_is_picked_up(isolated_config):
    (isolated_config / "recipe_diff.yaml").write_text(
        """
output: reports/diff.json
log_level: debug
parallel_load: false
include_removed_machines: true
json_indent: 4
blacklist: [Added, Removed]
""".lstrip(),
        encoding="utf-8",
    )

    settings = load_settings()

    assert settings.output == Path("reports/diff.json")
    assert settings.log_level == "debug"
    assert settings.parallel_load is False
    assert settings.include_removed_machines is True
    assert settings.json_indent == 4
    assert settings.blacklist == ["Added", "Removed"]
    assert settings.whitelist == []


def test_explicit_path_must_exist(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "body",
    [
        "colour: red\n",
        "json_indent: true\n",
        "json_indent: -1\n",
        "parallel_load: maybe\n",
        "blacklist: Added\n",
        "log_level: chatty\n",
        "- just\n- a list\n",
        "output: [unclosed\n",
    ],
)
def test_invalid_config_is_rejected(tmp_path, body):
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(path)


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path) == Settings()


def test_overrides_skip_none():
    settings = Settings().with_overrides(output=Path("x.json"), blacklist=None, log_level=None)
    assert settings.output == Path("x.json")
    assert settings.blacklist == []
    assert settings.log_level == "info"
