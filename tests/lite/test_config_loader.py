"""
Tests for planner_lite config loader.

Run with:
    pytest tests/lite/test_config_loader.py -q
"""

import json

import pytest

import planner_lite.config_loader as cfg
from planner_lite.lite_exceptions import ConfigError
from planner_lite.lite_models import Granularity


def test_from_dict_applies_defaults():
    """Config.from_dict applies defaults for an empty mapping."""
    conf = cfg.Config.from_dict({})

    assert conf.firestore_project_id is None
    assert conf.firestore_database == "(default)"
    assert conf.firestore_collection == "events"
    assert conf.default_view == "day"
    assert conf.granularity is Granularity.DAY
    assert conf.save_timeout_seconds == 30
    assert conf.log_level == "INFO"


@pytest.mark.parametrize("raw,expected", [(0, 1), (-5, 1), (301, 300), ("45", 45), ("soon", 30)])
def test_save_timeout_is_coerced(raw, expected):
    assert cfg.Config.from_dict({"save_timeout_seconds": raw}).save_timeout_seconds == expected


def test_unknown_default_view_falls_back_to_day():
    assert cfg.Config.from_dict({"default_view": "quarter"}).default_view == "day"
    assert cfg.Config.from_dict({"default_view": "Month"}).granularity is Granularity.MONTH


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "planner.yaml"
    path.write_text(
        "firestore_project_id: demo-project\n"
        "firestore_collection: calendar\n"
        "default_view: week\n"
        "log_level: debug\n",
        encoding="utf-8",
    )

    conf = cfg.load_config(str(path))

    assert conf.firestore_project_id == "demo-project"
    assert conf.firestore_collection == "calendar"
    assert conf.granularity is Granularity.WEEK
    # log_level should be uppercased by loader
    assert conf.log_level == "DEBUG"


def test_load_config_reads_json(tmp_path):
    path = tmp_path / "planner.json"
    path.write_text(json.dumps({"firestore_api_key": "abc", "save_timeout_seconds": 12}), encoding="utf-8")

    conf = cfg.load_config(str(path))

    assert conf.firestore_api_key == "abc"
    assert conf.save_timeout_seconds == 12


def test_missing_or_empty_file_uses_defaults(tmp_path):
    assert cfg.load_config(str(tmp_path / "absent.yaml")) == cfg.Config()

    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert cfg.load_config(str(empty)) == cfg.Config()


def test_non_mapping_file_raises(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        cfg.load_config(str(path))


def test_unparseable_file_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        cfg.load_config(str(path))


def test_env_overrides_replace_file_values():
    base = cfg.Config(firestore_project_id="from-file", default_view="month")

    conf = cfg.apply_env_overrides(
        base,
        environ={"PLANNER_FIRESTORE_PROJECT": "from-env", "PLANNER_SAVE_TIMEOUT": "999"},
    )

    assert conf.firestore_project_id == "from-env"
    assert conf.save_timeout_seconds == 300
    assert conf.default_view == "month"
    assert base.firestore_project_id == "from-file"


def test_env_file_fills_missing_keys(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# planner settings\n"
        "export PLANNER_DEFAULT_VIEW='week'\n"
        'PLANNER_FIRESTORE_PROJECT="dotenv-project"\n'
        "not a pair\n",
        encoding="utf-8",
    )

    conf = cfg.apply_env_overrides(
        cfg.Config(),
        environ={"PLANNER_FIRESTORE_PROJECT": "real-env"},
        env_file=env_file,
    )

    assert conf.default_view == "week"
    assert conf.firestore_project_id == "real-env"


def test_parse_env_file_missing(tmp_path):
    assert cfg.parse_env_file(tmp_path / "nope.env") == {}
