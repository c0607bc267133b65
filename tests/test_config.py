"""Tests for configuration loading."""

from datetime import timedelta
from pathlib import Path

import pytest

from storyline.config import PipelineConfig, TimeWindowConfig, load_config


class TestTimeWindow:
    @pytest.mark.parametrize(
        "since, expected",
        [
            ("48h", timedelta(hours=48)),
            ("120d", timedelta(days=120)),
            ("30m", timedelta(minutes=30)),
            ("2w", timedelta(weeks=2)),
            (" 15S ", timedelta(seconds=15)),
            ("6 h", timedelta(hours=6)),
        ],
    )
    def test_durations(self, since, expected):
        assert TimeWindowConfig(since=since).as_timedelta() == expected

    @pytest.mark.parametrize("since", ["", "48", "h", "3y"])
    def test_invalid(self, since):
        with pytest.raises(ValueError):
            TimeWindowConfig(since=since).as_timedelta()


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig()
        assert config.ranking.recency_weight == 0.4
        assert config.ranking.velocity_window.as_timedelta() == timedelta(hours=48)
        assert config.similarity.limit == 5
        assert config.headlines.limit == 2

    def test_from_dict(self):
        config = PipelineConfig.from_dict(
            {
                "ranking": {"velocity_window": "24h", "window_hours": 2},
                "similarity": {"recency_horizon": "30d", "tag_weight": 1},
                "api": {"port": "9000"},
            }
        )
        assert config.ranking.velocity_window.as_timedelta() == timedelta(hours=24)
        assert config.ranking.window_hours == 2
        assert config.similarity.recency_horizon.as_timedelta() == timedelta(days=30)
        assert config.api_port == 9000

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            PipelineConfig.from_dict({"ranking": {"gravity": 1.8}})

    def test_bad_duration_fails_early(self):
        with pytest.raises(ValueError):
            PipelineConfig.from_dict({"ranking": {"velocity_window": "soon"}})

    def test_non_mapping_root(self):
        with pytest.raises(ValueError):
            PipelineConfig.from_dict(["ranking"])

    def test_from_yaml_resolves_relative_paths(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "input:\n  path: data/export.json\noutput:\n  path: /tmp/feed.json\nheadlines:\n  limit: 3\n",
            encoding="utf-8",
        )
        config = PipelineConfig.from_yaml(path)
        assert config.input.path == (tmp_path / "data" / "export.json").resolve()
        assert config.output.path == Path("/tmp/feed.json")
        assert config.headlines.limit == 3

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PipelineConfig.from_yaml(tmp_path / "missing.yaml")


class TestLoadConfig:
    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.delenv("STORYLINE_CONFIG", raising=False)
        monkeypatch.setenv("STORYLINE_INPUT", str(tmp_path / "in.json"))
        monkeypatch.setenv("STORYLINE_OUTPUT", str(tmp_path / "out.json"))
        monkeypatch.setenv("STORYLINE_VELOCITY_WINDOW", "12h")
        monkeypatch.setenv("PORT", "9100")
        config = load_config()
        assert config.input.path == tmp_path / "in.json"
        assert config.output.path == tmp_path / "out.json"
        assert config.ranking.velocity_window.as_timedelta() == timedelta(hours=12)
        assert config.api_port == 9100

    def test_config_file_from_environment(self, monkeypatch, tmp_path):
        path = tmp_path / "storyline.yaml"
        path.write_text("similarity:\n  limit: 8\n", encoding="utf-8")
        for name in ("STORYLINE_INPUT", "STORYLINE_OUTPUT", "STORYLINE_VELOCITY_WINDOW", "PORT"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("STORYLINE_CONFIG", str(path))
        assert load_config().similarity.limit == 8

    def test_bad_velocity_window(self, monkeypatch):
        monkeypatch.delenv("STORYLINE_CONFIG", raising=False)
        monkeypatch.setenv("STORYLINE_VELOCITY_WINDOW", "later")
        with pytest.raises(ValueError):
            load_config()
