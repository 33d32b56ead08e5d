"""Unit tests for configuration loading."""

import pytest

import config
from config import EngineSettings, load_settings


class TestEngineSettings:
    """Defaults and derived values."""

    def test_defaults(self):
        s = EngineSettings()
        assert s.repetition_prompt == "Was there another interaction?"
        assert s.max_score == 100
        assert s.ata_rating_scale == 10
        assert s.ata_score(10) == 100
        assert s.ata_score(7) == 70

    @pytest.mark.parametrize("scale, rating, expected", [
        (3, 3, 100),
        (3, 1, 33),
        (3, 2, 67),
        (6, 1, 17),
        (8, 3, 38),
    ])
    def test_ata_score_rounds_for_uneven_scales(self, scale, rating, expected):
        assert EngineSettings(ata_rating_scale=scale).ata_score(rating) == expected


class TestLoadSettings:
    """YAML settings file."""

    def test_missing_file_is_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.yaml") == EngineSettings()

    def test_empty_file_is_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert load_settings(path) == EngineSettings()

    def test_overrides(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "engine:\n"
            "  repetition_prompt: Another call?\n"
            "  ata_rating_scale: 5\n"
        )
        s = load_settings(path)
        assert s.repetition_prompt == "Another call?"
        assert s.ata_rating_scale == 5
        assert s.ata_score(5) == 100
        assert s.max_score == 100

    def test_unknown_keys_ignored(self, tmp_path, capsys):
        path = tmp_path / "settings.yaml"
        path.write_text("engine:\n  colour: blue\n")
        assert load_settings(path) == EngineSettings()
        assert "[CONFIG] Ignoring unknown engine settings: colour" in capsys.readouterr().out

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("engine: [unclosed\n")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_engine_not_a_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("engine: 3\n")
        with pytest.raises(ValueError):
            load_settings(path)


class TestGetSettings:
    """Process-wide cache."""

    def test_cached(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config, "SETTINGS_FILE", tmp_path / "missing.yaml")
        config.reset_settings()
        first = config.get_settings()
        assert config.get_settings() is first

    def test_reset_reloads(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("engine:\n  max_score: 100\n  ata_rating_scale: 4\n")
        monkeypatch.setattr(config, "SETTINGS_FILE", path)
        config.reset_settings()
        assert config.get_settings().ata_rating_scale == 4
