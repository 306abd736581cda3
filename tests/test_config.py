"""
Tests for tuning configuration.
"""

import json

from career_engine.config import DEFAULT_TUNING, load_tuning, resolve_tuning, save_tuning


class TestResolveTuning:

    def test_defaults(self):
        assert resolve_tuning() == DEFAULT_TUNING

    def test_partial_override(self):
        tuning = resolve_tuning({"momentum_boost": 1.5})

        assert tuning["momentum_boost"] == 1.5
        assert tuning["momentum_streak"] == 3

    def test_defaults_not_mutated(self):
        resolve_tuning({"base_weight": 99})
        assert DEFAULT_TUNING["base_weight"] == 10


class TestLoadTuning:
    """Tests for loading overrides from disk."""

    def test_no_path(self):
        assert load_tuning(None) == DEFAULT_TUNING

    def test_missing_file(self, tmp_path):
        assert load_tuning(tmp_path / "missing.json") == DEFAULT_TUNING

    def test_overrides_merged(self, tmp_path):
        path = tmp_path / "tuning.json"
        path.write_text(json.dumps({"default_cooldown": 5}))

        tuning = load_tuning(path)

        assert tuning["default_cooldown"] == 5
        assert tuning["max_stage"] == 5

    def test_invalid_json_falls_back(self, tmp_path):
        path = tmp_path / "tuning.json"
        path.write_text("{not json")

        assert load_tuning(path) == DEFAULT_TUNING

    def test_unknown_keys_dropped(self, tmp_path):
        path = tmp_path / "tuning.json"
        path.write_text(json.dumps({"warp_speed": 9, "base_weight": 4}))

        tuning = load_tuning(path)

        assert "warp_speed" not in tuning
        assert tuning["base_weight"] == 4

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "tuning.json"
        tuning = resolve_tuning({"skill_bonus_max": 20})

        assert save_tuning(tuning, path)
        assert load_tuning(path) == tuning
