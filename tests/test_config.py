"""Tests for settings loading."""

from pathlib import Path

from interview_evaluator.config import Settings


class TestSettings:
    def test_defaults_from_yaml(self):
        settings = Settings()
        assert settings.jitter_enabled is False
        assert settings.filler_ratio_threshold == 0.05
        assert settings.ideal_pace_wpm == (120, 150)

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("JITTER_ENABLED", "true")
        monkeypatch.setenv("PORT", "9001")
        settings = Settings()
        assert settings.jitter_enabled is True
        assert settings.port == 9001

    def test_init_overrides_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "9001")
        assert Settings(port=7000).port == 7000

    def test_default_questions_path(self, tmp_path):
        settings = Settings(project_root=tmp_path, questions_file=None)
        assert settings.questions_path == tmp_path / "config" / "questions.yaml"

    def test_relative_questions_path(self, tmp_path):
        settings = Settings(project_root=tmp_path, questions_file=Path("bank.yaml"))
        assert settings.questions_path == tmp_path / "bank.yaml"

    def test_absolute_questions_path(self, tmp_path):
        path = tmp_path / "elsewhere.yaml"
        assert Settings(questions_file=path).questions_path == path

    def test_shipped_catalog_is_found(self):
        assert Settings().questions_path.exists()
