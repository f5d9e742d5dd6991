"""Application configuration using pydantic-settings."""

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path(__file__).resolve().parent.parent.parent


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load settings from YAML file."""
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        # Flatten nested structure to match Settings field names
        flattened = {}
        if 'server' in data:
            flattened['host'] = data['server'].get('host')
            flattened['port'] = data['server'].get('port')
        if 'jitter' in data:
            jitter = data['jitter']
            flattened['jitter_enabled'] = jitter.get('enabled')
            flattened['jitter_seed'] = jitter.get('seed')
            flattened['subscore_jitter'] = jitter.get('subscore_amplitude')
            flattened['composite_jitter'] = jitter.get('composite_amplitude')
        if 'feedback' in data:
            feedback = data['feedback']
            flattened['filler_ratio_threshold'] = feedback.get('filler_ratio_threshold')
            flattened['ideal_pace_min_wpm'] = feedback.get('ideal_pace_min_wpm')
            flattened['ideal_pace_max_wpm'] = feedback.get('ideal_pace_max_wpm')
        if 'catalog' in data:
            flattened['questions_file'] = data['catalog'].get('questions_file')

        # Remove None values
        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Jitter (off by default so scores are reproducible)
    jitter_enabled: bool = Field(default=False)
    jitter_seed: int | None = Field(default=None)
    subscore_jitter: float = Field(default=0.5, ge=0)
    composite_jitter: float = Field(default=0.3, ge=0)

    # Feedback
    filler_ratio_threshold: float = Field(default=0.05, ge=0)
    ideal_pace_min_wpm: float = Field(default=120.0)
    ideal_pace_max_wpm: float = Field(default=150.0)

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)
    questions_file: Path | None = Field(default=None)

    @property
    def questions_path(self) -> Path:
        """Question catalog file; relative paths resolve against the project root."""
        if self.questions_file is None:
            return self.project_root / "config" / "questions.yaml"
        if self.questions_file.is_absolute():
            return self.questions_file
        return self.project_root / self.questions_file

    @property
    def ideal_pace_wpm(self) -> tuple[float, float]:
        return (self.ideal_pace_min_wpm, self.ideal_pace_max_wpm)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include YAML file.

        Priority order (highest to lowest):
        1. init_settings (arguments passed to Settings())
        2. env_settings (environment variables)
        3. dotenv_settings (.env file)
        4. YamlSettingsSource (settings.yaml)
        5. file_secret_settings
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )


@functools.lru_cache
def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()
