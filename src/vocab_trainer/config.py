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
    """Custom settings source that loads from config/settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        # Flatten nested structure to match Settings field names
        flattened = {}
        if "server" in data:
            flattened["host"] = data["server"].get("host")
            flattened["port"] = data["server"].get("port")
            flattened["allowed_origins"] = data["server"].get("allowed_origins")
        if "auth" in data:
            flattened["jwt_algorithm"] = data["auth"].get("algorithm")
            flattened["jwt_expire_days"] = data["auth"].get("expire_days")
        if "storage" in data:
            flattened["data_dir"] = data["storage"].get("data_dir")

        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(default="development")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000)
    allowed_origins: str = Field(default="http://localhost:3000,http://127.0.0.1:3000")

    # Auth
    jwt_secret: str = Field(default="dev-secret-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_days: int = Field(default=30)

    # Storage
    data_dir: Path | None = Field(default=None)

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def documents_dir(self) -> Path:
        d = self.data_dir or self.project_root / "data" / "db"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

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
