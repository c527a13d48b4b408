from typing import List, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    pass


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "loro-api"
    LOG_LEVEL: str = "INFO"

    GITHUB_TOKEN: str
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TIMEOUT: float = 30.0

    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, ge=1, le=65535)

    TREE_STRATEGY: Literal["nested", "flat"] = "nested"
    TREE_MAX_DEPTH: int = Field(default=32, ge=1)

    CORS_ORIGINS: List[str] = ["*"]

    @field_validator("GITHUB_TOKEN")
    @classmethod
    def _token_well_formed(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("GITHUB_TOKEN is empty")
        if any(ch.isspace() for ch in v):
            raise ValueError("GITHUB_TOKEN must not contain whitespace")
        return v


def load_settings(**overrides) -> Settings:
    """
    Build Settings from the environment (and .env).
    Raises ConfigError with a readable message instead of pydantic's ValidationError.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e
