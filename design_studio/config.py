import json
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load env values for components that read os.environ directly.
_project_root = Path(__file__).resolve().parents[1]
load_dotenv(_project_root / ".env", override=False)


def _coerce_json(value: str):
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    # Alternative catalog file; the packaged templates/catalog.json is used when unset.
    TEMPLATE_CATALOG_PATH: str | None = None
    PUBLIC_APP_URL: str = "http://localhost:3000"

    MISSION_BATCH_DELAY_SECONDS: float = Field(default=5.0, ge=0)
    MISSION_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)

    EVENT_SUBSCRIBER_QUEUE_SIZE: int = Field(default=100, ge=1)
    EVENT_HISTORY_LIMIT: int = Field(default=10, ge=1)

    BACKEND_CORS_ORIGINS: list[str] = Field(default_factory=list)

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("PUBLIC_APP_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_json_loads=_coerce_json, extra="ignore")


settings = Settings()
