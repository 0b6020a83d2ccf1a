from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="GridFsHelper", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")

    # MongoDB
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias="MONGO_URI",
    )
    mongo_db: str = Field(default="gridfs_helper", validation_alias="MONGO_DB")
    gridfs_bucket: str = Field(
        default="fs",
        validation_alias="GRIDFS_BUCKET",
        description="GridFS bucket name; files live in <bucket>.files and <bucket>.chunks.",
    )

    # Pipeline templates
    template_base_url: str = Field(
        default="file://" + str(Path(__file__).resolve().parents[1] / "pipelines"),
        validation_alias="TEMPLATE_BASE_URL",
    )
    template_storage_options: dict = Field(
        default_factory=dict,
        validation_alias="TEMPLATE_STORAGE_OPTIONS",
        description="fsspec storage options as JSON, e.g. credentials for s3://",
    )
    template_package: str | None = Field(
        default=None,
        validation_alias="TEMPLATE_PACKAGE",
        description="Load templates from this Python package instead of TEMPLATE_BASE_URL.",
    )


# Global settings instance
settings = Settings()
