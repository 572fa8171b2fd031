from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.sizes import SIZE_KEY_LABELS

FLICKR_API_BASE_URL = "https://api.flickr.com/services/rest/"
FLICKR_URL_BASE = "https://www.flickr.com/photos/"


def _validate_absolute_url(value: str, *, field_name: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError(f"{field_name} must not be empty")
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{field_name} must be an absolute http(s) URL")
    return text


class FlickrSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api_base_url: str = FLICKR_API_BASE_URL
    photo_page_base_url: str = FLICKR_URL_BASE
    max_attempts: int = Field(default=3, ge=1, le=10)
    recent_page_size: int = Field(default=50, ge=1, le=500)
    recent_extras: list[str] = Field(default_factory=lambda: ["url_z", "url_c", "url_l", "url_k"])
    recent_main_size_key: str = "c"
    user_agent: str = "photofeed/0.1"

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, value: str) -> str:
        return _validate_absolute_url(value, field_name="flickr.api_base_url")

    @field_validator("photo_page_base_url")
    @classmethod
    def validate_photo_page_base_url(cls, value: str) -> str:
        text = _validate_absolute_url(value, field_name="flickr.photo_page_base_url")
        if not text.endswith("/"):
            text = f"{text}/"
        return text

    @field_validator("recent_extras")
    @classmethod
    def validate_recent_extras(cls, values: list[str]) -> list[str]:
        normalized: list[str] = []
        for raw_extra in values:
            if not isinstance(raw_extra, str):
                raise ValueError("flickr.recent_extras entries must be strings")
            extra = raw_extra.strip()
            if not extra:
                raise ValueError("flickr.recent_extras entries must not be empty")
            normalized.append(extra)
        return list(dict.fromkeys(normalized))

    @field_validator("recent_main_size_key")
    @classmethod
    def validate_recent_main_size_key(cls, value: str) -> str:
        key = value.strip()
        if key not in SIZE_KEY_LABELS:
            known = ", ".join(SIZE_KEY_LABELS)
            raise ValueError(f"flickr.recent_main_size_key must be one of: {known}")
        return key

    @field_validator("user_agent")
    @classmethod
    def validate_non_empty_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("flickr text settings must not be empty")
        return text


class PhotofeedYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    flickr: FlickrSettings = Field(default_factory=FlickrSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    photofeed_env: Literal["dev", "test", "prod"] = "dev"
    photofeed_config_path: Path | None = None


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: PhotofeedYamlSettings
    config_path: Path | None

    @property
    def flickr(self) -> FlickrSettings:
        return self.yaml.flickr


def _resolve_config_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


def _load_yaml_settings(path: Path) -> PhotofeedYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Photofeed config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Photofeed config must be a YAML mapping/object at the top level")
    return PhotofeedYamlSettings.model_validate(raw_config)


def build_settings(env: EnvSettings) -> AppSettings:
    config_path: Path | None = None
    yaml_settings = PhotofeedYamlSettings()
    if env.photofeed_config_path is not None:
        config_path = _resolve_config_path(env.photofeed_config_path)
        yaml_settings = _load_yaml_settings(config_path)
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        config_path=config_path,
    )


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    return build_settings(EnvSettings())
