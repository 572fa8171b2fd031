from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PhotoSource(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    page_url: str | None = None
    size_label: str | None = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("photo source url must not be empty")
        return text


class Photo(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    title: str = ""
    page_url: str
    main_source: PhotoSource | None = None
    sources: tuple[PhotoSource, ...] = ()

    @field_validator("id", "page_url")
    @classmethod
    def validate_non_empty_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("photo id and page_url must not be empty")
        return text

    @model_validator(mode="after")
    def validate_main_source(self) -> Photo:
        if not self.sources:
            if self.main_source is not None:
                raise ValueError("photo main_source must be empty when there are no sources")
            return self
        if self.main_source not in self.sources:
            raise ValueError("photo main_source must be one of its sources")
        return self
