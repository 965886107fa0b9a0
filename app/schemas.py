from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone
from typing import Optional


class ArticleCreate(BaseModel):
    """Body of POST /articles. `published` defaults to a draft."""
    title: str = Field(..., min_length=1, examples=["Getting started with the Articles API"])
    description: Optional[str] = None
    body: str = Field(..., min_length=1)
    published: bool = False

    # "  Title " and "Title" are the same title; whitespace-only text is empty
    model_config = ConfigDict(str_strip_whitespace=True)


class ArticleUpdate(BaseModel):
    """
    Body of PATCH /articles/{id}. Only the keys actually sent are applied.

    `description` may be sent as null to clear it; the other fields are
    non-nullable, so an explicit null is rejected rather than ignored.
    """
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    body: Optional[str] = Field(None, min_length=1)
    published: Optional[bool] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("title", "body", "published", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("field may be omitted but not set to null")
        return value


class ArticleResponse(BaseModel):
    """Shape returned by every /articles endpoint."""
    id: int
    title: str
    description: Optional[str] = None
    body: str
    published: bool
    created_at: datetime
    updated_at: datetime

    # Allows Pydantic to read data directly from SQLAlchemy model instances
    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Timestamps are stored in UTC; SQLite returns them without an offset
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
