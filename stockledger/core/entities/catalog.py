"""Reference entities used to classify products."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Category(BaseModel):
    """Product category owned by a single user."""

    id: int | None = None
    owner_id: str
    name: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Unit(BaseModel):
    """Unit of measure (pcs, kg, box, ...) owned by a single user."""

    id: int | None = None
    owner_id: str
    name: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
