"""Pydantic models for API response serialization.

These models mirror the metadir dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from metadir.directory.models import Record


# ---------------------------------------------------------------------------
# Metadata models
# ---------------------------------------------------------------------------


class MaintainerResponse(BaseModel):
    """Mirrors metadir.directory.models.Maintainer."""

    name: str
    email: str


class RecordResponse(BaseModel):
    """Mirrors metadir.directory.models.Record."""

    title: str = ""
    version: str = ""
    maintainers: list[MaintainerResponse] = Field(default_factory=list)
    company: str
    website: str = ""
    source: str
    license: str = ""
    description: str = ""


def record_to_response(record: Record) -> RecordResponse:
    """Convert a Record dataclass to a Pydantic response model."""
    return RecordResponse(
        title=record.title,
        version=record.version,
        maintainers=[
            MaintainerResponse(name=m.name, email=m.email) for m in record.maintainers
        ],
        company=record.company,
        website=record.website,
        source=record.source,
        license=record.license,
        description=record.description,
    )
