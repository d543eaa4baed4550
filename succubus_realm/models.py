"""Core data models.

The likes document is validated with pydantic at every read and write
boundary. Character records stay plain dicts: the characters file is owned by
an external content pipeline and may carry fields this package does not know
about (or be missing an id), which the integrity reconciler has to see as-is.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, Field, StrictInt, ValidationError

LikeCount = Annotated[StrictInt, Field(ge=0)]


class LikesDocument(BaseModel):
    """On-disk shape of the likes file: ``{"likes": {"<id>": <count>}}``."""

    likes: dict[str, LikeCount]


class ValidationResult(BaseModel):
    """Outcome of validating a likes document. `error` names the first violation."""

    valid: bool
    error: str | None = None


class LikeStatistics(BaseModel):
    """Aggregates derived from the full likes map."""

    total_characters: int
    total_likes: int
    average_likes: float


class ReconcileReport(BaseModel):
    """What the last integrity pass found and changed."""

    seeded: list[str] = Field(default_factory=list)  # ids created at 0
    removed: list[str] = Field(default_factory=list)  # orphaned ids deleted
    issues: list[str] = Field(default_factory=list)
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.seeded or self.removed)


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "document"
    value = first.get("input")
    if location.startswith("likes."):
        return f"Invalid like count for id {location[6:]}: {value!r} ({first['msg']})"
    return f"{location}: {first['msg']}"


def validate_likes(document: Any) -> ValidationResult:
    """Check that *document* is ``{"likes": {...}}`` with non-negative integer counts.

    Validation stops at the first violation; JSON booleans and floats are
    rejected as counts.
    """
    if not isinstance(document, dict):
        return ValidationResult(valid=False, error="Likes document is not an object")
    if not isinstance(document.get("likes"), dict):
        return ValidationResult(
            valid=False, error="'likes' property is missing or is not an object"
        )
    try:
        LikesDocument.model_validate(document)
    except ValidationError as e:
        return ValidationResult(valid=False, error=_describe(e))
    return ValidationResult(valid=True)


def empty_likes() -> dict[str, Any]:
    return {"likes": {}}
