"""Per-type activity metadata.

Each activity type carries its own metadata shape. Values are validated when
recorded and again when read back, so consumers always get the typed model.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wanderlust.db.enums import ActivityType


class _Metadata(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class TripCreatedMetadata(_Metadata):
    kind: Literal["trip_created"] = "trip_created"
    destination: str | None = None
    trip_name: str | None = None


class PlaceVisitedMetadata(_Metadata):
    kind: Literal["place_visited"] = "place_visited"
    place_name: str | None = None
    rating: int | None = Field(None, ge=1, le=5)


class JournalPostedMetadata(_Metadata):
    kind: Literal["journal_posted"] = "journal_posted"
    title: str | None = None
    trip_name: str | None = None


class PlaceAddedMetadata(_Metadata):
    kind: Literal["place_added"] = "place_added"
    place_name: str | None = None
    category: str | None = None


ActivityMetadata = Union[TripCreatedMetadata, PlaceVisitedMetadata, JournalPostedMetadata, PlaceAddedMetadata]

METADATA_MODELS: dict[ActivityType, type[_Metadata]] = {
    ActivityType.TRIP_CREATED: TripCreatedMetadata,
    ActivityType.PLACE_VISITED: PlaceVisitedMetadata,
    ActivityType.JOURNAL_POSTED: JournalPostedMetadata,
    ActivityType.PLACE_ADDED: PlaceAddedMetadata,
}


def coerce_metadata(
    activity_type: ActivityType,
    metadata: ActivityMetadata | dict[str, Any] | None,
) -> ActivityMetadata:
    """Validate write-side metadata against the model for ``activity_type``.

    Raises:
        ValueError: model instance of another type, or invalid field values.
    """
    model = METADATA_MODELS[activity_type]
    if metadata is None:
        return model()
    if isinstance(metadata, BaseModel):
        if not isinstance(metadata, model):
            msg = f"{type(metadata).__name__} is not valid metadata for {activity_type.value}"
            raise ValueError(msg)
        return metadata
    data = {k: v for k, v in metadata.items() if k != "kind"}
    return model.model_validate(data)


def load_metadata(activity_type: str, raw: dict[str, Any] | None) -> ActivityMetadata:
    """Read-side parse; rows that no longer validate come back with empty metadata."""
    model = METADATA_MODELS[ActivityType(activity_type)]
    data = {k: v for k, v in (raw or {}).items() if k != "kind"}
    try:
        return model.model_validate(data)
    except ValidationError:
        return model()


def dump_metadata(metadata: ActivityMetadata) -> dict[str, Any]:
    """Storage form: the per-type fields, without the discriminator, Nones dropped."""
    return metadata.model_dump(exclude={"kind"}, exclude_none=True)
