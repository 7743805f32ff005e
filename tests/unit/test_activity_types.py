"""Unit tests for per-type activity metadata."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wanderlust.db.enums import ActivityType
from wanderlust.social.activity_types import (
    JournalPostedMetadata,
    PlaceAddedMetadata,
    PlaceVisitedMetadata,
    coerce_metadata,
    dump_metadata,
    load_metadata,
)


class TestCoerce:
    def test_none_gives_empty_model(self):
        meta = coerce_metadata(ActivityType.PLACE_ADDED, None)
        assert isinstance(meta, PlaceAddedMetadata)
        assert dump_metadata(meta) == {}

    def test_unknown_keys_dropped(self):
        meta = coerce_metadata(ActivityType.JOURNAL_POSTED, {"title": "Day 1", "mood": "great"})
        assert isinstance(meta, JournalPostedMetadata)
        assert dump_metadata(meta) == {"title": "Day 1"}

    def test_kind_key_ignored(self):
        meta = coerce_metadata(ActivityType.PLACE_VISITED, {"kind": "trip_created", "place_name": "Porto"})
        assert isinstance(meta, PlaceVisitedMetadata)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_bounds(self, rating):
        with pytest.raises(ValidationError):
            coerce_metadata(ActivityType.PLACE_VISITED, {"rating": rating})

    def test_wrong_model_rejected(self):
        with pytest.raises(ValueError, match="not valid metadata"):
            coerce_metadata(ActivityType.PLACE_ADDED, PlaceVisitedMetadata())


class TestLoad:
    def test_round_trips_stored_fields(self):
        meta = load_metadata("place_visited", {"place_name": "Sintra", "rating": 3})
        assert meta == PlaceVisitedMetadata(place_name="Sintra", rating=3)

    def test_invalid_stored_row_reads_empty(self):
        meta = load_metadata("place_visited", {"rating": 42})
        assert meta == PlaceVisitedMetadata()

    def test_null_column(self):
        assert load_metadata("journal_posted", None) == JournalPostedMetadata()
