"""Tests for feed decoding and the stored models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyfruitties._api.feed import parse_feed
from pyfruitties.exceptions import FetchError
from pyfruitties.models import CartEntry, CartEntryView, CartUiState, FruitFeed, FruitItem, RemoteFruit

# ------------------------------------------------------------------
# RemoteFruit
# ------------------------------------------------------------------


class TestRemoteFruit:
    def test_to_model_renames_fields(self) -> None:
        remote = RemoteFruit.model_validate({"name": "Apple", "full_name": "Malus domestica", "calories": "52"})
        assert remote.to_model() == FruitItem(id=0, name="Apple", full_name="Malus domestica", calories="52")

    def test_camel_case_full_name_accepted(self) -> None:
        remote = RemoteFruit.model_validate({"name": "Fig", "fullName": "Ficus carica", "calories": "74"})
        assert remote.full_name == "Ficus carica"

    def test_numeric_calories_become_strings(self) -> None:
        remote = RemoteFruit.model_validate({"name": "Kiwi", "full_name": "Actinidia deliciosa", "calories": 61})
        assert remote.calories == "61"

    def test_id_is_kept_when_present_and_sane(self) -> None:
        assert RemoteFruit.model_validate({"id": "7", "name": "A", "full_name": "B"}).id == 7
        assert RemoteFruit.model_validate({"id": "x", "name": "A", "full_name": "B"}).id == 0
        assert RemoteFruit.model_validate({"id": -3, "name": "A", "full_name": "B"}).id == 0

    def test_unknown_fields_ignored_and_raw_kept(self) -> None:
        payload = {"name": "Plum", "full_name": "Prunus domestica", "calories": "46", "season": "autumn"}
        remote = RemoteFruit.model_validate(payload)
        assert remote.raw == payload
        assert "raw" not in remote.model_dump()

    def test_missing_name_is_invalid(self) -> None:
        with pytest.raises(ValidationError):
            RemoteFruit.model_validate({"full_name": "Nameless"})


# ------------------------------------------------------------------
# FruitFeed
# ------------------------------------------------------------------


class TestFruitFeed:
    def test_malformed_entries_are_dropped(self) -> None:
        feed = FruitFeed.model_validate(
            {
                "feed": [
                    {"name": "Apple", "full_name": "Malus domestica", "calories": "52"},
                    {"full_name": "no name"},
                    "not-an-object",
                    {"name": "Pear", "full_name": "Pyrus", "calories": None},
                ]
            }
        )
        assert [fruit.name for fruit in feed.feed] == ["Apple", "Pear"]
        assert feed.feed[1].calories == ""

    def test_paging_fields_are_lenient(self) -> None:
        feed = FruitFeed.model_validate({"feed": [], "skip": "0", "limit": "ten", "totalPages": None})
        assert feed.skip == 0
        assert feed.limit is None
        assert feed.total_pages is None

    def test_missing_or_wrong_feed_yields_empty_list(self) -> None:
        assert FruitFeed.model_validate({}).feed == []
        assert FruitFeed.model_validate({"feed": {"name": "Apple"}}).feed == []

    def test_to_models(self) -> None:
        feed = FruitFeed.model_validate({"feed": [{"name": "Apple", "full_name": "Malus domestica", "calories": "52"}]})
        assert feed.to_models() == [FruitItem(name="Apple", full_name="Malus domestica", calories="52")]


class TestParseFeed:
    def test_non_object_body_is_a_fetch_error(self) -> None:
        with pytest.raises(FetchError):
            parse_feed(["feed"], url="0.json")

    def test_object_body(self) -> None:
        feed = parse_feed({"feed": [{"name": "A", "full_name": "B", "calories": "1"}], "skip": 0, "limit": 10})
        assert feed.limit == 10
        assert len(feed.feed) == 1

    def test_top_level_raw_key_is_just_an_unknown_field(self) -> None:
        body = {"feed": [{"name": "Apple", "full_name": "Malus domestica", "calories": "52"}], "raw": "x"}
        feed = parse_feed(body)
        assert [fruit.name for fruit in feed.feed] == ["Apple"]
        assert feed.raw == body

    def test_entry_with_raw_key_is_kept(self) -> None:
        entry = {"name": "Fig", "full_name": "Ficus carica", "calories": "74", "raw": 1}
        feed = parse_feed({"feed": [entry]})
        assert len(feed.feed) == 1
        assert feed.feed[0].raw == entry


# ------------------------------------------------------------------
# Stored models
# ------------------------------------------------------------------


class TestCartModels:
    def test_count_defaults_to_one_and_must_be_positive(self) -> None:
        assert CartEntry(id=1).count == 1
        with pytest.raises(ValidationError):
            CartEntry(id=1, count=0)
        with pytest.raises(ValidationError):
            CartEntry(id=0)

    def test_incremented_returns_new_entry(self) -> None:
        entry = CartEntry(id=4, count=2)
        assert entry.incremented() == CartEntry(id=4, count=3)
        assert entry.count == 2

    def test_view_and_ui_state_counts(self) -> None:
        fruit = FruitItem(id=4, name="Mango", full_name="Mangifera indica", calories="60")
        views = [CartEntryView(fruit=fruit, cart=CartEntry(id=4, count=3))]
        assert views[0].count == 3
        assert CartUiState(item_list=views).total_count == 3

    def test_fruit_item_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            FruitItem(name="A", full_name="B", calories="1", colour="red")  # type: ignore[call-arg]
