from __future__ import annotations

from record_engine.domain.models import Record, SortDirection
from record_engine.domain.registry import DEALS
from record_engine.view import ViewState


def test_toggle_same_key_flips_direction() -> None:
    state = ViewState().toggle_sort("value")
    assert (state.sort_key, state.sort_direction) == ("value", SortDirection.ASC)

    state = state.toggle_sort("value")
    assert state.sort_direction is SortDirection.DESC

    state = state.toggle_sort("value")
    assert state.sort_direction is SortDirection.ASC


def test_toggle_new_key_resets_to_ascending() -> None:
    state = ViewState(sort_key="value", sort_direction=SortDirection.DESC)

    state = state.toggle_sort("title")

    assert (state.sort_key, state.sort_direction) == ("title", SortDirection.ASC)


def test_state_is_immutable() -> None:
    original = ViewState()
    updated = original.with_query("acme")

    assert original.query == ""
    assert updated.query == "acme"


def test_apply_filters_then_sorts() -> None:
    deals = [
        Record(id=1, fields={"title": "Acme renewal", "value": 300}),
        Record(id=2, fields={"title": "Globex pilot", "value": 100}),
        Record(id=3, fields={"title": "Acme add-on", "value": 200}),
    ]
    state = ViewState(query="acme", sort_key="value", sort_direction=SortDirection.DESC)

    assert [record.id for record in state.apply(deals, DEALS)] == [1, 3]
