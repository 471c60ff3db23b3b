"""
Tests for the diary store: ownership scoping, search and pagination.
"""
from datetime import date

import pytest

from dailydiary import diaries
from dailydiary.exceptions import NotFoundOrForbidden
from dailydiary.schemas import DiaryCreate, DiaryUpdate


def _entry(title="Day 1", content="Hello", entry_date=None):
    return DiaryCreate(title=title, content=content, entry_date=entry_date)


def test_create_and_find_round_trip(db_session, alice):
    created = diaries.create(db_session, _entry(entry_date=date(2024, 1, 1)), alice)

    found = diaries.find_by_id_for_owner(db_session, created.id, alice)

    assert found is not None
    assert found.title == "Day 1"
    assert found.content == "Hello"
    assert found.entry_date == date(2024, 1, 1)
    assert found.user_id == alice.id
    assert found.created_at <= found.updated_at


def test_create_defaults_entry_date_to_today(db_session, alice):
    created = diaries.create(db_session, _entry(), alice)
    assert created.entry_date == date.today()


def test_listing_after_create(db_session, alice):
    diaries.create(db_session, _entry(entry_date=date(2024, 1, 1)), alice)

    page = diaries.list_by_owner(db_session, alice, 0, 50)

    assert page.total_elements == 1
    [entry] = page.items
    assert entry.id is not None
    assert entry.user_id == alice.id
    assert (entry.title, entry.content, entry.entry_date) == ("Day 1", "Hello", date(2024, 1, 1))


def test_other_user_cannot_see_update_or_delete(db_session, alice, bob):
    created = diaries.create(db_session, _entry(), alice)

    assert diaries.find_by_id_for_owner(db_session, created.id, bob) is None
    with pytest.raises(NotFoundOrForbidden):
        diaries.update(db_session, created.id, DiaryUpdate(title="x", content="y"), bob)
    with pytest.raises(NotFoundOrForbidden):
        diaries.delete(db_session, created.id, bob)

    assert diaries.find_by_id_for_owner(db_session, created.id, alice).title == "Day 1"


def test_update_applies_changes(db_session, alice):
    created = diaries.create(db_session, _entry(entry_date=date(2024, 1, 1)), alice)
    created_at = created.created_at

    updated = diaries.update(
        db_session, created.id,
        DiaryUpdate(title="Day 1 (edited)", content="Hello again", entry_date=date(2024, 1, 2)),
        alice
    )

    assert updated.title == "Day 1 (edited)"
    assert updated.content == "Hello again"
    assert updated.entry_date == date(2024, 1, 2)
    assert updated.user_id == alice.id
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


def test_update_without_entry_date_keeps_existing(db_session, alice):
    created = diaries.create(db_session, _entry(entry_date=date(2024, 1, 1)), alice)

    updated = diaries.update(db_session, created.id, DiaryUpdate(title="t", content="c"), alice)

    assert updated.entry_date == date(2024, 1, 1)


def test_update_missing_entry(db_session, alice):
    with pytest.raises(NotFoundOrForbidden):
        diaries.update(db_session, 12345, DiaryUpdate(title="t", content="c"), alice)


def test_second_delete_fails(db_session, alice):
    created = diaries.create(db_session, _entry(), alice)

    diaries.delete(db_session, created.id, alice)

    assert diaries.find_by_id_for_owner(db_session, created.id, alice) is None
    with pytest.raises(NotFoundOrForbidden):
        diaries.delete(db_session, created.id, alice)


def test_list_is_newest_first_and_owner_scoped(db_session, alice, bob):
    first = diaries.create(db_session, _entry(title="first"), alice)
    second = diaries.create(db_session, _entry(title="second"), alice)
    diaries.create(db_session, _entry(title="bob's"), bob)

    page = diaries.list_by_owner(db_session, alice, 0, 50)

    assert [d.id for d in page.items] == [second.id, first.id]
    assert diaries.count_by_owner(db_session, alice) == 2
    assert diaries.count_by_owner(db_session, bob) == 1


def test_pagination_counts(db_session, alice):
    for i in range(51):
        diaries.create(db_session, _entry(title=f"entry {i}"), alice)

    first = diaries.list_by_owner(db_session, alice, 0, 50)
    second = diaries.list_by_owner(db_session, alice, 1, 50)

    assert first.total_pages == 2
    assert len(first.items) == 50
    assert first.number == 1
    assert first.has_next and not first.has_previous

    assert len(second.items) == 1
    assert second.items[0].title == "entry 0"
    assert second.number == 2
    assert second.has_previous and not second.has_next


def test_empty_listing_has_zero_pages(db_session, alice):
    page = diaries.list_by_owner(db_session, alice, 0, 50)

    assert page.items == []
    assert page.total_elements == 0
    assert page.total_pages == 0
    assert page.number == 0
    assert not page.has_next


@pytest.mark.parametrize("page_number, expected", [(1, 0), (2, 1), (0, 0), (-3, 0), (None, 0)])
def test_to_page_index_clamps(page_number, expected):
    assert diaries.to_page_index(page_number) == expected


def test_blank_search_equals_listing(db_session, alice):
    diaries.create(db_session, _entry(title="a"), alice)
    diaries.create(db_session, _entry(title="b"), alice)

    listing = diaries.list_by_owner(db_session, alice, 0, 50)
    for keyword in ("", "   ", None):
        result = diaries.search(db_session, alice, keyword, 0, 50)
        assert [d.id for d in result.items] == [d.id for d in listing.items]
        assert result.total_elements == listing.total_elements


def test_search_matches_title_or_content_ignoring_case(db_session, alice, bob):
    by_title = diaries.create(db_session, _entry(title="Beach Trip", content="sunny"), alice)
    by_content = diaries.create(db_session, _entry(title="Monday", content="went to the BEACH"), alice)
    diaries.create(db_session, _entry(title="Tuesday", content="rain"), alice)
    diaries.create(db_session, _entry(title="beach", content="beach"), bob)

    result = diaries.search(db_session, alice, "  beach ", 0, 50)

    assert {d.id for d in result.items} == {by_title.id, by_content.id}
    assert result.total_elements == 2
    assert diaries.count_by_owner(db_session, alice) == 3


def test_search_treats_wildcards_literally(db_session, alice):
    diaries.create(db_session, _entry(title="100% done", content="x"), alice)
    diaries.create(db_session, _entry(title="nothing", content="y"), alice)

    result = diaries.search(db_session, alice, "%", 0, 50)

    assert [d.title for d in result.items] == ["100% done"]


def test_out_of_range_id_is_absent(db_session, alice):
    diaries.create(db_session, _entry(), alice)

    assert diaries.find_by_id_for_owner(db_session, 10**20, alice) is None
    with pytest.raises(NotFoundOrForbidden):
        diaries.delete(db_session, 10**20, alice)
