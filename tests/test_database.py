import pytest

from database import (
    get_member,
    put_member,
    delete_member,
    get_intercessor_phones,
    put_intercessor_phones,
    add_intercessor,
    remove_intercessor,
    add_phone,
    remove_phone,
    draw_candidates,
    get_prayer,
    put_prayer,
    delete_prayer,
    is_prayer_active,
    enqueue_prayer,
    dequeue_prayer,
    get_prayer_queue,
)
from errors import StorageFailure, PoolEmptyError
from state import Member, Prayer, STAGE_PRAYER_LIMIT, SETUP_IN_PROGRESS


def test_member_round_trip(storage):
    mem = Member(
        phone="111-111-1111",
        name="John",
        intercessor=True,
        setup_stage=STAGE_PRAYER_LIMIT,
        setup_status=SETUP_IN_PROGRESS,
        weekly_prayer_limit=7,
        prayer_count=3,
        weekly_prayer_date="2024-01-01T00:00:00+00:00",
    )
    put_member(storage, mem)
    assert get_member(storage, "111-111-1111") == mem


def test_absent_member_is_empty(storage):
    mem = get_member(storage, "999-999-9999")
    assert mem == Member(phone="999-999-9999")


def test_put_member_replaces_whole_record(storage):
    put_member(storage, Member(phone="1", name="Old", prayer_count=4))
    put_member(storage, Member(phone="1", name="New"))
    assert get_member(storage, "1") == Member(phone="1", name="New")


def test_delete_absent_member_is_noop(storage):
    delete_member(storage, "nobody")
    assert storage.calls["delete"] == 1


def test_storage_errors_are_wrapped(storage):
    storage.fail_on.add("get")
    with pytest.raises(StorageFailure):
        get_member(storage, "1")


def test_pool_add_skips_duplicates(storage):
    add_intercessor(storage, "1")
    add_intercessor(storage, "2")
    add_intercessor(storage, "1")
    assert get_intercessor_phones(storage) == ["1", "2"]


def test_pool_remove_drops_every_occurrence(storage):
    put_intercessor_phones(storage, ["1", "2", "1", "3"])
    remove_intercessor(storage, "1")
    assert get_intercessor_phones(storage) == ["2", "3"]


def test_pool_remove_absent_phone_is_noop(storage):
    put_intercessor_phones(storage, ["1"])
    remove_intercessor(storage, "2")
    assert get_intercessor_phones(storage) == ["1"]


def test_empty_pool_reads_as_empty_list(storage):
    assert get_intercessor_phones(storage) == []


def test_phone_list_helpers_do_not_mutate():
    phones = ["1", "2"]
    assert add_phone(phones, "3") == ["1", "2", "3"]
    assert remove_phone(phones, "1") == ["2"]
    assert phones == ["1", "2"]


def test_draw_candidates_empty_pool():
    with pytest.raises(PoolEmptyError):
        draw_candidates([], 2)


def test_draw_candidates_small_pool_returns_everything():
    assert sorted(draw_candidates(["1", "2"], 2)) == ["1", "2"]
    assert draw_candidates(["1"], 2) == ["1"]


def test_draw_candidates_large_pool_returns_distinct_subset():
    pool = [str(i) for i in range(10)]
    for _ in range(50):
        drawn = draw_candidates(pool, 2)
        assert len(drawn) == 2
        assert len(set(drawn)) == 2
        assert set(drawn) <= set(pool)


def test_prayer_spaces_are_separate(storage):
    pryr = Prayer(
        intercessor_phone="1",
        intercessor=Member(phone="1", name="Intercessor"),
        requestor=Member(phone="2", name="Requestor"),
        request="please pray for my family",
    )
    put_prayer(storage, pryr)
    assert get_prayer(storage, "1") == pryr
    assert get_prayer(storage, "1", queued=True).request == ""
    assert is_prayer_active(storage, "1")
    assert not is_prayer_active(storage, "2")

    delete_prayer(storage, "1")
    assert not is_prayer_active(storage, "1")
    delete_prayer(storage, "1")


def test_enqueue_and_dequeue(storage):
    pryr = Prayer(
        intercessor_phone="1",
        intercessor=Member(phone="1"),
        requestor=Member(phone="2"),
        request="healing",
    )
    queued = enqueue_prayer(storage, pryr, "q-1")
    assert queued.intercessor_phone == "q-1"
    assert queued.intercessor == Member()
    assert get_prayer_queue(storage) == ["q-1"]
    assert get_prayer(storage, "q-1", queued=True).request == "healing"

    dequeue_prayer(storage, "q-1")
    assert get_prayer_queue(storage) == []
    assert get_prayer(storage, "q-1", queued=True).request == ""
