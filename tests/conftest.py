import copy
import datetime
import pytest

from config import TIMEZONE
from database import put_member, put_intercessor_phones, get_intercessor_phones
from messages import MSG_PRE, MSG_POST
from state import (
    STAGE_DONE,
    SETUP_COMPLETED,
    Member,
    AppContext,
)

KEY_ATTRIBUTES = {
    "Members": "phone",
    "ActivePrayers": "intercessor_phone",
    "QueuedPrayers": "intercessor_phone",
    "General": "key",
}


class MemoryStorage:
    """Dict backed storage with call counters and failure injection."""

    def __init__(self):
        self.tables = {}
        self.calls = {"get": 0, "put": 0, "delete": 0}
        self.fail_on = set()
        self.fail_after_puts = None

    def get_record(self, attr, key, table):
        self.calls["get"] += 1
        if "get" in self.fail_on:
            raise RuntimeError("get failed")
        record = self.tables.get(table, {}).get(key)
        return copy.deepcopy(record)

    def put_record(self, table, record):
        self.calls["put"] += 1
        if "put" in self.fail_on:
            raise RuntimeError("put failed")
        if self.fail_after_puts is not None and self.calls["put"] > self.fail_after_puts:
            raise RuntimeError("put failed")
        key = record[KEY_ATTRIBUTES[table]]
        self.tables.setdefault(table, {})[key] = copy.deepcopy(record)

    def delete_record(self, attr, key, table):
        self.calls["delete"] += 1
        if "delete" in self.fail_on:
            raise RuntimeError("delete failed")
        self.tables.get(table, {}).pop(key, None)

    def keys(self, table):
        return list(self.tables.get(table, {}))


class RecordingSender:
    def __init__(self):
        self.sent = []
        self.ok = True

    async def send(self, phone, body):
        self.sent.append((phone, body))
        return self.ok

    def bodies(self, phone):
        return [body for p, body in self.sent if p == phone]


def wrapped(body):
    return MSG_PRE + body + MSG_POST


def days_ago(days):
    return (datetime.datetime.now(TIMEZONE) - datetime.timedelta(days=days)).isoformat()


def add_intercessor_member(storage, phone, count=0, limit=5, anchor_days=0, name=None):
    mem = Member(
        phone=phone,
        name=name or f"Intercessor {phone}",
        intercessor=True,
        setup_stage=STAGE_DONE,
        setup_status=SETUP_COMPLETED,
        weekly_prayer_limit=limit,
        prayer_count=count,
        weekly_prayer_date=days_ago(anchor_days),
    )
    put_member(storage, mem)
    phones = get_intercessor_phones(storage)
    if phone not in phones:
        put_intercessor_phones(storage, phones + [phone])
    return mem


def add_requestor_member(storage, phone, name="Requestor"):
    mem = Member(
        phone=phone,
        name=name,
        setup_stage=STAGE_DONE,
        setup_status=SETUP_COMPLETED,
    )
    put_member(storage, mem)
    return mem


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def context(storage, sender):
    counter = iter(range(1, 10_000))
    return AppContext(
        storage=storage,
        sender=sender,
        new_id=lambda: f"id-{next(counter)}",
    )
