# database.py
import logging
import random
from config import (
    MEMBERS_TABLE,
    ACTIVE_PRAYERS_TABLE,
    QUEUED_PRAYERS_TABLE,
    GENERAL_TABLE,
)
from errors import StorageFailure, PoolEmptyError
from state import Member, Prayer

log = logging.getLogger(__name__)

MEMBER_ATTRIBUTE = "phone"
PRAYER_ATTRIBUTE = "intercessor_phone"
GENERAL_ATTRIBUTE = "key"
INTERCESSOR_POOL_KEY = "IntercessorPool"
PRAYER_QUEUE_KEY = "PrayerQueue"


def get_record(storage, attr: str, key: str, table: str) -> dict | None:
    try:
        return storage.get_record(attr, key, table)
    except Exception as e:
        log.error("get %s=%s from %s failed: %s", attr, key, table, e)
        raise StorageFailure(f"get {attr}={key} from {table} failed: {e}") from e

def put_record(storage, table: str, record: dict):
    try:
        storage.put_record(table, record)
    except Exception as e:
        log.error("put into %s failed: %s", table, e)
        raise StorageFailure(f"put into {table} failed: {e}") from e

def delete_record(storage, attr: str, key: str, table: str):
    try:
        storage.delete_record(attr, key, table)
    except Exception as e:
        log.error("delete %s=%s from %s failed: %s", attr, key, table, e)
        raise StorageFailure(f"delete {attr}={key} from {table} failed: {e}") from e


# Record conversion
def member_to_record(mem: Member) -> dict:
    return {
        "phone": mem.phone,
        "name": mem.name,
        "intercessor": mem.intercessor,
        "setup_stage": mem.setup_stage,
        "setup_status": mem.setup_status,
        "weekly_prayer_limit": mem.weekly_prayer_limit,
        "prayer_count": mem.prayer_count,
        "weekly_prayer_date": mem.weekly_prayer_date,
    }

def member_from_record(record: dict | None) -> Member:
    record = record or {}
    return Member(
        phone=record.get("phone", ""),
        name=record.get("name", ""),
        intercessor=bool(record.get("intercessor", False)),
        setup_stage=int(record.get("setup_stage", 0)),
        setup_status=record.get("setup_status", ""),
        weekly_prayer_limit=int(record.get("weekly_prayer_limit", 0)),
        prayer_count=int(record.get("prayer_count", 0)),
        weekly_prayer_date=record.get("weekly_prayer_date", ""),
    )

def prayer_to_record(pryr: Prayer) -> dict:
    return {
        "intercessor_phone": pryr.intercessor_phone,
        "intercessor": member_to_record(pryr.intercessor),
        "requestor": member_to_record(pryr.requestor),
        "request": pryr.request,
    }

def prayer_from_record(record: dict | None) -> Prayer:
    record = record or {}
    return Prayer(
        intercessor_phone=record.get("intercessor_phone", ""),
        intercessor=member_from_record(record.get("intercessor")),
        requestor=member_from_record(record.get("requestor")),
        request=record.get("request", ""),
    )


# Members functions
def get_member(storage, phone: str) -> Member:
    """Return the stored Member, or an empty Member carrying only the phone when absent."""
    mem = member_from_record(get_record(storage, MEMBER_ATTRIBUTE, phone, MEMBERS_TABLE))
    mem.phone = phone
    return mem

def put_member(storage, mem: Member):
    put_record(storage, MEMBERS_TABLE, member_to_record(mem))

def delete_member(storage, phone: str):
    delete_record(storage, MEMBER_ATTRIBUTE, phone, MEMBERS_TABLE)


# IntercessorPool functions
def get_intercessor_phones(storage) -> list[str]:
    record = get_record(storage, GENERAL_ATTRIBUTE, INTERCESSOR_POOL_KEY, GENERAL_TABLE) or {}
    return list(record.get("phones") or [])

def put_intercessor_phones(storage, phones: list[str]):
    put_record(storage, GENERAL_TABLE, {GENERAL_ATTRIBUTE: INTERCESSOR_POOL_KEY, "phones": list(phones)})

def add_phone(phones: list[str], phone: str) -> list[str]:
    if phone in phones:
        return list(phones)
    return list(phones) + [phone]

def remove_phone(phones: list[str], phone: str) -> list[str]:
    return [p for p in phones if p != phone]

def draw_candidates(phones: list[str], n: int) -> list[str]:
    if not phones:
        raise PoolEmptyError("unable to draw candidates; intercessor pool is empty")
    if len(phones) <= n:
        return list(phones)
    return random.sample(phones, n)

def add_intercessor(storage, phone: str):
    phones = get_intercessor_phones(storage)
    put_intercessor_phones(storage, add_phone(phones, phone))

def remove_intercessor(storage, phone: str):
    phones = get_intercessor_phones(storage)
    put_intercessor_phones(storage, remove_phone(phones, phone))


# Prayers functions
def _prayer_table(queued: bool) -> str:
    return QUEUED_PRAYERS_TABLE if queued else ACTIVE_PRAYERS_TABLE

def get_prayer(storage, key: str, queued: bool = False) -> Prayer:
    """Return the stored Prayer; an absent prayer comes back with an empty request."""
    record = get_record(storage, PRAYER_ATTRIBUTE, key, _prayer_table(queued))
    return prayer_from_record(record)

def put_prayer(storage, pryr: Prayer, queued: bool = False):
    put_record(storage, _prayer_table(queued), prayer_to_record(pryr))

def delete_prayer(storage, key: str, queued: bool = False):
    delete_record(storage, PRAYER_ATTRIBUTE, key, _prayer_table(queued))

def is_prayer_active(storage, phone: str) -> bool:
    record = get_record(storage, PRAYER_ATTRIBUTE, phone, ACTIVE_PRAYERS_TABLE)
    return bool(record)


# PrayerQueue functions
def get_prayer_queue(storage) -> list[str]:
    record = get_record(storage, GENERAL_ATTRIBUTE, PRAYER_QUEUE_KEY, GENERAL_TABLE) or {}
    return list(record.get("ids") or [])

def put_prayer_queue(storage, ids: list[str]):
    put_record(storage, GENERAL_TABLE, {GENERAL_ATTRIBUTE: PRAYER_QUEUE_KEY, "ids": list(ids)})

def enqueue_prayer(storage, pryr: Prayer, queue_id: str) -> Prayer:
    # queued prayers have no intercessor, so the generated id takes the key slot
    pryr.intercessor_phone, pryr.intercessor = queue_id, Member()
    put_prayer(storage, pryr, queued=True)
    ids = get_prayer_queue(storage)
    put_prayer_queue(storage, add_phone(ids, queue_id))
    log.info("Queued prayer %s from %s", queue_id, pryr.requestor.phone)
    return pryr

def dequeue_prayer(storage, queue_id: str):
    delete_prayer(storage, queue_id, queued=True)
    ids = get_prayer_queue(storage)
    put_prayer_queue(storage, remove_phone(ids, queue_id))
