from dataclasses import dataclass, field
from typing import Any, Callable
from uuid import uuid4

# Sign up stages
STAGE_NONE, STAGE_NAME, STAGE_MEMBER_TYPE, STAGE_PRAYER_LIMIT = range(4)
STAGE_DONE = 99

# Sign up statuses
SETUP_NONE = ""
SETUP_IN_PROGRESS = "in-progress"
SETUP_COMPLETED = "completed"

# State tracker statuses
STATUS_IN_PROGRESS = "IN PROGRESS"
STATUS_FAILED = "FAILED"
STATUS_COMPLETED = "COMPLETED"


@dataclass
class TextMessage:
    body: str
    phone: str
    request_id: str = ""


@dataclass
class Member:
    phone: str = ""
    name: str = ""
    intercessor: bool = False
    setup_stage: int = STAGE_NONE
    setup_status: str = SETUP_NONE
    weekly_prayer_limit: int = 0
    prayer_count: int = 0
    weekly_prayer_date: str = ""


@dataclass
class Prayer:
    # Active prayers are keyed by the intercessor phone, queued prayers by a generated id
    intercessor_phone: str = ""
    intercessor: Member = field(default_factory=Member)
    requestor: Member = field(default_factory=Member)
    request: str = ""


@dataclass
class State:
    id: str = ""
    status: str = ""
    stage: str = ""
    error: str = ""
    time_start: str = ""
    message: TextMessage = field(default_factory=lambda: TextMessage(body="", phone=""))


def no_profanity(text: str) -> str:
    return ""


def generate_id() -> str:
    return str(uuid4())


@dataclass
class AppContext:
    """Collaborators shared by every handler.

    storage must provide get_record(attr, key, table), put_record(table, record)
    and delete_record(attr, key, table). sender must provide an async
    send(phone, body) that returns a truthy value on success.
    """
    storage: Any
    sender: Any
    scan_profanity: Callable[[str], str] = no_profanity
    new_id: Callable[[], str] = generate_id
