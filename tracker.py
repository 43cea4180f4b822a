# tracker.py
import logging
from config import (
    GENERAL_TABLE,
    STATE_RETENTION_HOURS,
    UNFINISHED_STATE_RETENTION_HOURS,
    hours_since,
    timestamp,
)
from database import GENERAL_ATTRIBUTE, get_record, put_record
from state import (
    STATUS_IN_PROGRESS,
    STATUS_FAILED,
    STATUS_COMPLETED,
    State,
    TextMessage,
)

log = logging.getLogger(__name__)

STATE_TRACKER_KEY = "StateTracker"


def state_to_record(state: State) -> dict:
    return {
        "id": state.id,
        "status": state.status,
        "stage": state.stage,
        "error": state.error,
        "time_start": state.time_start,
        "message": {
            "body": state.message.body,
            "phone": state.message.phone,
            "request_id": state.message.request_id,
        },
    }

def state_from_record(record: dict) -> State:
    msg = record.get("message") or {}
    return State(
        id=record.get("id", ""),
        status=record.get("status", ""),
        stage=record.get("stage", ""),
        error=record.get("error", ""),
        time_start=record.get("time_start", ""),
        message=TextMessage(
            body=msg.get("body", ""),
            phone=msg.get("phone", ""),
            request_id=msg.get("request_id", ""),
        ),
    )


def get_states(storage) -> list[State]:
    record = get_record(storage, GENERAL_ATTRIBUTE, STATE_TRACKER_KEY, GENERAL_TABLE) or {}
    return [state_from_record(r) for r in record.get("states") or []]

def put_states(storage, states: list[State]):
    put_record(storage, GENERAL_TABLE, {
        GENERAL_ATTRIBUTE: STATE_TRACKER_KEY,
        "states": [state_to_record(s) for s in states],
    })

def _expired(state: State) -> bool:
    # failed and in progress records have their own, longer retention
    if state.status == STATUS_COMPLETED:
        limit = STATE_RETENTION_HOURS
    else:
        limit = UNFINISHED_STATE_RETENTION_HOURS
    try:
        return hours_since(state.time_start) > limit
    except ValueError:
        return True

def save_state(storage, state: State):
    """Replace any record with the same id by state. Expired records are pruned."""
    states = [s for s in get_states(storage) if s.id != state.id and not _expired(s)]
    states.append(state)
    put_states(storage, states)

def find_state(storage, state_id: str) -> State | None:
    for s in get_states(storage):
        if s.id == state_id:
            return s
    return None


# State lifecycle
def open_state(storage, message: TextMessage) -> State:
    state = State(
        id=message.request_id,
        status=STATUS_IN_PROGRESS,
        time_start=timestamp(),
        message=message,
    )
    save_state(storage, state)
    return state

def update_stage(storage, state: State, stage: str):
    state.stage = stage
    save_state(storage, state)

def fail_state(storage, state: State, error: str):
    state.status, state.error = STATUS_FAILED, error
    save_state(storage, state)
    log.error("Message %s failed at stage %s: %s", state.id, state.stage, error)

def complete_state(storage, state: State):
    # completed records are kept so a redelivered message can be recognised
    state.status = STATUS_COMPLETED
    save_state(storage, state)

def already_completed(storage, message: TextMessage) -> bool:
    state = find_state(storage, message.request_id)
    return state is not None and state.status == STATUS_COMPLETED
