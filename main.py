# main.py
import logging
from config import LOG_LEVEL
from database import get_member, delete_member, remove_intercessor
from handle_prayer import complete_prayer, requeue_active_prayer
from handle_request import prayer_request
from handle_signup import sign_up
from messages import MSG_HELP, MSG_REMOVE_USER, send_message
from state import (
    SETUP_NONE,
    SETUP_IN_PROGRESS,
    SETUP_COMPLETED,
    Member,
    TextMessage,
    AppContext,
)
from tracker import (
    already_completed,
    open_state,
    update_stage,
    fail_state,
    complete_state,
)

log = logging.getLogger(__name__)

# Routing stages, recorded on the state tracker
HELP = "HELP"
MEMBER_DELETE = "MEMBER DELETE"
SIGN_UP = "SIGN UP"
DROP_MESSAGE = "DROP MESSAGE"
COMPLETE_PRAYER = "COMPLETE PRAYER"
PRAYER_REQUEST = "PRAYER REQUEST"


def setup_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

def route(body: str, mem: Member) -> str:
    """Pick the flow for a message from its body and the sender's sign up status."""
    lowered = body.strip().lower()

    if lowered == "help":
        return HELP
    if lowered in ("cancel", "stop"):
        return MEMBER_DELETE
    if lowered == "pray" or mem.setup_status == SETUP_IN_PROGRESS:
        return SIGN_UP
    if mem.setup_status == SETUP_NONE:
        return DROP_MESSAGE
    if lowered == "prayed":
        return COMPLETE_PRAYER
    if mem.setup_status == SETUP_COMPLETED:
        return PRAYER_REQUEST
    return DROP_MESSAGE


async def help_command(message: TextMessage, mem: Member, context: AppContext):
    await send_message(context, mem.phone, MSG_HELP)

async def member_delete(message: TextMessage, mem: Member, context: AppContext):
    delete_member(context.storage, mem.phone)
    if mem.intercessor:
        remove_intercessor(context.storage, mem.phone)
        requeue_active_prayer(context, mem.phone)
    log.info("Removed member %s", mem.phone)
    await send_message(context, mem.phone, MSG_REMOVE_USER)

async def drop_message(message: TextMessage, mem: Member, context: AppContext):
    log.warning("%s is not a registered member, dropping message", mem.phone)


HANDLERS = {
    HELP: help_command,
    MEMBER_DELETE: member_delete,
    SIGN_UP: sign_up,
    DROP_MESSAGE: drop_message,
    COMPLETE_PRAYER: complete_prayer,
    PRAYER_REQUEST: prayer_request,
}


async def main_flow(message: TextMessage, context: AppContext) -> str | None:
    """Process one inbound text message.

    Safe to call again with a redelivered message: a message already recorded
    as completed is skipped. Failures are recorded on the state tracker and
    re-raised so the caller can decide whether to redeliver. Returns the stage
    that handled the message, or None for a skipped duplicate.
    """
    storage = context.storage
    if not message.request_id:
        message.request_id = context.new_id()

    if already_completed(storage, message):
        log.info("Message %s was already processed, skipping", message.request_id)
        return None

    state = open_state(storage, message)
    try:
        mem = get_member(storage, message.phone)
        stage = route(message.body, mem)
        update_stage(storage, state, stage)
        await HANDLERS[stage](message, mem, context)
    except Exception as e:
        fail_state(storage, state, str(e) or type(e).__name__)
        raise

    complete_state(storage, state)
    return stage
