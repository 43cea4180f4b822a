# handle_prayer.py
import logging
from database import (
    get_prayer,
    delete_prayer,
    is_prayer_active,
    enqueue_prayer,
)
from handle_request import promote_queued_prayers
from messages import (
    MSG_NO_ACTIVE_PRAYER,
    MSG_PRAYER_THANK_YOU,
    MSG_PRAYER_CONFIRMATION,
    send_message,
)
from state import Member, TextMessage, AppContext

log = logging.getLogger(__name__)


async def complete_prayer(message: TextMessage, mem: Member, context: AppContext):
    pryr = get_prayer(context.storage, mem.phone)
    if not pryr.request:
        await send_message(context, mem.phone, MSG_NO_ACTIVE_PRAYER)
        return

    await send_message(context, mem.phone, MSG_PRAYER_THANK_YOU)
    confirmation = MSG_PRAYER_CONFIRMATION.format(name=mem.name)
    await send_message(context, pryr.requestor.phone, confirmation)

    delete_prayer(context.storage, mem.phone)
    log.info("%s finished praying for %s", mem.phone, pryr.requestor.phone)

    # this intercessor may be free to take a queued prayer now
    await promote_queued_prayers(context)

def requeue_active_prayer(context: AppContext, phone: str) -> bool:
    """Move the active prayer held by phone back to the queue so someone else gets it."""
    if not is_prayer_active(context.storage, phone):
        return False

    pryr = get_prayer(context.storage, phone)
    delete_prayer(context.storage, phone)
    enqueue_prayer(context.storage, pryr, context.new_id())
    log.info("Re-queued active prayer held by %s", phone)
    return True
