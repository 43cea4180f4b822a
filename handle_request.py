# handle_request.py
import logging
from allocation import find_intercessors
from database import (
    put_prayer,
    get_prayer,
    get_prayer_queue,
    enqueue_prayer,
    dequeue_prayer,
)
from messages import (
    MSG_PROFANITY_FOUND,
    MSG_PRAYER_INTRO,
    MSG_PRAYER_SENT_OUT,
    MSG_PRAYER_QUEUED,
    send_message,
)
from state import Member, Prayer, TextMessage, AppContext

log = logging.getLogger(__name__)


async def assign_prayer(request: str, requestor: Member, intercessors: list[Member], context: AppContext):
    """Create one active prayer per intercessor and let everyone involved know."""
    for intr in intercessors:
        pryr = Prayer(
            intercessor_phone=intr.phone,
            intercessor=intr,
            requestor=requestor,
            request=request,
        )
        put_prayer(context.storage, pryr)
        intro = MSG_PRAYER_INTRO.format(name=requestor.name)
        await send_message(context, intr.phone, intro + pryr.request)

    await send_message(context, requestor.phone, MSG_PRAYER_SENT_OUT)

async def queue_prayer(message: TextMessage, mem: Member, context: AppContext):
    pryr = Prayer(requestor=mem, request=message.body)
    enqueue_prayer(context.storage, pryr, context.new_id())
    await send_message(context, mem.phone, MSG_PRAYER_QUEUED)

async def prayer_request(message: TextMessage, mem: Member, context: AppContext):
    profanity = context.scan_profanity(message.body)
    if profanity:
        log.warning("Profanity found in prayer request from %s", mem.phone)
        await send_message(context, mem.phone, MSG_PROFANITY_FOUND.format(term=profanity))
        return

    intercessors = find_intercessors(context.storage, mem.phone)
    if not intercessors:
        await queue_prayer(message, mem, context)
        return

    await assign_prayer(message.body, mem, intercessors, context)

async def promote_queued_prayers(context: AppContext) -> int:
    """Send out queued prayers, oldest first, while intercessors are available.

    Queued prayers nobody can take yet stay queued. Returns how many were sent.
    """
    promoted = 0
    for queue_id in get_prayer_queue(context.storage):
        pryr = get_prayer(context.storage, queue_id, queued=True)
        if not pryr.request:
            log.warning("Queued prayer %s is missing, dropping it from the queue", queue_id)
            dequeue_prayer(context.storage, queue_id)
            continue

        intercessors = find_intercessors(context.storage, pryr.requestor.phone)
        if not intercessors:
            continue

        await assign_prayer(pryr.request, pryr.requestor, intercessors, context)
        dequeue_prayer(context.storage, queue_id)
        promoted += 1
        log.info("Promoted queued prayer %s to %d intercessor(s)", queue_id, len(intercessors))

    return promoted
