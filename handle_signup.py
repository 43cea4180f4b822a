# handle_signup.py
import logging
from dataclasses import dataclass, replace
from config import timestamp
from database import put_member, add_intercessor
from errors import ValidationFailure
from handle_request import promote_queued_prayers
from messages import (
    MSG_NAME_REQUEST,
    MSG_MEMBER_TYPE_REQUEST,
    MSG_PRAYER_INSTRUCTIONS,
    MSG_PRAYER_NUM_REQUEST,
    MSG_INTERCESSOR_INSTRUCTIONS,
    MSG_SIGN_UP_CONFIRMATION,
    MSG_WRONG_INPUT,
    join,
    send_message,
)
from state import (
    STAGE_NAME,
    STAGE_MEMBER_TYPE,
    STAGE_PRAYER_LIMIT,
    STAGE_DONE,
    SETUP_IN_PROGRESS,
    SETUP_COMPLETED,
    Member,
    TextMessage,
    AppContext,
)

log = logging.getLogger(__name__)

ANONYMOUS = "Anonymous"


@dataclass
class SignUpStep:
    member: Member
    reply: str
    save: bool = True
    join_pool: bool = False


def parse_prayer_limit(body: str) -> int:
    try:
        num = int(body.strip())
    except ValueError:
        raise ValidationFailure(f"{body!r} is not a number")
    return num

def next_sign_up_step(body: str, mem: Member, now: str) -> SignUpStep:
    """Work out the next sign up step for a reply without touching storage.

    `now` is the timestamp used as the start of a new intercessor's prayer week.
    The returned member is a copy; mem itself is never modified.
    """
    text = body.strip()
    lowered = text.lower()

    if lowered == "pray":
        new = replace(mem, setup_status=SETUP_IN_PROGRESS, setup_stage=STAGE_NAME)
        return SignUpStep(new, MSG_NAME_REQUEST)

    if mem.setup_stage == STAGE_NAME:
        name = ANONYMOUS if text == "2" else text
        new = replace(mem, setup_stage=STAGE_MEMBER_TYPE, name=name)
        return SignUpStep(new, MSG_MEMBER_TYPE_REQUEST)

    if mem.setup_stage == STAGE_MEMBER_TYPE and text == "1":
        new = replace(mem, setup_status=SETUP_COMPLETED, setup_stage=STAGE_DONE, intercessor=False)
        return SignUpStep(new, join(MSG_PRAYER_INSTRUCTIONS, MSG_SIGN_UP_CONFIRMATION))

    if mem.setup_stage == STAGE_MEMBER_TYPE and text == "2":
        new = replace(mem, setup_stage=STAGE_PRAYER_LIMIT, intercessor=True)
        return SignUpStep(new, MSG_PRAYER_NUM_REQUEST)

    if mem.setup_stage == STAGE_PRAYER_LIMIT:
        try:
            limit = parse_prayer_limit(text)
        except ValidationFailure as e:
            log.warning("Invalid weekly prayer limit from %s: %s", mem.phone, e)
            return SignUpStep(mem, MSG_WRONG_INPUT, save=False)
        new = replace(
            mem,
            setup_status=SETUP_COMPLETED,
            setup_stage=STAGE_DONE,
            weekly_prayer_limit=limit,
            weekly_prayer_date=now,
        )
        reply = join(MSG_PRAYER_INSTRUCTIONS, MSG_INTERCESSOR_INSTRUCTIONS, MSG_SIGN_UP_CONFIRMATION)
        return SignUpStep(new, reply, join_pool=True)

    log.warning("Wrong input received during sign up from %s at stage %d", mem.phone, mem.setup_stage)
    return SignUpStep(mem, MSG_WRONG_INPUT, save=False)


async def sign_up(message: TextMessage, mem: Member, context: AppContext):
    step = next_sign_up_step(message.body, mem, timestamp())

    # the member must be saved as completed before the phone becomes selectable
    if step.save:
        put_member(context.storage, step.member)
    if step.join_pool:
        add_intercessor(context.storage, step.member.phone)

    await send_message(context, step.member.phone, step.reply)

    if step.join_pool:
        log.info("%s joined the intercessors with a weekly limit of %d",
                 step.member.phone, step.member.weekly_prayer_limit)
        await promote_queued_prayers(context)
