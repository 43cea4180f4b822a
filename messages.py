# messages.py
import logging
from errors import TransportFailure

log = logging.getLogger(__name__)

MSG_PRE = "PrayerTexter: "
MSG_POST = "\n\nReply HELP for help or STOP to unsubscribe."

MSG_HELP = (
    "Text pray to sign up. Intercessors text prayed once they have prayed for a request. "
    "Text cancel or stop at any time to be removed."
)
MSG_NAME_REQUEST = "Text your name, or 2 to stay anonymous."
MSG_MEMBER_TYPE_REQUEST = (
    "Text 1 to send prayer requests, or 2 to also be added to the intercessors list "
    "(to pray for others)."
)
MSG_PRAYER_INSTRUCTIONS = (
    "You are now signed up to send prayer requests! Please send them directly to this number."
)
MSG_PRAYER_NUM_REQUEST = (
    "Send the max number of prayer texts you are willing to receive and pray for per week."
)
MSG_INTERCESSOR_INSTRUCTIONS = (
    "You are now signed up to receive prayer requests. Please try to pray for the requests "
    "ASAP. Once you are done praying, send 'prayed' back to this number for confirmation."
)
MSG_SIGN_UP_CONFIRMATION = (
    "You have opted in to PrayerTexter. Msg & data rates may apply."
)
MSG_WRONG_INPUT = "Wrong input received during sign up process. Please try again."
MSG_REMOVE_USER = (
    "You have been removed from PrayerTexter. To sign back up, text the word pray to this number."
)
MSG_PROFANITY_FOUND = (
    "There was profanity found in your prayer request:\n\n{term}\n\n"
    "Please try the request again without this word or words."
)
MSG_PRAYER_INTRO = "Hello! Please pray for {name}:\n"
MSG_PRAYER_SENT_OUT = "Your prayer request has been sent out!"
MSG_PRAYER_QUEUED = (
    "We could not find any available intercessors. Your prayer has been added to the queue "
    "and will get sent out as soon as someone is available."
)
MSG_NO_ACTIVE_PRAYER = "You have no more active prayers to mark as prayed."
MSG_PRAYER_THANK_YOU = "Thank you for praying!"
MSG_PRAYER_CONFIRMATION = "Your prayer request has been prayed for by {name}!"


def join(*parts: str) -> str:
    return "\n\n".join(parts)

async def send_message(context, phone: str, body: str):
    """Send body to phone through the configured transport, with the standard pre/post text."""
    text = MSG_PRE + body + MSG_POST
    try:
        ok = await context.sender.send(phone, text)
    except Exception as e:
        log.error("Failed to send to %s: %s", phone, e)
        raise TransportFailure(f"send to {phone} failed: {e}") from e
    if not ok:
        log.error("Transport refused message to %s", phone)
        raise TransportFailure(f"send to {phone} failed")
