# allocation.py
import logging
from config import INTERCESSORS_PER_PRAYER, QUOTA_WINDOW_HOURS, hours_since, timestamp
from database import (
    get_intercessor_phones,
    get_member,
    put_member,
    is_prayer_active,
    draw_candidates,
    remove_phone,
)
from state import SETUP_COMPLETED, Member

log = logging.getLogger(__name__)


def quota_window_elapsed(intr: Member) -> bool:
    if not intr.weekly_prayer_date:
        return True
    try:
        return hours_since(intr.weekly_prayer_date) > QUOTA_WINDOW_HOURS
    except ValueError:
        log.warning("Unreadable weekly prayer date %r for %s, treating window as elapsed",
                    intr.weekly_prayer_date, intr.phone)
        return True

def claim_slot(intr: Member) -> bool:
    """Take one prayer slot from intr's weekly quota.

    Returns False, leaving intr untouched, when the quota is used up and the
    window has not passed yet. An elapsed window restarts the count at 1.
    """
    if intr.prayer_count < intr.weekly_prayer_limit:
        intr.prayer_count += 1
        return True
    if quota_window_elapsed(intr):
        intr.prayer_count = 1
        intr.weekly_prayer_date = timestamp()
        return True
    return False

def find_intercessors(storage, skip_phone: str, wanted: int = INTERCESSORS_PER_PRAYER) -> list[Member]:
    """Pick up to `wanted` intercessors for a prayer request from skip_phone.

    An empty list means nobody is available and the request should be queued.
    Every chosen intercessor is saved with its updated prayer count before the
    next candidate is looked at; nothing is rolled back if a later step fails.
    """
    intercessors = []

    # the requestor must never be asked to pray for their own request
    phones = remove_phone(get_intercessor_phones(storage), skip_phone)

    while len(intercessors) < wanted and phones:
        for phone in draw_candidates(phones, wanted - len(intercessors)):
            phones = remove_phone(phones, phone)

            intr = get_member(storage, phone)
            if not intr.intercessor or intr.setup_status != SETUP_COMPLETED:
                log.warning("%s is in the intercessor pool without a completed sign up, skipping", phone)
                continue

            if is_prayer_active(storage, phone):
                log.debug("%s already has an active prayer, skipping", phone)
                continue

            if not claim_slot(intr):
                log.debug("%s has reached the weekly limit of %d", phone, intr.weekly_prayer_limit)
                continue

            put_member(storage, intr)
            intercessors.append(intr)
            log.info("Selected intercessor %s (%d/%d this week)",
                     phone, intr.prayer_count, intr.weekly_prayer_limit)

    if not intercessors:
        log.info("No intercessors available for request from %s", skip_phone)
    elif len(intercessors) < wanted:
        log.info("Only found %d of %d intercessors for request from %s",
                 len(intercessors), wanted, skip_phone)

    return intercessors
