# config.py
import datetime
import os
from dotenv import load_dotenv
from pytz import timezone

# Load environment variables
load_dotenv()

INTERCESSORS_PER_PRAYER = int(os.getenv("INTERCESSORS_PER_PRAYER", "2"))
QUOTA_WINDOW_HOURS = float(os.getenv("QUOTA_WINDOW_HOURS", "168"))
STATE_RETENTION_HOURS = float(os.getenv("STATE_RETENTION_HOURS", "24"))
UNFINISHED_STATE_RETENTION_HOURS = float(os.getenv("UNFINISHED_STATE_RETENTION_HOURS", "168"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
TIMEZONE = timezone(os.getenv("TIMEZONE", "UTC"))

MEMBERS_TABLE = os.getenv("MEMBERS_TABLE", "Members")
ACTIVE_PRAYERS_TABLE = os.getenv("ACTIVE_PRAYERS_TABLE", "ActivePrayers")
QUEUED_PRAYERS_TABLE = os.getenv("QUEUED_PRAYERS_TABLE", "QueuedPrayers")
GENERAL_TABLE = os.getenv("GENERAL_TABLE", "General")


def now() -> datetime.datetime:
    return datetime.datetime.now(TIMEZONE)

def timestamp() -> str:
    return now().isoformat(timespec="seconds")

def parse_timestamp(text: str) -> datetime.datetime:
    """Parse an ISO-8601 string; naive values are taken as local to TIMEZONE."""
    parsed = datetime.datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = TIMEZONE.localize(parsed)
    return parsed

def hours_since(text: str) -> float:
    return (now() - parse_timestamp(text)).total_seconds() / 3600
