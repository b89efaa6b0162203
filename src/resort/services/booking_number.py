import random
from datetime import datetime, timezone
from typing import Optional

from resort.utils.constants import BOOKING_NUMBER_PREFIX


def generate_booking_number(
    now: Optional[datetime] = None, rng: Optional[random.Random] = None
) -> str:
    """Build a booking number like ``BK12345678042``.

    Last eight digits of the epoch milliseconds plus a three digit random
    suffix. Not collision free; storage enforces uniqueness and the booking
    service retries on a clash.
    """
    now = now or datetime.now(timezone.utc)
    rng = rng or random
    millis = str(int(now.timestamp() * 1000))[-8:]
    suffix = rng.randint(0, 999)
    return f"{BOOKING_NUMBER_PREFIX}{millis}{suffix:03d}"
