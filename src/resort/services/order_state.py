"""Order status lifecycle for bookings.

    pending -> confirmed -> preparing -> ready -> completed
    pending | confirmed | preparing | ready -> cancelled

``preparing`` and ``ready`` carry the cooking timer: starting the timer stores
the predicted end time, completing it overwrites the end time with the actual
completion instant. ``override_status`` bypasses the table entirely and is
kept as a separate admin-only operation.

Every function returns a new Booking; the input is never mutated.
"""
import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

from resort.models.bookings import Booking, BookingStatus
from resort.utils.custom_exceptions import InvalidStatusTransition

logger = logging.getLogger(__name__)

CANCELLABLE = {
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.PREPARING,
    BookingStatus.READY,
}


class CookingTimeRemaining(NamedTuple):
    hours: int
    minutes: int
    seconds: int
    is_expired: bool


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _require(booking: Booking, allowed, target: BookingStatus):
    if booking.status not in allowed:
        raise InvalidStatusTransition(booking.status.value, target.value)


def _with_notes(booking: Booking, notes: Optional[str]) -> Optional[str]:
    return notes if notes else booking.notes


def confirm(booking: Booking) -> Booking:
    _require(booking, {BookingStatus.PENDING}, BookingStatus.CONFIRMED)
    return replace(booking, status=BookingStatus.CONFIRMED)


def cancel(booking: Booking, notes: Optional[str] = None) -> Booking:
    _require(booking, CANCELLABLE, BookingStatus.CANCELLED)
    return replace(
        booking, status=BookingStatus.CANCELLED, notes=_with_notes(booking, notes)
    )


def start_cooking(booking: Booking, now: Optional[datetime] = None) -> Booking:
    _require(booking, {BookingStatus.CONFIRMED}, BookingStatus.PREPARING)
    started = _now(now)
    return replace(
        booking,
        status=BookingStatus.PREPARING,
        cooking_start_time=started,
        cooking_end_time=started + timedelta(minutes=booking.cooking_duration),
    )


def complete_cooking(booking: Booking, now: Optional[datetime] = None) -> Booking:
    _require(booking, {BookingStatus.PREPARING}, BookingStatus.READY)
    return replace(booking, status=BookingStatus.READY, cooking_end_time=_now(now))


def complete(booking: Booking) -> Booking:
    _require(booking, {BookingStatus.READY}, BookingStatus.COMPLETED)
    return replace(booking, status=BookingStatus.COMPLETED)


def transition_to(
    booking: Booking,
    target: BookingStatus,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Booking:
    target = BookingStatus(target)
    if target == BookingStatus.CONFIRMED:
        updated = confirm(booking)
    elif target == BookingStatus.CANCELLED:
        return cancel(booking, notes)
    elif target == BookingStatus.PREPARING:
        updated = start_cooking(booking, now)
    elif target == BookingStatus.READY:
        updated = complete_cooking(booking, now)
    elif target == BookingStatus.COMPLETED:
        updated = complete(booking)
    else:
        raise InvalidStatusTransition(booking.status.value, target.value)
    return replace(updated, notes=_with_notes(booking, notes))


def override_status(
    booking: Booking, status: BookingStatus, notes: Optional[str] = None
) -> Booking:
    status = BookingStatus(status)
    logger.warning(
        "Status override on booking %s: %s -> %s",
        booking.booking_id,
        booking.status.value,
        status.value,
    )
    return replace(booking, status=status, notes=_with_notes(booking, notes))


def cooking_time_remaining(
    booking: Booking, now: Optional[datetime] = None
) -> Optional[CookingTimeRemaining]:
    if booking.cooking_end_time is None:
        return None
    left = max(0, int((booking.cooking_end_time - _now(now)).total_seconds()))
    hours, rest = divmod(left, 3600)
    minutes, seconds = divmod(rest, 60)
    return CookingTimeRemaining(hours, minutes, seconds, left == 0)
