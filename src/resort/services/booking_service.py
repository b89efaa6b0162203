import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from resort.models.bookings import Booking, BookingStatus, PaymentStatus
from resort.models.users import UserRole
from resort.repository.booking_repo import BookingRepository
from resort.schemas.bookings import BookingRequest
from resort.services import order_state
from resort.services.booking_number import generate_booking_number
from resort.services.pricing import derive_booking
from resort.utils.constants import MAX_BOOKING_NUMBER_ATTEMPTS
from resort.utils.custom_exceptions import (
    BookingNumberCollision,
    ConflictException,
    Forbidden,
    NotFoundException,
)

logger = logging.getLogger(__name__)


@dataclass
class BookingSummary:
    total: int = 0
    by_status: Dict[BookingStatus, int] = field(
        default_factory=lambda: {status: 0 for status in BookingStatus}
    )
    total_revenue: float = 0.0


@dataclass
class BookingListing:
    bookings: List[Booking]
    summary: BookingSummary


def summarize(bookings: List[Booking]) -> BookingSummary:
    summary = BookingSummary(total=len(bookings))
    for booking in bookings:
        summary.by_status[booking.status] += 1
        if booking.status == BookingStatus.COMPLETED:
            summary.total_revenue += booking.final_amount or booking.total_amount or 0
    return summary


def _newest_first(bookings: List[Booking]) -> List[Booking]:
    return sorted(bookings, key=lambda b: b.created_at, reverse=True)


class BookingService:
    def __init__(
        self,
        booking_repo: BookingRepository,
        number_generator: Callable[[], str] = generate_booking_number,
        max_number_attempts: int = MAX_BOOKING_NUMBER_ATTEMPTS,
    ):
        self.booking_repo = booking_repo
        self.number_generator = number_generator
        self.max_number_attempts = max_number_attempts

    def add_booking(self, req: BookingRequest, user_id: str) -> Booking:
        now = datetime.now(timezone.utc)
        draft = derive_booking(
            Booking(
                booking_id=str(uuid4()),
                user_id=user_id,
                customer_info=req.customer_info.to_domain(),
                checkin=req.checkin,
                checkout=req.checkout,
                number_of_guests=req.number_of_guests,
                items=[item.to_domain() for item in req.items],
                package_type=req.package_type,
                package_name=req.package_name,
                special_requests=req.special_requests,
                cooking_duration=req.cooking_duration,
                status=BookingStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
        )

        for attempt in range(1, self.max_number_attempts + 1):
            booking = replace(draft, booking_number=self.number_generator())
            try:
                self.booking_repo.add_booking(booking)
            except BookingNumberCollision as err:
                logger.warning(
                    f"Booking number {err.booking_number} taken "
                    f"(attempt {attempt}/{self.max_number_attempts})"
                )
                continue
            logger.info(f"Created booking {booking.booking_id} ({booking.booking_number})")
            return booking

        raise ConflictException(
            f"could not allocate a unique booking number after "
            f"{self.max_number_attempts} attempts"
        )

    def list_bookings(
        self,
        caller_id: str,
        caller_role: UserRole,
        status: Optional[BookingStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> BookingListing:
        if caller_role == UserRole.ADMIN:
            bookings = self.booking_repo.list_bookings(status=status, start=start, end=end)
        else:
            bookings = self.booking_repo.get_user_bookings(
                caller_id, status=status, start=start, end=end
            )
        bookings = _newest_first(bookings)
        return BookingListing(bookings=bookings, summary=summarize(bookings))

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        return _newest_first(self.booking_repo.get_user_bookings(user_id))

    def get_booking(self, caller_id: str, caller_role: UserRole, booking_id: str) -> Booking:
        booking = self._get_by_id(booking_id)
        if caller_role != UserRole.ADMIN and booking.user_id != caller_id:
            raise Forbidden("Not authorized to view this booking")
        return booking

    def update_booking_status(
        self, booking_id: str, status: BookingStatus, notes: Optional[str] = None
    ) -> Booking:
        booking = self._get_by_id(booking_id)
        return self._save(order_state.transition_to(booking, status, notes))

    def override_booking_status(
        self, booking_id: str, status: BookingStatus, notes: Optional[str] = None
    ) -> Booking:
        booking = self._get_by_id(booking_id)
        return self._save(order_state.override_status(booking, status, notes))

    def start_cooking(self, booking_id: str, now: Optional[datetime] = None) -> Booking:
        booking = self._get_by_id(booking_id)
        return self._save(order_state.start_cooking(booking, now))

    def complete_cooking(self, booking_id: str, now: Optional[datetime] = None) -> Booking:
        booking = self._get_by_id(booking_id)
        return self._save(order_state.complete_cooking(booking, now))

    def delete_booking(self, booking_id: str) -> Booking:
        booking = self._get_by_id(booking_id)
        self.booking_repo.delete_booking(booking)
        logger.info(f"Deleted booking {booking_id}")
        return booking

    def _get_by_id(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("booking", booking_id, 404)
        return booking

    def _save(self, booking: Booking) -> Booking:
        updated = derive_booking(replace(booking, updated_at=datetime.now(timezone.utc)))
        self.booking_repo.save_booking(updated)
        logger.info(f"Booking {updated.booking_id} is now {updated.status.value}")
        return updated
