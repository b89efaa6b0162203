"""Derived monetary fields for packages and bookings.

Every function here is pure: the same inputs always give the same outputs and
nothing is read from or written to storage. Services call ``derive_package``
and ``derive_booking`` right before every write so that caller-supplied
derived values are never persisted.
"""
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, List, NamedTuple

from resort.models.bookings import Booking, BookingItem
from resort.models.packages import Package, PackageItem, PackageType
from resort.utils.constants import BOOKING_DISCOUNT_PERCENT

_ONE_DAY = timedelta(days=1).total_seconds()


class PackagePricing(NamedTuple):
    base_price: float
    final_price: float


class BookingPricing(NamedTuple):
    total_amount: float
    discount_amount: float
    final_amount: float


def compute_item_subtotal(item) -> float:
    return item.price * item.quantity


def apply_item_subtotals(items: Iterable[BookingItem]) -> List[BookingItem]:
    return [replace(item, subtotal=compute_item_subtotal(item)) for item in items]


def compute_package_pricing(
    items: Iterable[PackageItem], discount_percent: float
) -> PackagePricing:
    base_price = sum((compute_item_subtotal(item) for item in items), 0.0)
    discount = base_price * (discount_percent or 0) / 100
    return PackagePricing(base_price=base_price, final_price=base_price - discount)


def booking_discount_percent(package_type: PackageType) -> float:
    return BOOKING_DISCOUNT_PERCENT[PackageType(package_type).value]


def compute_booking_pricing(
    items: Iterable[BookingItem], package_type: PackageType
) -> BookingPricing:
    total = sum((item.subtotal for item in apply_item_subtotals(items)), 0.0)
    discount = total * booking_discount_percent(package_type) / 100
    return BookingPricing(
        total_amount=total, discount_amount=discount, final_amount=total - discount
    )


def compute_nights(checkin: datetime, checkout: datetime) -> int:
    days = math.ceil(abs((checkout - checkin).total_seconds()) / _ONE_DAY)
    return max(days, 1)


def derive_package(package: Package) -> Package:
    pricing = compute_package_pricing(package.items, package.discount_percent)
    images = list(package.images)
    return replace(
        package,
        base_price=pricing.base_price,
        final_price=pricing.final_price,
        images=images,
        image=images[0] if images else "",
    )


def derive_booking(booking: Booking) -> Booking:
    items = apply_item_subtotals(booking.items)
    pricing = compute_booking_pricing(items, booking.package_type)
    return replace(
        booking,
        items=items,
        number_of_nights=compute_nights(booking.checkin, booking.checkout),
        total_amount=pricing.total_amount,
        discount_amount=pricing.discount_amount,
        final_amount=pricing.final_amount,
    )
