from datetime import datetime
from typing import Optional

from resort.models.bookings import Booking, BookingStatus
from resort.models.packages import Package
from resort.services.booking_service import BookingListing
from resort.services.order_state import cooking_time_remaining
from resort.utils.datetime_normaliser import optional_to_iso


def package_to_dict(package: Package) -> dict:
    return {
        "id": package.package_id,
        "name": package.name,
        "slug": package.slug,
        "type": package.type.value,
        "description": package.description,
        "features": list(package.features),
        "items": [
            {
                "itemType": item.item_type.value,
                "name": item.name,
                "description": item.description,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in package.items
        ],
        "basePrice": package.base_price,
        "discountPercent": package.discount_percent,
        "finalPrice": package.final_price,
        "images": list(package.images),
        "image": package.image,
        "isActive": package.is_active,
        "popularityScore": package.popularity_score,
        "bookingCount": package.booking_count,
        "createdAt": optional_to_iso(package.created_at),
        "updatedAt": optional_to_iso(package.updated_at),
    }


def booking_to_dict(booking: Booking, now: Optional[datetime] = None) -> dict:
    data = {
        "id": booking.booking_id,
        "userId": booking.user_id,
        "bookingNumber": booking.booking_number,
        "packageType": booking.package_type.value,
        "packageName": booking.package_name,
        "customerInfo": {
            "name": booking.customer_info.name,
            "email": booking.customer_info.email,
            "phone": booking.customer_info.phone,
        },
        "checkInDate": optional_to_iso(booking.checkin),
        "checkOutDate": optional_to_iso(booking.checkout),
        "numberOfGuests": booking.number_of_guests,
        "numberOfNights": booking.number_of_nights,
        "items": [
            {
                "itemType": item.item_type.value,
                "name": item.name,
                "description": item.description,
                "quantity": item.quantity,
                "price": item.price,
                "subtotal": item.subtotal,
            }
            for item in booking.items
        ],
        "totalAmount": booking.total_amount,
        "discountAmount": booking.discount_amount,
        "finalAmount": booking.final_amount,
        "status": booking.status.value,
        "paymentStatus": booking.payment_status.value,
        "specialRequests": booking.special_requests,
        "cookingStartTime": optional_to_iso(booking.cooking_start_time),
        "cookingEndTime": optional_to_iso(booking.cooking_end_time),
        "cookingDuration": booking.cooking_duration,
        "notes": booking.notes,
        "createdAt": optional_to_iso(booking.created_at),
        "updatedAt": optional_to_iso(booking.updated_at),
    }
    remaining = cooking_time_remaining(booking, now)
    if remaining is not None and booking.status == BookingStatus.PREPARING:
        data["timeRemaining"] = {
            "hours": remaining.hours,
            "minutes": remaining.minutes,
            "seconds": remaining.seconds,
            "isExpired": remaining.is_expired,
        }
    return data


def listing_to_dict(listing: BookingListing) -> dict:
    stats = {"total": listing.summary.total}
    stats.update(
        {status.value: count for status, count in listing.summary.by_status.items()}
    )
    stats["totalRevenue"] = listing.summary.total_revenue
    return {
        "count": len(listing.bookings),
        "stats": stats,
        "bookings": [booking_to_dict(b) for b in listing.bookings],
    }
