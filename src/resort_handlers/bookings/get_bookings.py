import os
import logging
from boto3 import resource

from resort.models.bookings import BookingStatus
from resort.repository.booking_repo import BookingRepository
from resort.services.booking_service import BookingService
from resort.utils.custom_exceptions import Forbidden, NotFoundException
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import (
    get_caller,
    parse_query_datetime,
    path_param,
    query_params,
)
from resort.utils.serializers import booking_to_dict, listing_to_dict

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", "ap-south-1")

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
booking_service = BookingService(booking_repo=booking_repo)

logger = logging.getLogger(__name__)


def list_bookings(event, context):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")

    params = query_params(event)
    status = None
    if params.get("status"):
        try:
            status = BookingStatus(params["status"].lower())
        except ValueError:
            allowed = ", ".join(s.value for s in BookingStatus)
            return send_custom_response(400, f"Invalid status. Allowed: {allowed}")

    try:
        start = parse_query_datetime(params["startDate"]) if params.get("startDate") else None
        end = parse_query_datetime(params["endDate"]) if params.get("endDate") else None
    except ValueError as e:
        return send_custom_response(400, str(e))

    try:
        listing = booking_service.list_bookings(
            caller.user_id, caller.role, status=status, start=start, end=end
        )
        return send_custom_response(
            200, "Bookings retrieved successfully", listing_to_dict(listing)
        )

    except Exception:
        logger.exception("Unhandled error listing bookings")
        return send_custom_response(500, "Internal server error")


def get_user_bookings(event, context):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")

    target_user_id = path_param(event, "user_id") or caller.user_id
    if target_user_id != caller.user_id and not caller.is_admin:
        return send_custom_response(403, "Not authorized to view these bookings")

    try:
        bookings = booking_service.get_user_bookings(target_user_id)
        return send_custom_response(
            200,
            "Bookings retrieved successfully",
            {
                "count": len(bookings),
                "bookings": [booking_to_dict(b) for b in bookings],
            },
        )

    except Exception:
        logger.exception(f"Unhandled error retrieving bookings of {target_user_id}")
        return send_custom_response(500, "Internal server error")


def get_booking(event, context):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")

    booking_id = path_param(event, "id")
    if not booking_id:
        return send_custom_response(400, "id is required in the path")

    try:
        booking = booking_service.get_booking(caller.user_id, caller.role, booking_id)
        return send_custom_response(
            200, "Booking retrieved successfully", booking_to_dict(booking)
        )

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except Forbidden as err:
        return send_custom_response(403, str(err))

    except Exception:
        logger.exception(f"Unhandled error retrieving booking {booking_id}")
        return send_custom_response(500, "Internal server error")
