import os
import logging
from boto3 import resource

from resort.repository.booking_repo import BookingRepository
from resort.services.booking_service import BookingService
from resort.utils.custom_exceptions import NotFoundException
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import get_caller, path_param

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", "ap-south-1")

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
booking_service = BookingService(booking_repo=booking_repo)

logger = logging.getLogger(__name__)


def delete_booking(event, context):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")
    if not caller.is_admin:
        return send_custom_response(403, "Only admins can delete bookings")

    booking_id = path_param(event, "id")
    if not booking_id:
        return send_custom_response(400, "id is required in the path")

    try:
        booking_service.delete_booking(booking_id)
        return send_custom_response(200, "Booking deleted")

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except Exception:
        logger.exception(f"Unhandled error deleting booking {booking_id}")
        return send_custom_response(500, "Internal server error")
