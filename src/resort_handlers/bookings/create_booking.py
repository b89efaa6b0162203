import os
import logging
from boto3 import resource
from pydantic import ValidationError

from resort.repository.booking_repo import BookingRepository
from resort.schemas.bookings import BookingRequest
from resort.services.booking_service import BookingService
from resort.utils.custom_exceptions import ConflictException
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import format_validation_error, get_caller
from resort.utils.serializers import booking_to_dict

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", "ap-south-1")

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
booking_service = BookingService(booking_repo=booking_repo)

logger = logging.getLogger(__name__)


def create_booking(event, context):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = BookingRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))

    try:
        booking = booking_service.add_booking(request_body, caller.user_id)
        return send_custom_response(
            201, "Booking created successfully", booking_to_dict(booking)
        )

    except ConflictException as err:
        return send_custom_response(409, str(err))

    except Exception:
        logger.exception("Unhandled error creating booking")
        return send_custom_response(500, "Internal server error")
