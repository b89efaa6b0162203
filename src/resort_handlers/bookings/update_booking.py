import os
import logging
from boto3 import resource
from pydantic import ValidationError

from resort.repository.booking_repo import BookingRepository
from resort.schemas.bookings import BookingStatusRequest
from resort.services.booking_service import BookingService
from resort.utils.custom_exceptions import InvalidStatusTransition, NotFoundException
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import format_validation_error, get_caller, path_param
from resort.utils.serializers import booking_to_dict

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", "ap-south-1")

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
booking_service = BookingService(booking_repo=booking_repo)

logger = logging.getLogger(__name__)


def _admin_guard(event):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")
    if not caller.is_admin:
        return send_custom_response(403, "Only admins can manage booking status")
    if not path_param(event, "id"):
        return send_custom_response(400, "id is required in the path")
    return None


def _apply(booking_id: str, message: str, operation, *args):
    try:
        booking = operation(booking_id, *args)
        return send_custom_response(200, message, booking_to_dict(booking))

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except InvalidStatusTransition as err:
        return send_custom_response(409, str(err))

    except Exception:
        logger.exception(f"Unhandled error updating booking {booking_id}")
        return send_custom_response(500, "Internal server error")


def update_booking_status(event, context):
    denied = _admin_guard(event)
    if denied:
        return denied

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = BookingStatusRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))

    operation = (
        booking_service.override_booking_status
        if request_body.force
        else booking_service.update_booking_status
    )
    return _apply(
        path_param(event, "id"),
        "Booking status updated",
        operation,
        request_body.status,
        request_body.notes,
    )


def start_cooking(event, context):
    denied = _admin_guard(event)
    if denied:
        return denied
    return _apply(path_param(event, "id"), "Cooking timer started", booking_service.start_cooking)


def complete_cooking(event, context):
    denied = _admin_guard(event)
    if denied:
        return denied
    return _apply(path_param(event, "id"), "Order is ready", booking_service.complete_cooking)
