import os
import logging
from boto3 import resource
from pydantic import ValidationError

from resort.repository.package_repo import PackageRepository
from resort.schemas.packages import PackageRequest
from resort.services.image_storage_service import ImageStorageService
from resort.services.package_service import PackageService
from resort.utils.custom_exceptions import ConflictException, InvalidInput
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import format_validation_error, get_caller
from resort.utils.serializers import package_to_dict

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", "ap-south-1")
IMAGE_BUCKET = os.environ.get("IMAGE_BUCKET")
IMAGE_PREFIX = os.environ.get("IMAGE_PREFIX", "uploads/packages")

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

package_repo = PackageRepository(table)
package_service = PackageService(package_repo=package_repo)
image_storage = ImageStorageService(IMAGE_BUCKET, prefix=IMAGE_PREFIX, region=REGION)

logger = logging.getLogger(__name__)


def create_package(event, context):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")
    if not caller.is_admin:
        return send_custom_response(403, "Only admins can create packages")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = PackageRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))

    try:
        package = package_service.create_package(request_body)
        return send_custom_response(
            201, "Package created successfully", package_to_dict(package)
        )

    except InvalidInput as err:
        image_storage.delete_images(request_body.images)
        return send_custom_response(400, str(err))

    except ConflictException as err:
        image_storage.delete_images(request_body.images)
        return send_custom_response(409, str(err))

    except Exception:
        logger.exception("Unhandled error creating package")
        image_storage.delete_images(request_body.images)
        return send_custom_response(500, "Internal server error")
