import os
import logging
from boto3 import resource
from pydantic import ValidationError

from resort.repository.package_repo import PackageRepository
from resort.schemas.packages import PackageUpdateRequest, RemoveImageRequest
from resort.services.image_storage_service import ImageStorageService
from resort.services.package_service import PackageService
from resort.utils.custom_exceptions import ConflictException, NotFoundException
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import format_validation_error, get_caller, path_param
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


def _admin_guard(event, action: str):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")
    if not caller.is_admin:
        return send_custom_response(403, f"Only admins can {action}")
    if not path_param(event, "id"):
        return send_custom_response(400, "id is required in the path")
    return None


def _newly_uploaded(package_id: str, urls) -> list:
    if not urls:
        return []
    try:
        current = package_repo.get_package_by_id(package_id)
    except Exception:
        logger.exception(f"Could not load package {package_id} to find uploaded images")
        return []
    existing = current.images if current else []
    return [url for url in urls if url not in existing]


def update_package(event, context):
    denied = _admin_guard(event, "update packages")
    if denied:
        return denied
    package_id = path_param(event, "id")

    try:
        request_body = PackageUpdateRequest.model_validate_json(event.get("body") or "{}")
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))

    try:
        package = package_service.update_package(package_id, request_body)
    except NotFoundException as err:
        image_storage.delete_images(request_body.images)
        return send_custom_response(err.status_code, str(err))
    except ConflictException as err:
        image_storage.delete_images(_newly_uploaded(package_id, request_body.images))
        return send_custom_response(409, str(err))
    except Exception:
        logger.exception(f"Unhandled error updating package {package_id}")
        image_storage.delete_images(_newly_uploaded(package_id, request_body.images))
        return send_custom_response(500, "Internal server error")

    touched = dict.fromkeys(list(request_body.remove_images) + list(request_body.images))
    gone = [url for url in touched if url not in package.images]
    image_storage.delete_images(gone)

    return send_custom_response(
        200, "Package updated successfully", package_to_dict(package)
    )


def toggle_package(event, context):
    denied = _admin_guard(event, "toggle packages")
    if denied:
        return denied
    package_id = path_param(event, "id")

    try:
        package = package_service.toggle_package(package_id)
        state = "activated" if package.is_active else "deactivated"
        return send_custom_response(
            200, f"Package {state} successfully", package_to_dict(package)
        )

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except Exception:
        logger.exception(f"Unhandled error toggling package {package_id}")
        return send_custom_response(500, "Internal server error")


def remove_package_image(event, context):
    denied = _admin_guard(event, "remove package images")
    if denied:
        return denied
    package_id = path_param(event, "id")

    if not event.get("body"):
        return send_custom_response(400, "Image URL is required")

    try:
        request_body = RemoveImageRequest.model_validate_json(event["body"])
    except ValidationError as e:
        return send_custom_response(400, format_validation_error(e))

    try:
        package = package_service.remove_package_image(
            package_id, request_body.image_url
        )
    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))
    except Exception:
        logger.exception(f"Unhandled error removing image from package {package_id}")
        return send_custom_response(500, "Internal server error")

    image_storage.delete_images([request_body.image_url])
    return send_custom_response(
        200, "Image deleted successfully", package_to_dict(package)
    )
