import os
import logging
from boto3 import resource

from resort.repository.package_repo import PackageRepository
from resort.services.image_storage_service import ImageStorageService
from resort.services.package_service import PackageService
from resort.utils.custom_exceptions import NotFoundException
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import get_caller, path_param

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


def delete_package(event, context):
    caller = get_caller(event)
    if caller is None:
        return send_custom_response(401, "Unauthorized")
    if not caller.is_admin:
        return send_custom_response(403, "Only admins can delete packages")

    package_id = path_param(event, "id")
    if not package_id:
        return send_custom_response(400, "id is required in the path")

    try:
        package = package_service.delete_package(package_id)
    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))
    except Exception:
        logger.exception(f"Unhandled error deleting package {package_id}")
        return send_custom_response(500, "Internal server error")

    image_storage.delete_images(package.images)
    return send_custom_response(200, "Package deleted successfully")
