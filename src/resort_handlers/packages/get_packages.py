import os
import logging
from boto3 import resource

from resort.models.packages import PackageType
from resort.repository.package_repo import PackageRepository
from resort.services.package_service import PackageService
from resort.utils.custom_exceptions import NotFoundException
from resort.utils.custom_response import send_custom_response
from resort.utils.request_context import path_param, query_params
from resort.utils.serializers import package_to_dict

TABLE_NAME = os.environ.get("TABLE_NAME")
REGION = os.environ.get("AWS_REGION", "ap-south-1")

dynamodb = resource("dynamodb", region_name=REGION)
table = dynamodb.Table(TABLE_NAME)

package_repo = PackageRepository(table)
package_service = PackageService(package_repo=package_repo)

logger = logging.getLogger(__name__)


def list_packages(event, context):
    try:
        params = query_params(event)

        is_active = None
        if params.get("isActive") is not None:
            is_active = params["isActive"].lower() == "true"

        package_type = None
        if params.get("type"):
            try:
                package_type = PackageType(params["type"].lower())
            except ValueError:
                allowed = ", ".join(t.value for t in PackageType)
                return send_custom_response(400, f"Invalid type. Allowed: {allowed}")

        packages = package_service.list_packages(
            is_active=is_active, package_type=package_type
        )
        return send_custom_response(
            200,
            "Packages retrieved successfully",
            {
                "count": len(packages),
                "packages": [package_to_dict(p) for p in packages],
            },
        )

    except Exception:
        logger.exception("Unhandled error listing packages")
        return send_custom_response(500, "Internal server error")


def get_package(event, context):
    id_or_slug = path_param(event, "id")
    if not id_or_slug:
        return send_custom_response(400, "id is required in the path")

    try:
        package = package_service.get_package(id_or_slug)
        return send_custom_response(
            200, "Package retrieved successfully", package_to_dict(package)
        )

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except Exception:
        logger.exception(f"Unhandled error retrieving package {id_or_slug}")
        return send_custom_response(500, "Internal server error")
