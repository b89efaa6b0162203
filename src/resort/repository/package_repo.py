from botocore.exceptions import ClientError
import logging
from typing import Optional, List
from boto3.dynamodb.conditions import Attr
from resort.models.packages import Package, PackageItem, PackageType, ItemType
from resort.repository.dynamo import (
    conditional_check_failures,
    scan_all,
    to_decimal,
)
from resort.utils.custom_exceptions import NotFoundException, PackageAlreadyExists
from resort.utils.datetime_normaliser import from_iso_string, to_iso_string
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class PackageRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _key(package_id: str) -> dict:
        return {"pk": f"PACKAGE#{package_id}", "sk": "DETAILS"}

    @staticmethod
    def _name_key(name: str) -> dict:
        return {"pk": f"PACKAGENAME#{name}", "sk": "DETAILS"}

    @staticmethod
    def _slug_key(slug: str) -> dict:
        return {"pk": f"PACKAGESLUG#{slug}", "sk": "DETAILS"}

    def _to_item(self, package: Package) -> dict:
        return {
            **self._key(package.package_id),
            "package_id": package.package_id,
            "name": package.name,
            "slug": package.slug,
            "package_type": package.type.value,
            "description": package.description,
            "features": list(package.features),
            "items": [
                {
                    "item_type": item.item_type.value,
                    "name": item.name,
                    "description": item.description,
                    "quantity": item.quantity,
                    "price": to_decimal(item.price),
                }
                for item in package.items
            ],
            "base_price": to_decimal(package.base_price),
            "discount_percent": to_decimal(package.discount_percent),
            "final_price": to_decimal(package.final_price),
            "images": list(package.images),
            "image": package.image,
            "is_active": package.is_active,
            "popularity_score": package.popularity_score,
            "booking_count": package.booking_count,
            "created_at": to_iso_string(package.created_at),
            "updated_at": to_iso_string(package.updated_at),
        }

    @staticmethod
    def _to_domain(item: dict) -> Package:
        return Package(
            package_id=item["package_id"],
            name=item["name"],
            slug=item["slug"],
            type=PackageType(item["package_type"]),
            description=item.get("description", ""),
            features=list(item.get("features", [])),
            items=[
                PackageItem(
                    item_type=ItemType(i["item_type"]),
                    name=i["name"],
                    description=i.get("description"),
                    quantity=int(i.get("quantity", 1)),
                    price=float(i["price"]),
                )
                for i in item.get("items", [])
            ],
            base_price=float(item.get("base_price", 0)),
            discount_percent=float(item.get("discount_percent", 0)),
            final_price=float(item.get("final_price", 0)),
            images=list(item.get("images", [])),
            image=item.get("image", ""),
            is_active=bool(item.get("is_active", True)),
            popularity_score=int(item.get("popularity_score", 0)),
            booking_count=int(item.get("booking_count", 0)),
            created_at=from_iso_string(item["created_at"]),
            updated_at=from_iso_string(item["updated_at"]),
        )

    def add_package(self, package: Package):
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": self._to_item(package),
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                **self._name_key(package.name),
                                "package_id": package.package_id,
                            },
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                **self._slug_key(package.slug),
                                "package_id": package.package_id,
                            },
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                ]
            )
        except ClientError as err:
            if conditional_check_failures(err):
                raise PackageAlreadyExists(
                    f"Package with name '{package.name}' already exists"
                )
            logger.error(f"Error creating package {package.package_id}: {err}")
            raise

    def update_package(self, package: Package, previous_name: Optional[str] = None):
        transact_items = [
            {
                "Put": {
                    "TableName": self.table.name,
                    "Item": self._to_item(package),
                    "ConditionExpression": "attribute_exists(pk)",
                }
            }
        ]
        renamed = previous_name is not None and previous_name != package.name
        if renamed:
            transact_items.append(
                {
                    "Delete": {
                        "TableName": self.table.name,
                        "Key": self._name_key(previous_name),
                    }
                }
            )
            transact_items.append(
                {
                    "Put": {
                        "TableName": self.table.name,
                        "Item": {
                            **self._name_key(package.name),
                            "package_id": package.package_id,
                        },
                        "ConditionExpression": "attribute_not_exists(pk)",
                    }
                }
            )
        try:
            self.client.transact_write_items(TransactItems=transact_items)
        except ClientError as err:
            failed = conditional_check_failures(err)
            if 0 in failed:
                raise NotFoundException("package", package.package_id, 404)
            if failed:
                raise PackageAlreadyExists(
                    f"Package with name '{package.name}' already exists"
                )
            logger.error(f"Error updating package {package.package_id}: {err}")
            raise

    def get_package_by_id(self, package_id: str) -> Optional[Package]:
        try:
            response = self.table.get_item(Key=self._key(package_id))
        except ClientError as err:
            logger.error(f"Error retrieving package {package_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def _resolve_marker(self, key: dict) -> Optional[Package]:
        try:
            response = self.table.get_item(Key=key)
        except ClientError as err:
            logger.error(f"Error resolving package marker {key['pk']}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self.get_package_by_id(item["package_id"])

    def get_package_by_slug(self, slug: str) -> Optional[Package]:
        return self._resolve_marker(self._slug_key(slug))

    def get_package_by_name(self, name: str) -> Optional[Package]:
        return self._resolve_marker(self._name_key(name))

    def list_packages(
        self,
        is_active: Optional[bool] = None,
        package_type: Optional[PackageType] = None,
    ) -> List[Package]:
        condition = Attr("pk").begins_with("PACKAGE#") & Attr("sk").eq("DETAILS")
        if is_active is not None:
            condition = condition & Attr("is_active").eq(is_active)
        if package_type is not None:
            condition = condition & Attr("package_type").eq(
                PackageType(package_type).value
            )
        try:
            items = list(scan_all(self.table, FilterExpression=condition))
        except ClientError as err:
            logger.error(f"Error listing packages: {err}")
            raise
        return [self._to_domain(item) for item in items]

    def delete_package(self, package: Package):
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Delete": {
                            "TableName": self.table.name,
                            "Key": self._key(package.package_id),
                            "ConditionExpression": "attribute_exists(pk)",
                        }
                    },
                    {
                        "Delete": {
                            "TableName": self.table.name,
                            "Key": self._name_key(package.name),
                        }
                    },
                    {
                        "Delete": {
                            "TableName": self.table.name,
                            "Key": self._slug_key(package.slug),
                        }
                    },
                ]
            )
        except ClientError as err:
            if 0 in conditional_check_failures(err):
                raise NotFoundException("package", package.package_id, 404)
            logger.error(f"Error deleting package {package.package_id}: {err}")
            raise
