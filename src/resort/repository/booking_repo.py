from botocore.exceptions import ClientError
import logging
from typing import Optional, List
from boto3.dynamodb.conditions import Attr, Key
from resort.models.bookings import (
    Booking,
    BookingItem,
    BookingStatus,
    CustomerInfo,
    PaymentStatus,
)
from resort.models.packages import ItemType, PackageType
from resort.repository.dynamo import (
    conditional_check_failures,
    query_all,
    scan_all,
    to_decimal,
)
from resort.utils.custom_exceptions import BookingNumberCollision, NotFoundException
from resort.utils.datetime_normaliser import (
    from_iso_string,
    optional_from_iso,
    optional_to_iso,
    to_iso_string,
)
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class BookingRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    @staticmethod
    def _key(booking_id: str) -> dict:
        return {"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"}

    @staticmethod
    def _user_key(user_id: str, booking_id: str) -> dict:
        return {"pk": f"USER#{user_id}", "sk": f"BOOKING#{booking_id}"}

    @staticmethod
    def _number_key(booking_number: str) -> dict:
        return {"pk": f"BOOKINGNUMBER#{booking_number}", "sk": "DETAILS"}

    @staticmethod
    def _record(booking: Booking) -> dict:
        return {
            "booking_id": booking.booking_id,
            "user_id": booking.user_id,
            "booking_number": booking.booking_number,
            "package_type": booking.package_type.value,
            "package_name": booking.package_name,
            "customer_info": {
                "name": booking.customer_info.name,
                "email": booking.customer_info.email,
                "phone": booking.customer_info.phone,
            },
            "check_in": to_iso_string(booking.checkin),
            "check_out": to_iso_string(booking.checkout),
            "number_of_guests": booking.number_of_guests,
            "number_of_nights": booking.number_of_nights,
            "items": [
                {
                    "item_type": item.item_type.value,
                    "name": item.name,
                    "description": item.description,
                    "quantity": item.quantity,
                    "price": to_decimal(item.price),
                    "subtotal": to_decimal(item.subtotal),
                }
                for item in booking.items
            ],
            "total_amount": to_decimal(booking.total_amount),
            "discount_amount": to_decimal(booking.discount_amount),
            "final_amount": to_decimal(booking.final_amount),
            "booking_status": booking.status.value,
            "payment_status": booking.payment_status.value,
            "special_requests": booking.special_requests,
            "cooking_start_time": optional_to_iso(booking.cooking_start_time),
            "cooking_end_time": optional_to_iso(booking.cooking_end_time),
            "cooking_duration": booking.cooking_duration,
            "notes": booking.notes,
            "created_at": to_iso_string(booking.created_at),
            "updated_at": to_iso_string(booking.updated_at),
        }

    @staticmethod
    def _to_domain(item: dict) -> Booking:
        customer = item["customer_info"]
        return Booking(
            booking_id=item["booking_id"],
            user_id=item["user_id"],
            booking_number=item.get("booking_number"),
            package_type=PackageType(item.get("package_type", "custom")),
            package_name=item.get("package_name"),
            customer_info=CustomerInfo(
                name=customer["name"], email=customer["email"], phone=customer["phone"]
            ),
            checkin=from_iso_string(item["check_in"]),
            checkout=from_iso_string(item["check_out"]),
            number_of_guests=int(item["number_of_guests"]),
            number_of_nights=int(item.get("number_of_nights", 1)),
            items=[
                BookingItem(
                    item_type=ItemType(i["item_type"]),
                    name=i["name"],
                    description=i.get("description"),
                    quantity=int(i["quantity"]),
                    price=float(i["price"]),
                    subtotal=float(i["subtotal"]) if i.get("subtotal") is not None else None,
                )
                for i in item.get("items", [])
            ],
            total_amount=float(item.get("total_amount", 0)),
            discount_amount=float(item.get("discount_amount", 0)),
            final_amount=float(item.get("final_amount", 0)),
            status=BookingStatus(item["booking_status"]),
            payment_status=PaymentStatus(item.get("payment_status", "pending")),
            special_requests=item.get("special_requests"),
            cooking_start_time=optional_from_iso(item.get("cooking_start_time")),
            cooking_end_time=optional_from_iso(item.get("cooking_end_time")),
            cooking_duration=int(item.get("cooking_duration", 30)),
            notes=item.get("notes"),
            created_at=from_iso_string(item["created_at"]),
            updated_at=from_iso_string(item["updated_at"]),
        )

    def add_booking(self, booking: Booking):
        record = self._record(booking)
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {**self._key(booking.booking_id), **record},
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                **self._user_key(booking.user_id, booking.booking_id),
                                **record,
                            },
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                **self._number_key(booking.booking_number),
                                "booking_id": booking.booking_id,
                            },
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                ]
            )
        except ClientError as err:
            if 2 in conditional_check_failures(err):
                raise BookingNumberCollision(booking.booking_number)
            logger.error(f"Error creating booking {booking.booking_id}: {err}")
            raise

    def save_booking(self, booking: Booking):
        record = self._record(booking)
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {**self._key(booking.booking_id), **record},
                            "ConditionExpression": "attribute_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                **self._user_key(booking.user_id, booking.booking_id),
                                **record,
                            },
                        }
                    },
                ]
            )
        except ClientError as err:
            if 0 in conditional_check_failures(err):
                raise NotFoundException("booking", booking.booking_id, 404)
            logger.error(f"Error updating booking {booking.booking_id}: {err}")
            raise

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(Key=self._key(booking_id))
        except ClientError as err:
            logger.error(f"Error retrieving booking {booking_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    @staticmethod
    def _filters(
        status: Optional[BookingStatus],
        start: Optional[datetime],
        end: Optional[datetime],
    ):
        conditions = []
        if status is not None:
            conditions.append(Attr("booking_status").eq(BookingStatus(status).value))
        if start is not None:
            conditions.append(Attr("created_at").gte(to_iso_string(start)))
        if end is not None:
            conditions.append(Attr("created_at").lte(to_iso_string(end)))
        return conditions

    def get_user_bookings(
        self,
        user_id: str,
        status: Optional[BookingStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Booking]:
        kwargs = {
            "KeyConditionExpression": Key("pk").eq(f"USER#{user_id}")
            & Key("sk").begins_with("BOOKING#")
        }
        conditions = self._filters(status, start, end)
        if conditions:
            expression = conditions[0]
            for condition in conditions[1:]:
                expression = expression & condition
            kwargs["FilterExpression"] = expression
        try:
            items = list(query_all(self.table, **kwargs))
        except ClientError as err:
            logger.error(f"Error retrieving user {user_id} bookings: {err}")
            raise
        return [self._to_domain(item) for item in items]

    def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Booking]:
        expression = Attr("pk").begins_with("BOOKING#") & Attr("sk").eq("DETAILS")
        for condition in self._filters(status, start, end):
            expression = expression & condition
        try:
            items = list(scan_all(self.table, FilterExpression=expression))
        except ClientError as err:
            logger.error(f"Error listing bookings: {err}")
            raise
        return [self._to_domain(item) for item in items]

    def delete_booking(self, booking: Booking):
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Delete": {
                            "TableName": self.table.name,
                            "Key": self._key(booking.booking_id),
                            "ConditionExpression": "attribute_exists(pk)",
                        }
                    },
                    {
                        "Delete": {
                            "TableName": self.table.name,
                            "Key": self._user_key(booking.user_id, booking.booking_id),
                        }
                    },
                    {
                        "Delete": {
                            "TableName": self.table.name,
                            "Key": self._number_key(booking.booking_number),
                        }
                    },
                ]
            )
        except ClientError as err:
            if 0 in conditional_check_failures(err):
                raise NotFoundException("booking", booking.booking_id, 404)
            logger.error(f"Error deleting booking {booking.booking_id}: {err}")
            raise
