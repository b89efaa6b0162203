import unittest
from unittest.mock import MagicMock
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from botocore.exceptions import ClientError

from resort.models.bookings import BookingStatus
from resort.repository.booking_repo import BookingRepository
from resort.services.pricing import derive_booking
from resort.utils.custom_exceptions import BookingNumberCollision, NotFoundException
from factories import T0, make_booking


class TestBookingRepository(unittest.TestCase):

    def setUp(self):
        self.table = MagicMock()
        self.table.name = "test-table"
        self.client = MagicMock()

        self.table.meta.client = self.client
        self.repo = BookingRepository(self.table)

        self.booking = derive_booking(
            make_booking(
                status=BookingStatus.PREPARING,
                cooking_start_time=T0,
                cooking_end_time=T0 + timedelta(minutes=30),
            )
        )

    def test_client_defaults_to_table_meta(self):
        self.assertIs(self.repo.client, self.client)

    def test_add_booking_success(self):
        self.repo.add_booking(self.booking)

        self.client.transact_write_items.assert_called_once()
        _, kwargs = self.client.transact_write_items.call_args
        items = kwargs["TransactItems"]
        self.assertEqual(len(items), 3)

        booking_put = items[0]["Put"]["Item"]
        user_put = items[1]["Put"]["Item"]
        number_put = items[2]["Put"]["Item"]

        self.assertEqual(booking_put["pk"], "BOOKING#b1")
        self.assertEqual(booking_put["sk"], "DETAILS")
        self.assertEqual(booking_put["booking_status"], "preparing")
        self.assertEqual(booking_put["total_amount"], Decimal("250.0"))
        self.assertEqual(booking_put["items"][0]["subtotal"], Decimal("200.0"))
        self.assertEqual(booking_put["cooking_start_time"], T0.isoformat())

        self.assertEqual(user_put["pk"], "USER#u1")
        self.assertEqual(user_put["sk"], "BOOKING#b1")

        self.assertEqual(number_put["pk"], "BOOKINGNUMBER#BK12345678001")
        self.assertEqual(number_put["booking_id"], "b1")
        self.assertEqual(items[2]["Put"]["ConditionExpression"], "attribute_not_exists(pk)")

    def test_add_booking_number_collision(self):
        self.client.transact_write_items.side_effect = ClientError(
            error_response={
                "Error": {"Code": "TransactionCanceledException", "Message": "cancelled"},
                "CancellationReasons": [
                    {"Code": "None"},
                    {"Code": "None"},
                    {"Code": "ConditionalCheckFailed"},
                ],
            },
            operation_name="TransactWriteItems",
        )

        with self.assertRaises(BookingNumberCollision) as ctx:
            self.repo.add_booking(self.booking)
        self.assertEqual(ctx.exception.booking_number, "BK12345678001")

    def test_add_booking_client_error(self):
        self.client.transact_write_items.side_effect = ClientError(
            error_response={"Error": {"Message": "Write failed"}},
            operation_name="TransactWriteItems",
        )

        with self.assertRaises(ClientError):
            self.repo.add_booking(self.booking)

    def test_save_booking_missing(self):
        self.client.transact_write_items.side_effect = ClientError(
            error_response={
                "Error": {"Code": "TransactionCanceledException", "Message": "cancelled"},
                "CancellationReasons": [{"Code": "ConditionalCheckFailed"}, {"Code": "None"}],
            },
            operation_name="TransactWriteItems",
        )

        with self.assertRaises(NotFoundException):
            self.repo.save_booking(self.booking)

    def test_save_booking_updates_both_copies(self):
        self.repo.save_booking(self.booking)

        _, kwargs = self.client.transact_write_items.call_args
        items = kwargs["TransactItems"]
        self.assertEqual(items[0]["Put"]["ConditionExpression"], "attribute_exists(pk)")
        self.assertEqual(items[1]["Put"]["Item"]["pk"], "USER#u1")

    def test_get_booking_by_id_round_trip(self):
        item = {**self.repo._key("b1"), **self.repo._record(self.booking)}
        self.table.get_item.return_value = {"Item": item}

        booking = self.repo.get_booking_by_id("b1")

        self.assertEqual(booking, self.booking)

    def test_get_booking_by_id_not_found(self):
        self.table.get_item.return_value = {}

        self.assertIsNone(self.repo.get_booking_by_id("missing"))

    def test_get_booking_by_id_client_error(self):
        self.table.get_item.side_effect = ClientError(
            error_response={"Error": {"Message": "Get failed"}},
            operation_name="GetItem",
        )

        with self.assertRaises(ClientError):
            self.repo.get_booking_by_id("b1")

    def test_get_user_bookings_without_filters(self):
        self.table.query.return_value = {
            "Items": [{**self.repo._user_key("u1", "b1"), **self.repo._record(self.booking)}]
        }

        bookings = self.repo.get_user_bookings("u1")

        _, kwargs = self.table.query.call_args
        self.assertNotIn("FilterExpression", kwargs)
        self.assertEqual(len(bookings), 1)
        self.assertEqual(bookings[0].booking_id, "b1")

    def test_get_user_bookings_with_filters(self):
        self.table.query.return_value = {"Items": []}

        self.repo.get_user_bookings(
            "u1",
            status=BookingStatus.PENDING,
            start=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )

        _, kwargs = self.table.query.call_args
        self.assertIn("FilterExpression", kwargs)

    def test_list_bookings_scans_all_pages(self):
        record = {**self.repo._key("b1"), **self.repo._record(self.booking)}
        self.table.scan.side_effect = [
            {"Items": [record], "LastEvaluatedKey": {"pk": "BOOKING#b1"}},
            {"Items": []},
        ]

        bookings = self.repo.list_bookings(status=BookingStatus.PREPARING)

        self.assertEqual(len(bookings), 1)
        self.assertEqual(self.table.scan.call_count, 2)

    def test_delete_booking_removes_all_items(self):
        self.repo.delete_booking(self.booking)

        _, kwargs = self.client.transact_write_items.call_args
        keys = [item["Delete"]["Key"]["pk"] for item in kwargs["TransactItems"]]
        self.assertEqual(keys, ["BOOKING#b1", "USER#u1", "BOOKINGNUMBER#BK12345678001"])


if __name__ == "__main__":
    unittest.main()
