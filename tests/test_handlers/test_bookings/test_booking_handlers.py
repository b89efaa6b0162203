import json
import unittest
from unittest.mock import ANY, patch

from resort.models.bookings import BookingStatus
from resort.models.users import UserRole
from resort.services.booking_service import BookingListing, summarize
from resort.utils.custom_exceptions import (
    ConflictException,
    Forbidden,
    InvalidStatusTransition,
    NotFoundException,
)
from factories import make_booking
from handler_env import ADMIN, USER, event, load_handler

CREATE_BODY = json.dumps(
    {
        "customerInfo": {"name": "Asha", "email": "asha@example.com", "phone": "9999999999"},
        "checkInDate": "2026-04-01T14:00:00+00:00",
        "checkOutDate": "2026-04-03T11:00:00+00:00",
        "numberOfGuests": 2,
        "items": [{"itemType": "food", "name": "Thali", "price": 20}],
    }
)


class CreateBookingTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.mod, cls.patches = load_handler("resort_handlers.bookings.create_booking")

    @classmethod
    def tearDownClass(cls):
        for p in cls.patches:
            p.stop()

    def setUp(self):
        self.p_add = patch.object(self.mod.booking_service, "add_booking")
        self.mock_add = self.p_add.start()

    def tearDown(self):
        self.p_add.stop()

    def test_missing_body_returns_400(self):
        resp = self.mod.create_booking(event(USER), None)
        self.assertEqual(400, resp["statusCode"])

    def test_validation_error_returns_400(self):
        resp = self.mod.create_booking(event(USER, body="{}"), None)
        self.assertEqual(400, resp["statusCode"])

    def test_missing_user_in_authorizer_returns_401(self):
        resp = self.mod.create_booking(event(body=CREATE_BODY), None)
        self.assertEqual(401, resp["statusCode"])
        self.mock_add.assert_not_called()

    def test_missing_caller_checked_before_body(self):
        resp = self.mod.create_booking(event(body="{}"), None)
        self.assertEqual(401, resp["statusCode"])

    def test_number_exhaustion_returns_409(self):
        self.mock_add.side_effect = ConflictException("no number")
        resp = self.mod.create_booking(event(USER, body=CREATE_BODY), None)
        self.assertEqual(409, resp["statusCode"])

    def test_generic_error_returns_500(self):
        self.mock_add.side_effect = RuntimeError("boom")
        resp = self.mod.create_booking(event(USER, body=CREATE_BODY), None)
        self.assertEqual(500, resp["statusCode"])

    def test_success_returns_201(self):
        self.mock_add.return_value = make_booking()
        resp = self.mod.create_booking(event(USER, body=CREATE_BODY), None)
        self.assertEqual(201, resp["statusCode"])
        self.mock_add.assert_called_once_with(ANY, "u1")
        self.assertEqual("BK12345678001", json.loads(resp["body"])["data"]["bookingNumber"])


class GetBookingsTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.mod, cls.patches = load_handler("resort_handlers.bookings.get_bookings")

    @classmethod
    def tearDownClass(cls):
        for p in cls.patches:
            p.stop()

    def test_list_passes_caller_and_filters(self):
        listing = BookingListing(bookings=[make_booking()], summary=summarize([make_booking()]))
        with patch.object(self.mod.booking_service, "list_bookings", return_value=listing) as m:
            resp = self.mod.list_bookings(
                event(USER, query={"status": "Pending", "startDate": "2026-01-01"}), None
            )
        self.assertEqual(200, resp["statusCode"])
        args, kwargs = m.call_args
        self.assertEqual(("u1", UserRole.USER), args)
        self.assertEqual(BookingStatus.PENDING, kwargs["status"])
        self.assertIsNone(kwargs["end"])
        self.assertEqual(1, json.loads(resp["body"])["data"]["stats"]["pending"])

    def test_list_invalid_status_returns_400(self):
        resp = self.mod.list_bookings(event(ADMIN, query={"status": "lost"}), None)
        self.assertEqual(400, resp["statusCode"])

    def test_list_invalid_date_returns_400(self):
        resp = self.mod.list_bookings(event(ADMIN, query={"endDate": "tomorrow"}), None)
        self.assertEqual(400, resp["statusCode"])

    def test_list_requires_caller(self):
        resp = self.mod.list_bookings(event(), None)
        self.assertEqual(401, resp["statusCode"])

    def test_user_bookings_for_other_user_forbidden(self):
        resp = self.mod.get_user_bookings(event(USER, path={"user_id": "u2"}), None)
        self.assertEqual(403, resp["statusCode"])

    def test_admin_can_read_other_user_bookings(self):
        with patch.object(self.mod.booking_service, "get_user_bookings", return_value=[]) as m:
            resp = self.mod.get_user_bookings(event(ADMIN, path={"user_id": "u2"}), None)
        self.assertEqual(200, resp["statusCode"])
        m.assert_called_once_with("u2")

    def test_user_bookings_default_to_caller(self):
        with patch.object(self.mod.booking_service, "get_user_bookings", return_value=[]) as m:
            self.mod.get_user_bookings(event(USER), None)
        m.assert_called_once_with("u1")

    def test_get_booking_forbidden(self):
        with patch.object(self.mod.booking_service, "get_booking", side_effect=Forbidden("no")):
            resp = self.mod.get_booking(event(USER, path={"id": "b1"}), None)
        self.assertEqual(403, resp["statusCode"])

    def test_get_booking_not_found(self):
        with patch.object(
            self.mod.booking_service,
            "get_booking",
            side_effect=NotFoundException("booking", "b1", 404),
        ):
            resp = self.mod.get_booking(event(USER, path={"id": "b1"}), None)
        self.assertEqual(404, resp["statusCode"])


class UpdateBookingTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.mod, cls.patches = load_handler("resort_handlers.bookings.update_booking")

    @classmethod
    def tearDownClass(cls):
        for p in cls.patches:
            p.stop()

    def test_status_requires_admin(self):
        resp = self.mod.update_booking_status(
            event(USER, body='{"status": "confirmed"}', path={"id": "b1"}), None
        )
        self.assertEqual(403, resp["statusCode"])

    def test_guarded_status_update(self):
        confirmed = make_booking(status=BookingStatus.CONFIRMED)
        with patch.object(
            self.mod.booking_service, "update_booking_status", return_value=confirmed
        ) as m:
            resp = self.mod.update_booking_status(
                event(ADMIN, body='{"status": "confirmed", "notes": "ok"}', path={"id": "b1"}),
                None,
            )
        self.assertEqual(200, resp["statusCode"])
        m.assert_called_once_with("b1", BookingStatus.CONFIRMED, "ok")

    def test_forced_status_uses_override(self):
        with patch.object(
            self.mod.booking_service, "override_booking_status", return_value=make_booking()
        ) as m:
            resp = self.mod.update_booking_status(
                event(ADMIN, body='{"status": "completed", "force": true}', path={"id": "b1"}),
                None,
            )
        self.assertEqual(200, resp["statusCode"])
        m.assert_called_once_with("b1", BookingStatus.COMPLETED, None)

    def test_illegal_transition_returns_409(self):
        with patch.object(
            self.mod.booking_service,
            "update_booking_status",
            side_effect=InvalidStatusTransition("pending", "ready"),
        ):
            resp = self.mod.update_booking_status(
                event(ADMIN, body='{"status": "ready"}', path={"id": "b1"}), None
            )
        self.assertEqual(409, resp["statusCode"])

    def test_invalid_status_value_returns_400(self):
        resp = self.mod.update_booking_status(
            event(ADMIN, body='{"status": "lost"}', path={"id": "b1"}), None
        )
        self.assertEqual(400, resp["statusCode"])

    def test_start_cooking(self):
        with patch.object(
            self.mod.booking_service, "start_cooking", return_value=make_booking()
        ) as m:
            resp = self.mod.start_cooking(event(ADMIN, path={"id": "b1"}), None)
        self.assertEqual(200, resp["statusCode"])
        m.assert_called_once_with("b1")

    def test_complete_cooking_not_found(self):
        with patch.object(
            self.mod.booking_service,
            "complete_cooking",
            side_effect=NotFoundException("booking", "b1", 404),
        ):
            resp = self.mod.complete_cooking(event(ADMIN, path={"id": "b1"}), None)
        self.assertEqual(404, resp["statusCode"])


class DeleteBookingTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.mod, cls.patches = load_handler("resort_handlers.bookings.delete_booking")

    @classmethod
    def tearDownClass(cls):
        for p in cls.patches:
            p.stop()

    def test_delete_success(self):
        with patch.object(self.mod.booking_service, "delete_booking") as m:
            resp = self.mod.delete_booking(event(ADMIN, path={"id": "b1"}), None)
        self.assertEqual(200, resp["statusCode"])
        m.assert_called_once_with("b1")

    def test_delete_requires_admin(self):
        resp = self.mod.delete_booking(event(USER, path={"id": "b1"}), None)
        self.assertEqual(403, resp["statusCode"])

    def test_delete_missing_id(self):
        resp = self.mod.delete_booking(event(ADMIN), None)
        self.assertEqual(400, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()
