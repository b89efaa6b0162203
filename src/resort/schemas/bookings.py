from datetime import datetime, timezone
from typing import List, Optional
from pydantic import EmailStr, Field, model_validator
from resort.models.bookings import BookingItem, BookingStatus, CustomerInfo
from resort.models.packages import PackageType
from resort.schemas.common import CamelModel, ItemRequest
from resort.utils.constants import DEFAULT_COOKING_DURATION


class BookingItemRequest(ItemRequest):
    def to_domain(self) -> BookingItem:
        return BookingItem(
            item_type=self.item_type,
            name=self.name,
            description=self.description,
            quantity=self.quantity,
            price=self.price,
        )


class CustomerInfoRequest(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)

    def to_domain(self) -> CustomerInfo:
        return CustomerInfo(name=self.name, email=str(self.email), phone=self.phone)


class BookingRequest(CamelModel):
    customer_info: CustomerInfoRequest
    checkin: datetime = Field(alias="checkInDate")
    checkout: datetime = Field(alias="checkOutDate")
    number_of_guests: int = Field(ge=1)
    items: List[BookingItemRequest] = Field(min_length=1)
    package_type: PackageType = PackageType.CUSTOM
    package_name: Optional[str] = None
    special_requests: Optional[str] = None
    cooking_duration: int = Field(default=DEFAULT_COOKING_DURATION, ge=1)

    @model_validator(mode="after")
    def validate_and_normalize(self):
        if self.checkin.tzinfo is None or self.checkout.tzinfo is None:
            raise ValueError("checkInDate and checkOutDate must include timezone info")

        checkin_utc = self.checkin.astimezone(timezone.utc)
        checkout_utc = self.checkout.astimezone(timezone.utc)

        if checkout_utc <= checkin_utc:
            raise ValueError("Check-out date must be after check-in date")

        self.checkin = checkin_utc
        self.checkout = checkout_utc
        return self


class BookingStatusRequest(CamelModel):
    status: BookingStatus
    notes: Optional[str] = None
    force: bool = False
