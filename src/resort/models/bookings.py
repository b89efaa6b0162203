from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from resort.models.packages import ItemType, PackageType
from resort.utils.constants import DEFAULT_COOKING_DURATION


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass
class CustomerInfo:
    name: str
    email: str
    phone: str


@dataclass
class BookingItem:
    item_type: ItemType
    name: str
    price: float
    quantity: int = 1
    description: Optional[str] = None
    subtotal: Optional[float] = None


@dataclass
class Booking:
    booking_id: str
    user_id: str
    customer_info: CustomerInfo
    checkin: datetime
    checkout: datetime
    number_of_guests: int
    items: List[BookingItem] = field(default_factory=list)

    booking_number: Optional[str] = None
    package_type: PackageType = PackageType.CUSTOM
    package_name: Optional[str] = None

    number_of_nights: int = 1
    total_amount: float = 0.0
    discount_amount: float = 0.0
    final_amount: float = 0.0

    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING

    special_requests: Optional[str] = None
    cooking_start_time: Optional[datetime] = None
    cooking_end_time: Optional[datetime] = None
    cooking_duration: int = DEFAULT_COOKING_DURATION
    notes: Optional[str] = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
