from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


class PackageType(str, Enum):
    LUXURY = "luxury"
    BUDGET = "budget"
    CUSTOM = "custom"


class ItemType(str, Enum):
    ACCOMMODATION = "accommodation"
    FOOD = "food"
    ACTIVITY = "activity"
    SPA = "spa"


@dataclass
class PackageItem:
    item_type: ItemType
    name: str
    price: float
    quantity: int = 1
    description: Optional[str] = None


@dataclass
class Package:
    package_id: str
    name: str
    slug: str
    type: PackageType
    description: str
    features: List[str] = field(default_factory=list)
    items: List[PackageItem] = field(default_factory=list)

    base_price: float = 0.0
    discount_percent: float = 0.0
    final_price: float = 0.0

    images: List[str] = field(default_factory=list)
    image: str = ""

    is_active: bool = True
    popularity_score: int = 0
    booking_count: int = 0

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
