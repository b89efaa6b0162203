from typing import List, Optional
from pydantic import Field, field_validator
from resort.models.packages import PackageItem, PackageType
from resort.schemas.common import CamelModel, ItemRequest, decode_json_list
from resort.utils.constants import MAX_PACKAGE_IMAGES


class PackageItemRequest(ItemRequest):
    def to_domain(self) -> PackageItem:
        return PackageItem(
            item_type=self.item_type,
            name=self.name,
            description=self.description,
            quantity=self.quantity,
            price=self.price,
        )


class PackageRequest(CamelModel):
    name: str = Field(min_length=1)
    type: PackageType
    description: str = Field(min_length=1)
    features: List[str] = Field(default_factory=list)
    items: List[PackageItemRequest] = Field(min_length=1)
    discount_percent: float = Field(default=0, ge=0, le=100)
    images: List[str] = Field(default_factory=list, max_length=MAX_PACKAGE_IMAGES)

    @field_validator("features", "items", "images", mode="before")
    @classmethod
    def decode_lists(cls, v):
        return decode_json_list(v)


class PackageUpdateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[PackageType] = None
    description: Optional[str] = Field(default=None, min_length=1)
    features: Optional[List[str]] = None
    items: Optional[List[PackageItemRequest]] = Field(default=None, min_length=1)
    discount_percent: Optional[float] = Field(default=None, ge=0, le=100)
    is_active: Optional[bool] = None
    images: List[str] = Field(default_factory=list)
    remove_images: List[str] = Field(default_factory=list)

    @field_validator("features", "items", "images", "remove_images", mode="before")
    @classmethod
    def decode_lists(cls, v):
        return decode_json_list(v)


class RemoveImageRequest(CamelModel):
    image_url: str = Field(min_length=1)
