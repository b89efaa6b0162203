import json
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from resort.models.packages import ItemType


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )


class ItemRequest(CamelModel):
    item_type: ItemType
    name: str = Field(min_length=1)
    description: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    price: float = Field(ge=0)


def decode_json_list(value):
    """Multipart form fields arrive JSON-encoded; lists pass through."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as err:
            raise ValueError(f"invalid JSON list: {err.msg}") from err
    return value
