"""
models.py
---------
Pydantic models for the data the client moves around: where the catalog
service lives, what an order looks like on the wire, and what the user
asked for on the command line.
"""

from enum import Enum
from typing import List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

# -------------------------------------------------------------- wire --


class Connection(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: str = Field(alias="url")
    port: int = Field(ge=0, le=65535)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class Item(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    catalog_id: int = Field(alias="catalogId")
    amount: int


class Order(BaseModel):
    name: str
    address: str
    items: List[Item]

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode()


# ------------------------------------------------------------ action --


class Operation(str, Enum):
    items = "items"
    availability = "availability"
    order = "order"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Operation.items: "QUERY_ITEMS",
    Operation.availability: "QUERY_ITEM_AVAILABILITY",
    Operation.order: "ORDER_ITEM",
}


class Action(NamedTuple):
    operation: Operation
    item_id: Optional[int] = None      # None = use default / all
    error_mode: bool = False
