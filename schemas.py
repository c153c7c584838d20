import math
from datetime import date
from typing import Optional, List, Union, Generic, TypeVar
from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


# =========================
# Entities (what services and repositories exchange)
# =========================
class EntityRef(BaseModel):
    """Reference-only entity: just the foreign id, the record lives elsewhere."""
    id: str
    model_config = ConfigDict(from_attributes=True)


class Client(BaseModel):
    id: Optional[str] = None
    first_name: str
    last_name: str
    birth_date: date
    url_photo: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Dish(BaseModel):
    id: Optional[str] = None
    name: str
    price: float
    status: bool = True
    model_config = ConfigDict(from_attributes=True)


class InvoiceItem(BaseModel):
    dish: Union[Dish, EntityRef]
    quantity: int = 1
    model_config = ConfigDict(from_attributes=True)


class Invoice(BaseModel):
    id: Optional[str] = None
    description: Optional[str] = None
    client: Union[Client, EntityRef]
    items: List[InvoiceItem] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)


# =========================
# Pagination
# =========================
class PageSupport(BaseModel, Generic[T]):
    content: List[T]
    page_number: int
    page_size: int
    total_elements: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_elements / self.page_size)

    @computed_field
    @property
    def is_first(self) -> bool:
        return self.page_number == 0

    @computed_field
    @property
    def is_last(self) -> bool:
        return (self.page_number + 1) * self.page_size >= self.total_elements


# =========================
# API payloads
# =========================
class ClientDTO(BaseModel):
    id: Optional[str] = None
    name: str = Field(min_length=3)
    surname: str = Field(min_length=3)
    birth_date_client: date
    picture: Optional[str] = None


class DishDTO(BaseModel):
    id: Optional[str] = None
    name_dish: str = Field(min_length=2, max_length=20)
    price_dish: float = Field(ge=1, le=999)
    status_dish: bool


class RefDTO(BaseModel):
    id: str = Field(min_length=1)


class InvoiceItemDTO(BaseModel):
    dish: RefDTO
    quantity: int = Field(default=1, ge=1)


class InvoiceDTO(BaseModel):
    id: Optional[str] = None
    description: Optional[str] = None
    client: RefDTO
    items: List[InvoiceItemDTO] = Field(min_length=1)


class Link(BaseModel):
    rel: str
    href: str


class EntityModel(BaseModel, Generic[T]):
    content: T
    links: List[Link]
