# services/repository.py — store access per entity type (Tortoise rows <-> pydantic entities)
from __future__ import annotations
import asyncio
from typing import Any, AsyncIterator, Callable, Dict, Generic, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel
from tortoise.models import Model

import models
import services.config as config
from schemas import Client, Dish, Invoice, PageSupport

E = TypeVar("E", bound=BaseModel)

RowMapper = Callable[[Any], Dict[str, Any]]


class GenericRepo(Protocol[E]):
    async def create(self, entity: E) -> E: ...
    async def fetch_by_id(self, entity_id: str) -> Optional[E]: ...
    def fetch_all(self) -> AsyncIterator[E]: ...
    async def replace(self, entity_id: str, entity: E) -> Optional[E]: ...
    async def delete_by_id(self, entity_id: str) -> int: ...
    async def fetch_page(self, number: int, size: int) -> PageSupport[E]: ...
    async def count(self) -> int: ...


def plain_row(entity: BaseModel) -> Dict[str, Any]:
    return entity.model_dump(exclude={"id"})


def invoice_row(invoice: Invoice) -> Dict[str, Any]:
    # only the ids of client/dishes are stored, whatever shape the entity has in memory
    return {
        "description": invoice.description,
        "client": {"id": invoice.client.id},
        "items": [{"dish": {"id": it.dish.id}, "quantity": it.quantity} for it in invoice.items],
    }


class TortoiseRepo(Generic[E]):
    def __init__(
        self,
        model: Type[Model],
        entity: Type[E],
        to_row: RowMapper = plain_row,
        chunk: int | None = None,
    ):
        self.model = model
        self.entity = entity
        self.to_row = to_row
        self.chunk = max(1, chunk or config.FETCH_ALL_CHUNK)

    def _to_entity(self, row: Model) -> E:
        return self.entity.model_validate(row)

    async def create(self, entity: E) -> E:
        data = self.to_row(entity)
        if getattr(entity, "id", None):
            data["id"] = entity.id
        row = await self.model.create(**data)
        return self._to_entity(row)

    async def fetch_by_id(self, entity_id: str) -> Optional[E]:
        row = await self.model.get_or_none(id=entity_id)
        return self._to_entity(row) if row else None

    async def fetch_all(self) -> AsyncIterator[E]:
        offset = 0
        while True:
            rows = await self.model.all().order_by("id").offset(offset).limit(self.chunk)
            for row in rows:
                yield self._to_entity(row)
            if len(rows) < self.chunk:
                return
            offset += len(rows)

    async def replace(self, entity_id: str, entity: E) -> Optional[E]:
        obj = await self.model.get_or_none(id=entity_id)
        if not obj:
            return None
        for k, v in self.to_row(entity).items():
            setattr(obj, k, v)
        await obj.save()
        return self._to_entity(obj)

    async def delete_by_id(self, entity_id: str) -> int:
        return await self.model.filter(id=entity_id).delete()

    async def fetch_page(self, number: int, size: int) -> PageSupport[E]:
        window = self.model.all().order_by("id").offset(number * size).limit(size)
        rows, total = await asyncio.gather(window, self.count())
        return PageSupport[self.entity](
            content=[self._to_entity(r) for r in rows],
            page_number=number,
            page_size=size,
            total_elements=total,
        )

    async def count(self) -> int:
        return await self.model.all().count()


def client_repo() -> TortoiseRepo[Client]:
    return TortoiseRepo(models.Client, Client)


def dish_repo() -> TortoiseRepo[Dish]:
    return TortoiseRepo(models.Dish, Dish)


def invoice_repo() -> TortoiseRepo[Invoice]:
    return TortoiseRepo(models.Invoice, Invoice, to_row=invoice_row)
