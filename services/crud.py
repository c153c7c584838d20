# services/crud.py
from __future__ import annotations
from typing import AsyncIterator, Generic, Optional, Protocol, TypeVar

from pydantic import BaseModel

from schemas import PageSupport
from services.repository import GenericRepo

T = TypeVar("T", bound=BaseModel)


class CRUD(Protocol[T]):
    def find_all(self) -> AsyncIterator[T]: ...
    async def find_by_id(self, entity_id: str) -> Optional[T]: ...
    async def save(self, entity: T) -> T: ...
    async def update(self, entity_id: str, entity: T) -> Optional[T]: ...
    async def delete(self, entity_id: str) -> bool: ...
    async def get_page(self, page_number: int, page_size: int) -> PageSupport[T]: ...


class CRUDService(Generic[T]):
    """
    The CRUD contract bound to one repository. Clients and dishes use it as is;
    invoices extend it with report generation.
    """

    def __init__(self, repo: GenericRepo[T]):
        self.repo = repo

    def find_all(self) -> AsyncIterator[T]:
        return self.repo.fetch_all()

    async def find_by_id(self, entity_id: str) -> Optional[T]:
        return await self.repo.fetch_by_id(entity_id)

    async def save(self, entity: T) -> T:
        return await self.repo.create(entity)

    async def update(self, entity_id: str, entity: T) -> Optional[T]:
        # full replace; the path id always wins over whatever the payload carries
        entity = entity.model_copy(update={"id": entity_id})
        return await self.repo.replace(entity_id, entity)

    async def delete(self, entity_id: str) -> bool:
        return await self.repo.delete_by_id(entity_id) > 0

    async def get_page(self, page_number: int, page_size: int) -> PageSupport[T]:
        if page_number < 0 or page_size < 1:
            raise ValueError(f"invalid page window: page={page_number}, size={page_size}")
        return await self.repo.fetch_page(page_number, page_size)
