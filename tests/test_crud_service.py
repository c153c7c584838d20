from __future__ import annotations

import pytest

import models
from schemas import Dish
from services.crud import CRUDService
from services.repository import TortoiseRepo

from tests.conftest import make_client, make_dish


async def test_save_assigns_id_when_missing(client_service):
    saved = await client_service.save(make_client(client_id=None))
    assert saved.id
    again = await client_service.find_by_id(saved.id)
    assert again == saved


async def test_save_keeps_caller_id(client_service):
    saved = await client_service.save(make_client(client_id="c1"))
    assert saved.id == "c1"


async def test_find_by_id_missing_is_none(client_service):
    assert await client_service.find_by_id("nope") is None


async def test_update_replaces_fields_and_keeps_path_id(client_service):
    saved = await client_service.save(make_client(client_id=None))
    replacement = make_client(client_id="someone-else", first="Ana Maria", last="Lopez")

    updated = await client_service.update(saved.id, replacement)

    assert updated.id == saved.id
    assert updated.first_name == "Ana Maria"
    fetched = await client_service.find_by_id(saved.id)
    assert fetched.first_name == "Ana Maria"
    assert fetched.last_name == "Lopez"
    assert await client_service.find_by_id("someone-else") is None


async def test_update_is_full_replace(client_service):
    saved = await client_service.save(make_client().model_copy(update={"url_photo": "http://x/p.png"}))
    updated = await client_service.update(saved.id, make_client())
    assert updated.url_photo is None


async def test_update_missing_id_returns_none(client_service):
    assert await client_service.update("ghost", make_client()) is None
    assert await client_service.find_by_id("ghost") is None


async def test_delete_signals_once(dish_service):
    await dish_service.save(make_dish())
    assert await dish_service.delete("m1") is True
    assert await dish_service.delete("m1") is False
    assert await dish_service.delete("m1") is False


async def test_delete_unknown_id_is_false(dish_service):
    assert await dish_service.delete("never-existed") is False
    assert await dish_service.delete("never-existed") is False


async def test_page_total_is_independent_of_window(dish_service):
    for i in range(5):
        await dish_service.save(make_dish(dish_id=f"m{i}", name=f"Dish {i}", price=float(i + 1)))

    windows = [(0, 2), (1, 2), (2, 2), (0, 5), (3, 1), (10, 3)]
    pages = [await dish_service.get_page(p, s) for p, s in windows]

    assert {pg.total_elements for pg in pages} == {5}
    assert [len(pg.content) for pg in pages] == [2, 2, 1, 5, 1, 0]
    assert [(pg.page_number, pg.page_size) for pg in pages] == windows


async def test_page_descriptor_flags(dish_service):
    for i in range(5):
        await dish_service.save(make_dish(dish_id=f"m{i}", name=f"Dish {i}"))
    last = await dish_service.get_page(2, 2)
    assert last.total_pages == 3
    assert last.is_last and not last.is_first
    first = await dish_service.get_page(0, 2)
    assert first.is_first and not first.is_last


async def test_page_rejects_bad_window(dish_service):
    with pytest.raises(ValueError):
        await dish_service.get_page(-1, 2)
    with pytest.raises(ValueError):
        await dish_service.get_page(0, 0)


async def test_find_all_streams_across_chunks(db):
    service = CRUDService(TortoiseRepo(models.Dish, Dish, chunk=2))
    for i in range(5):
        await service.save(make_dish(dish_id=f"m{i}", name=f"Dish {i}"))

    seen = [d.id async for d in service.find_all()]

    assert seen == [f"m{i}" for i in range(5)]


async def test_find_all_empty(dish_service):
    assert [d async for d in dish_service.find_all()] == []
