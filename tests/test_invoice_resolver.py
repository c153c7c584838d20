from __future__ import annotations

import asyncio

import pytest

from schemas import Client, Dish, EntityRef
from services.errors import ReferenceResolutionError
from services.invoice_resolver import InvoiceResolver

from tests.conftest import make_client, make_dish, make_invoice


class Gate:
    """Holds every fetch until `expected` of them are in flight at the same time."""

    def __init__(self, expected: int):
        self.expected = expected
        self.calls = 0
        self.in_flight = 0
        self.peak = 0
        self.all_in = asyncio.Event()

    async def enter(self):
        self.calls += 1
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        if self.in_flight >= self.expected:
            self.all_in.set()
        try:
            await asyncio.wait_for(self.all_in.wait(), timeout=2)
        finally:
            self.in_flight -= 1


class GatedRepo:
    def __init__(self, inner, gate: Gate):
        self.inner = inner
        self.gate = gate

    async def fetch_by_id(self, entity_id):
        await self.gate.enter()
        return await self.inner.fetch_by_id(entity_id)


class BrokenRepo:
    async def fetch_by_id(self, entity_id):
        raise ConnectionError("store unavailable")


@pytest.fixture
async def menu(clients, dishes):
    await clients.create(make_client())
    for i, (name, price) in enumerate([("Soup", 5.0), ("Steak", 18.5), ("Flan", 4.25)], start=1):
        await dishes.create(make_dish(dish_id=f"m{i}", name=name, price=price))


async def test_resolves_client_and_every_item(clients, dishes, menu):
    invoice = make_invoice(items=(("m1", 2), ("m2", 1), ("m3", 3)))

    resolved = await InvoiceResolver(clients, dishes).resolve(invoice)

    assert resolved is invoice
    assert isinstance(resolved.client, Client)
    assert resolved.client.first_name == "Ana"
    assert [type(it.dish) for it in resolved.items] == [Dish, Dish, Dish]
    assert [it.dish.name for it in resolved.items] == ["Soup", "Steak", "Flan"]
    assert [it.quantity for it in resolved.items] == [2, 1, 3]


async def test_same_dish_twice_resolves_both_lines(clients, dishes, menu):
    invoice = make_invoice(items=(("m1", 1), ("m1", 4)))
    resolved = await InvoiceResolver(clients, dishes).resolve(invoice)
    assert [it.dish.name for it in resolved.items] == ["Soup", "Soup"]


async def test_issues_all_fetches_concurrently(clients, dishes, menu):
    invoice = make_invoice(items=(("m1", 2), ("m2", 1), ("m3", 3)))
    gate = Gate(expected=4)
    resolver = InvoiceResolver(GatedRepo(clients, gate), GatedRepo(dishes, gate))

    await resolver.resolve(invoice)

    assert gate.calls == 4
    assert gate.peak == 4


async def test_missing_dish_fails_whole_resolution(clients, dishes, menu):
    invoice = make_invoice(items=(("m1", 2), ("gone", 1)))

    with pytest.raises(ReferenceResolutionError) as exc:
        await InvoiceResolver(clients, dishes).resolve(invoice)

    assert exc.value.missing == [("dishes", "gone")]
    assert exc.value.kind == "reference_resolution"
    # nothing substituted on failure
    assert isinstance(invoice.client, EntityRef)
    assert all(isinstance(it.dish, EntityRef) for it in invoice.items)


async def test_every_miss_is_reported(clients, dishes, menu):
    invoice = make_invoice(client_id="nobody", items=(("x1", 1), ("m2", 1), ("x2", 1)))

    with pytest.raises(ReferenceResolutionError) as exc:
        await InvoiceResolver(clients, dishes).resolve(invoice)

    assert exc.value.missing == [("clients", "nobody"), ("dishes", "x1"), ("dishes", "x2")]


async def test_fetch_errors_are_collected(clients, menu):
    invoice = make_invoice(items=(("m1", 1), ("m2", 1)))

    with pytest.raises(ReferenceResolutionError) as exc:
        await InvoiceResolver(clients, BrokenRepo()).resolve(invoice)

    assert len(exc.value.failures) == 2
    assert all(isinstance(f, ConnectionError) for f in exc.value.failures)
    assert isinstance(exc.value.__cause__, ConnectionError)


async def test_invoice_without_items_only_needs_client(clients, dishes, menu):
    invoice = make_invoice(items=())
    resolved = await InvoiceResolver(clients, dishes).resolve(invoice)
    assert resolved.client.last_name == "Diaz"
    assert resolved.items == []
