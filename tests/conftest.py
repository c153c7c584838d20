from __future__ import annotations

import io
import os
from datetime import date

# must be set before services.config is imported anywhere
os.environ["DB_URL"] = "sqlite://:memory:"

import pdfplumber
import pytest
from tortoise import Tortoise

from schemas import Client, Dish, EntityRef, Invoice, InvoiceItem
from services.crud import CRUDService
from services.invoice_resolver import InvoiceResolver
from services.invoice_service import InvoiceService
from services.report_renderer import ReportRenderer
from services.repository import client_repo, dish_repo, invoice_repo


def pdf_text(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def make_client(client_id: str | None = "c1", first: str = "Ana", last: str = "Diaz") -> Client:
    return Client(id=client_id, first_name=first, last_name=last, birth_date=date(1990, 5, 17))


def make_dish(dish_id: str | None = "m1", name: str = "Soup", price: float = 5.0) -> Dish:
    return Dish(id=dish_id, name=name, price=price, status=True)


def make_invoice(invoice_id: str | None = "i1", client_id: str = "c1", items=(("m1", 2),)) -> Invoice:
    return Invoice(
        id=invoice_id,
        description="Table 4",
        client=EntityRef(id=client_id),
        items=[InvoiceItem(dish=EntityRef(id=d), quantity=q) for d, q in items],
    )


@pytest.fixture
async def db():
    await Tortoise.init(db_url="sqlite://:memory:", modules={"models": ["models"]})
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def clients(db):
    return client_repo()


@pytest.fixture
def dishes(db):
    return dish_repo()


@pytest.fixture
def invoices(db):
    return invoice_repo()


@pytest.fixture
def client_service(clients):
    return CRUDService(clients)


@pytest.fixture
def dish_service(dishes):
    return CRUDService(dishes)


@pytest.fixture
def renderer():
    return ReportRenderer()


@pytest.fixture
def invoice_service(invoices, clients, dishes, renderer):
    return InvoiceService(invoices, InvoiceResolver(clients, dishes), renderer)


@pytest.fixture
async def seeded(client_service, dish_service, invoice_service):
    """Ana Diaz ordering two soups on invoice i1."""
    await client_service.save(make_client())
    await dish_service.save(make_dish())
    await invoice_service.save(make_invoice())
