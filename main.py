# main.py (lifespan-based)
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from tortoise import Tortoise

from routers import clients, dishes, invoices
from services import config
from services.crud import CRUDService
from services.invoice_resolver import InvoiceResolver
from services.invoice_service import InvoiceService
from services.report_renderer import ReportRenderer
from services.repository import client_repo, dish_repo, invoice_repo

logger = logging.getLogger("uvicorn")

# ----- helpers -----
def wire_services(app: FastAPI) -> None:
    client_store, dish_store = client_repo(), dish_repo()
    app.state.client_service = CRUDService(client_store)
    app.state.dish_service = CRUDService(dish_store)
    app.state.invoice_service = InvoiceService(
        invoice_repo(),
        InvoiceResolver(client_store, dish_store),
        ReportRenderer(config.REPORT_TEMPLATE),
    )

# ----- lifespan -----
@asynccontextmanager
async def lifespan(app: FastAPI):
    # 1) DB init
    await Tortoise.init(
        db_url=config.DB_URL,
        modules={"models": ["models"]},
    )
    await Tortoise.generate_schemas()
    logger.info(f"[db] connected to {config.DB_URL}")

    # 2) Services
    wire_services(app)
    try:
        yield
    finally:
        await Tortoise.close_connections()

# ----- app & routers -----
app = FastAPI(lifespan=lifespan, title="Bar Invoicing API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Location", "Content-Disposition"],
)

app.include_router(clients.router)
app.include_router(dishes.router)
app.include_router(invoices.router)

for route in app.routes:
    if isinstance(route, APIRoute):
        logger.info("%s -> %s", list(route.methods), route.path)
