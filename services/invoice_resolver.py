# services/invoice_resolver.py
from __future__ import annotations
import asyncio
from typing import List, Tuple

from schemas import Client, Dish, Invoice
from services.errors import ReferenceResolutionError
from services.repository import GenericRepo


class InvoiceResolver:
    """
    Replaces the id-only client and dish references of an invoice with the
    full records. The client lookup and every line-item lookup are issued
    together and joined before anything is substituted: either every
    reference resolves or the invoice is left untouched and
    ReferenceResolutionError lists all the misses.
    """

    def __init__(self, clients: GenericRepo[Client], dishes: GenericRepo[Dish]):
        self.clients = clients
        self.dishes = dishes

    async def resolve(self, invoice: Invoice) -> Invoice:
        wanted: List[Tuple[str, str]] = [("clients", invoice.client.id)]
        wanted += [("dishes", item.dish.id) for item in invoice.items]

        fetches = [self.clients.fetch_by_id(invoice.client.id)]
        fetches += [self.dishes.fetch_by_id(item.dish.id) for item in invoice.items]
        results = await asyncio.gather(*fetches, return_exceptions=True)

        missing: List[Tuple[str, str]] = []
        failures: List[BaseException] = []
        for ref, res in zip(wanted, results):
            if isinstance(res, BaseException):
                failures.append(res)
            elif res is None:
                missing.append(ref)

        if missing or failures:
            err = ReferenceResolutionError(invoice.id, missing, failures)
            if failures:
                raise err from failures[0]
            raise err

        invoice.client = results[0]
        for item, dish in zip(invoice.items, results[1:]):
            item.dish = dish
        return invoice
