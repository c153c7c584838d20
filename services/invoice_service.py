# services/invoice_service.py
from __future__ import annotations
import asyncio
import logging
from typing import Optional

from schemas import Invoice
from services.crud import CRUDService
from services.errors import InvoiceNotFound, ReportError
from services.invoice_resolver import InvoiceResolver
from services.report_renderer import ReportRenderer
from services.repository import GenericRepo

logger = logging.getLogger("uvicorn")


class InvoiceService(CRUDService[Invoice]):
    def __init__(self, repo: GenericRepo[Invoice], resolver: InvoiceResolver, renderer: ReportRenderer):
        super().__init__(repo)
        self.resolver = resolver
        self.renderer = renderer

    async def build_report(self, invoice_id: str) -> bytes:
        """
        fetch -> resolve client and dishes -> render.
        Raises InvoiceNotFound, ReferenceResolutionError or RenderError.
        """
        invoice = await self.repo.fetch_by_id(invoice_id)
        if invoice is None:
            raise InvoiceNotFound(invoice_id)
        resolved = await self.resolver.resolve(invoice)
        # ReportLab is CPU-bound; keep it off the event loop
        return await asyncio.to_thread(self.renderer.render_strict, resolved)

    async def generate_report(self, invoice_id: str) -> Optional[bytes]:
        """PDF bytes, or None when the report cannot be produced for any reason."""
        try:
            return await self.build_report(invoice_id)
        except InvoiceNotFound:
            logger.info(f"[report] invoice {invoice_id} not found")
        except ReportError as e:
            logger.warning(f"[report] invoice {invoice_id} failed ({e.kind}): {e}")
        except Exception:
            # store errors, rows that no longer validate, ...
            logger.exception(f"[report] invoice {invoice_id} failed (unexpected)")
        return None
