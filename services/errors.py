# services/errors.py
from __future__ import annotations
from typing import List, Tuple


class ReportError(Exception):
    """Base of everything that can stop an invoice report from being produced."""
    kind = "report"


class InvoiceNotFound(ReportError):
    kind = "not_found"

    def __init__(self, invoice_id: str):
        super().__init__(f"Invoice {invoice_id} not found")
        self.invoice_id = invoice_id


class ReferenceResolutionError(ReportError):
    """
    One or more references of an invoice could not be resolved.
    `missing` holds (collection, id) pairs whose fetch came back empty,
    `failures` the exceptions raised by sub-fetches that did not settle cleanly.
    """
    kind = "reference_resolution"

    def __init__(
        self,
        invoice_id: str,
        missing: List[Tuple[str, str]],
        failures: List[BaseException] | None = None,
    ):
        self.invoice_id = invoice_id
        self.missing = list(missing)
        self.failures = list(failures or [])
        parts = [f"{coll}:{ref_id}" for coll, ref_id in self.missing]
        if self.failures:
            parts.append(f"{len(self.failures)} fetch error(s)")
        super().__init__(f"Invoice {invoice_id} has unresolved references: {', '.join(parts)}")


class RenderError(ReportError):
    kind = "render"


class MediaUploadError(Exception):
    pass
