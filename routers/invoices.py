# routers/invoices.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from api_utils import PageParams, collect, created_location, respond_item, respond_page, respond_with_link
from deps import get_invoice_service
from schemas import (
    EntityModel, EntityRef, Invoice, InvoiceDTO, InvoiceItem, InvoiceItemDTO, PageSupport, RefDTO,
)
from services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])

# the API only ever exposes the reference ids, resolved or not
def to_dto(m: Invoice) -> InvoiceDTO:
    return InvoiceDTO(
        id=m.id,
        description=m.description,
        client=RefDTO(id=m.client.id),
        items=[InvoiceItemDTO(dish=RefDTO(id=it.dish.id), quantity=it.quantity) for it in m.items],
    )

def to_entity(d: InvoiceDTO) -> Invoice:
    return Invoice(
        id=d.id,
        description=d.description,
        client=EntityRef(id=d.client.id),
        items=[InvoiceItem(dish=EntityRef(id=it.dish.id), quantity=it.quantity) for it in d.items],
    )

@router.get("", response_model=list[InvoiceDTO])
async def list_invoices(service: InvoiceService = Depends(get_invoice_service)):
    return await collect(service.find_all(), to_dto)

@router.get("/pageable", response_model=PageSupport[InvoiceDTO])
async def page_invoices(params: PageParams = Depends(), service: InvoiceService = Depends(get_invoice_service)):
    page = await service.get_page(params.page, params.size)
    return respond_page(page, to_dto)

@router.get("/generateReport/{invoice_id}")
async def generate_report(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    pdf = await service.generate_report(invoice_id)
    if not pdf:
        raise HTTPException(404, "Report not available")
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="invoice_{invoice_id}.pdf"'},
    )

@router.get("/hateoas/{invoice_id}", response_model=EntityModel[InvoiceDTO])
async def invoice_hateoas(request: Request, invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    obj = await service.find_by_id(invoice_id)
    if not obj:
        raise HTTPException(404, "Invoice not found")
    return respond_with_link(obj, to_dto, "invoice-info", request.url_for("get_invoice", invoice_id=invoice_id))

@router.get("/{invoice_id}", response_model=InvoiceDTO, name="get_invoice")
async def get_invoice(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    obj = await service.find_by_id(invoice_id)
    if not obj:
        raise HTTPException(404, "Invoice not found")
    return respond_item(obj, to_dto)

@router.post("", response_model=InvoiceDTO, status_code=201)
async def create_invoice(request: Request, payload: InvoiceDTO, service: InvoiceService = Depends(get_invoice_service)):
    obj = await service.save(to_entity(payload))
    return respond_item(obj, to_dto, status_code=201, headers=created_location(request.url, obj.id))

@router.put("/{invoice_id}", response_model=InvoiceDTO)
async def update_invoice(invoice_id: str, payload: InvoiceDTO, service: InvoiceService = Depends(get_invoice_service)):
    obj = await service.update(invoice_id, to_entity(payload))
    if not obj:
        raise HTTPException(404, "Invoice not found")
    return respond_item(obj, to_dto)

@router.delete("/{invoice_id}", status_code=204)
async def delete_invoice(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    if not await service.delete(invoice_id):
        raise HTTPException(404, "Invoice not found")
    return Response(status_code=204)
