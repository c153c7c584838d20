# routers/clients.py
import asyncio
import logging
import shutil
import tempfile
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile

import services.config as config
from api_utils import PageParams, collect, created_location, respond_item, respond_page, respond_with_link
from deps import get_client_service, get_media_gateway
from integration.media_gateway import MediaGateway
from schemas import Client, ClientDTO, EntityModel, PageSupport
from services.crud import CRUDService
from services.errors import MediaUploadError

router = APIRouter(prefix="/clients", tags=["clients"])
logger = logging.getLogger("uvicorn")

# --- mapping ---------------------------------------------------------------

def to_dto(m: Client) -> ClientDTO:
    return ClientDTO(
        id=m.id,
        name=m.first_name,
        surname=m.last_name,
        birth_date_client=m.birth_date,
        picture=m.url_photo,
    )

def to_entity(d: ClientDTO) -> Client:
    return Client(
        id=d.id,
        first_name=d.name,
        last_name=d.surname,
        birth_date=d.birth_date_client,
        url_photo=d.picture,
    )

# --- routes ----------------------------------------------------------------

@router.get("", response_model=list[ClientDTO])
async def list_clients(service: CRUDService[Client] = Depends(get_client_service)):
    return await collect(service.find_all(), to_dto)

# Put /pageable and /hateoas BEFORE /{client_id}
@router.get("/pageable", response_model=PageSupport[ClientDTO])
async def page_clients(params: PageParams = Depends(), service: CRUDService[Client] = Depends(get_client_service)):
    page = await service.get_page(params.page, params.size)
    return respond_page(page, to_dto)

@router.get("/hateoas/{client_id}", response_model=EntityModel[ClientDTO])
async def client_hateoas(request: Request, client_id: str, service: CRUDService[Client] = Depends(get_client_service)):
    obj = await service.find_by_id(client_id)
    if not obj:
        raise HTTPException(404, "Client not found")
    return respond_with_link(obj, to_dto, "client-info", request.url_for("get_client", client_id=client_id))

@router.get("/{client_id}", response_model=ClientDTO, name="get_client")
async def get_client(client_id: str, service: CRUDService[Client] = Depends(get_client_service)):
    obj = await service.find_by_id(client_id)
    if not obj:
        raise HTTPException(404, "Client not found")
    return respond_item(obj, to_dto)

@router.post("", response_model=ClientDTO, status_code=201)
async def create_client(request: Request, payload: ClientDTO, service: CRUDService[Client] = Depends(get_client_service)):
    obj = await service.save(to_entity(payload))
    return respond_item(obj, to_dto, status_code=201, headers=created_location(request.url, obj.id))

@router.put("/{client_id}", response_model=ClientDTO)
async def update_client(client_id: str, payload: ClientDTO, service: CRUDService[Client] = Depends(get_client_service)):
    obj = await service.update(client_id, to_entity(payload))
    if not obj:
        raise HTTPException(404, "Client not found")
    return respond_item(obj, to_dto)

@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: str, service: CRUDService[Client] = Depends(get_client_service)):
    if not await service.delete(client_id):
        raise HTTPException(404, "Client not found")
    return Response(status_code=204)

# --- photo upload ----------------------------------------------------------
# spooling and uploading are blocking file/network work; both run in a thread

def _spool(file: UploadFile) -> Path:
    suffix = Path(file.filename or "").suffix
    with tempfile.NamedTemporaryFile(prefix="temp", suffix=suffix, delete=False) as tmp:
        shutil.copyfileobj(file.file, tmp)
    return Path(tmp.name)

def _push(gw: MediaGateway, tmp: Path) -> str:
    return gw.upload(tmp, resource_type="auto", dir_path=config.MEDIA_DIR)

def _spool_and_push(gw: MediaGateway, file: UploadFile) -> str:
    tmp = _spool(file)
    try:
        return _push(gw, tmp)
    finally:
        tmp.unlink(missing_ok=True)

async def _offload(fn, *args) -> str:
    try:
        return await asyncio.to_thread(fn, *args)
    except MediaUploadError as e:
        logger.warning(f"[media] {e}")
        raise HTTPException(502, "Photo upload failed")

async def _attach_photo(service: CRUDService[Client], obj: Client, url: str):
    obj = await service.update(obj.id, obj.model_copy(update={"url_photo": url}))
    if not obj:
        raise HTTPException(404, "Client not found")
    return respond_item(obj, to_dto)

@router.post("/v1/upload/{client_id}", response_model=ClientDTO)
async def upload_photo_v1(
    client_id: str,
    file: UploadFile = File(...),
    service: CRUDService[Client] = Depends(get_client_service),
    gw: MediaGateway = Depends(get_media_gateway),
):
    """Look the client up first, upload only when it exists."""
    obj = await service.find_by_id(client_id)
    if not obj:
        raise HTTPException(404, "Client not found")
    url = await _offload(_spool_and_push, gw, file)
    return await _attach_photo(service, obj, url)

@router.post("/v2/upload/{client_id}", response_model=ClientDTO)
async def upload_photo_v2(
    client_id: str,
    file: UploadFile = File(...),
    service: CRUDService[Client] = Depends(get_client_service),
    gw: MediaGateway = Depends(get_media_gateway),
):
    """Upload first, then attach the URL to the client."""
    url = await _offload(_spool_and_push, gw, file)
    obj = await service.find_by_id(client_id)
    if not obj:
        raise HTTPException(404, "Client not found")
    return await _attach_photo(service, obj, url)

@router.post("/v3/upload/{client_id}", response_model=ClientDTO)
async def upload_photo_v3(
    client_id: str,
    file: UploadFile = File(...),
    service: CRUDService[Client] = Depends(get_client_service),
    gw: MediaGateway = Depends(get_media_gateway),
):
    """Spool the file, look the client up, then upload the spooled copy."""
    tmp = await asyncio.to_thread(_spool, file)
    try:
        obj = await service.find_by_id(client_id)
        if not obj:
            raise HTTPException(404, "Client not found")
        url = await _offload(_push, gw, tmp)
    finally:
        tmp.unlink(missing_ok=True)
    return await _attach_photo(service, obj, url)
