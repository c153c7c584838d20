from fastapi import HTTPException, Request, status

import services.config as config
from integration.media_gateway import MediaGateway
from schemas import Client, Dish
from services.crud import CRUDService
from services.invoice_service import InvoiceService

# services are wired once in main.lifespan and parked on app.state

def get_client_service(request: Request) -> CRUDService[Client]:
    return request.app.state.client_service

def get_dish_service(request: Request) -> CRUDService[Dish]:
    return request.app.state.dish_service

def get_invoice_service(request: Request) -> InvoiceService:
    return request.app.state.invoice_service

def get_media_gateway() -> MediaGateway:
    try:
        return MediaGateway(
            share_name=config.AZURE_FILES_SHARE,
            connection_string=config.AZURE_FILES_CONNECTION_STRING,
            account_url=config.AZURE_FILES_ACCOUNT_URL,
            credential=config.AZURE_FILES_ACCOUNT_KEY,
            root=config.AZURE_FILES_BASE_DIR,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
