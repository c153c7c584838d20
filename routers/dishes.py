# routers/dishes.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from api_utils import PageParams, collect, created_location, respond_item, respond_page, respond_with_link
from deps import get_dish_service
from schemas import Dish, DishDTO, EntityModel, PageSupport
from services.crud import CRUDService

router = APIRouter(prefix="/dishes", tags=["dishes"])

def to_dto(m: Dish) -> DishDTO:
    return DishDTO(id=m.id, name_dish=m.name, price_dish=m.price, status_dish=m.status)

def to_entity(d: DishDTO) -> Dish:
    return Dish(id=d.id, name=d.name_dish, price=d.price_dish, status=d.status_dish)

@router.get("", response_model=list[DishDTO])
async def list_dishes(service: CRUDService[Dish] = Depends(get_dish_service)):
    return await collect(service.find_all(), to_dto)

@router.get("/pageable", response_model=PageSupport[DishDTO])
async def page_dishes(params: PageParams = Depends(), service: CRUDService[Dish] = Depends(get_dish_service)):
    page = await service.get_page(params.page, params.size)
    return respond_page(page, to_dto)

@router.get("/hateoas/{dish_id}", response_model=EntityModel[DishDTO])
async def dish_hateoas(request: Request, dish_id: str, service: CRUDService[Dish] = Depends(get_dish_service)):
    obj = await service.find_by_id(dish_id)
    if not obj:
        raise HTTPException(404, "Dish not found")
    return respond_with_link(obj, to_dto, "dish-info", request.url_for("get_dish", dish_id=dish_id))

@router.get("/{dish_id}", response_model=DishDTO, name="get_dish")
async def get_dish(dish_id: str, service: CRUDService[Dish] = Depends(get_dish_service)):
    obj = await service.find_by_id(dish_id)
    if not obj:
        raise HTTPException(404, "Dish not found")
    return respond_item(obj, to_dto)

@router.post("", response_model=DishDTO, status_code=201)
async def create_dish(request: Request, payload: DishDTO, service: CRUDService[Dish] = Depends(get_dish_service)):
    obj = await service.save(to_entity(payload))
    return respond_item(obj, to_dto, status_code=201, headers=created_location(request.url, obj.id))

@router.put("/{dish_id}", response_model=DishDTO)
async def update_dish(dish_id: str, payload: DishDTO, service: CRUDService[Dish] = Depends(get_dish_service)):
    obj = await service.update(dish_id, to_entity(payload))
    if not obj:
        raise HTTPException(404, "Dish not found")
    return respond_item(obj, to_dto)

@router.delete("/{dish_id}", status_code=204)
async def delete_dish(dish_id: str, service: CRUDService[Dish] = Depends(get_dish_service)):
    if not await service.delete(dish_id):
        raise HTTPException(404, "Dish not found")
    return Response(status_code=204)
