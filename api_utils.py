# api_utils.py
import json
from typing import Any, AsyncIterator, Callable
from fastapi import Query
from fastapi.responses import JSONResponse

import services.config as config
from schemas import EntityModel, Link, PageSupport

# ---------- page params ----------
class PageParams:
    def __init__(
        self,
        page: int = Query(0, ge=0),
        size: int = Query(config.PAGE_DEFAULT_SIZE, ge=1),
    ):
        self.page = page
        self.size = size

# ---------- response helpers ----------
async def collect(items: AsyncIterator[Any], to_pydantic: Callable[[Any], Any]) -> list:
    return [to_pydantic(it) async for it in items]

def respond_item(
    obj: Any,
    to_pydantic: Callable[[Any], Any],
    status_code: int = 200,
    headers: dict | None = None,
) -> JSONResponse:
    """Single item response that uses the Pydantic-safe encoding."""
    payload = json.loads(to_pydantic(obj).model_dump_json())
    return JSONResponse(status_code=status_code, content=payload, headers=headers)

def respond_page(page: PageSupport, to_pydantic: Callable[[Any], Any]) -> JSONResponse:
    out = PageSupport[Any](
        content=[to_pydantic(it) for it in page.content],
        page_number=page.page_number,
        page_size=page.page_size,
        total_elements=page.total_elements,
    )
    return JSONResponse(content=json.loads(out.model_dump_json()))

def respond_with_link(obj: Any, to_pydantic: Callable[[Any], Any], rel: str, href: Any) -> JSONResponse:
    out = EntityModel[Any](content=to_pydantic(obj), links=[Link(rel=rel, href=str(href))])
    return JSONResponse(content=json.loads(out.model_dump_json()))

def created_location(request_url: Any, obj_id: str) -> dict:
    return {"Location": f"{str(request_url).rstrip('/')}/{obj_id}"}
