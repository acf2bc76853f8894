# barbastore/routers/services_routes.py

from typing import List

from fastapi import APIRouter, Depends

from barbastore.container import Container
from barbastore.deps import get_container
from barbastore.schemas import ServicePublic

router = APIRouter(
    tags=["services"],
)


@router.get("/services", response_model=List[ServicePublic])
def list_services(container: Container = Depends(get_container)):
    return container.catalog.list_services()
