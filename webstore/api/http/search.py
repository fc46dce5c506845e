from typing import Literal

from fastapi import APIRouter, Depends, Query

from webstore.api.http.storage import get_storage_gateway
from webstore.domains.storage.services import StorageGateway

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/typeahead")
async def typeahead(
    q: str = Query(..., description="Prefix of a file name or tag"),
    search_set: Literal["file"] = Query("file", alias="set", description="Search set"),
    limit: int = Query(10, ge=1, le=100),
    gateway: StorageGateway = Depends(get_storage_gateway)
):
    """Подсказки для строки поиска"""
    matches = []
    async for match in gateway.typeahead(q):
        matches.append(match.model_dump())
        if len(matches) >= limit:
            break
    return matches
