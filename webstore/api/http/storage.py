from typing import Literal, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from webstore.core.errors import InvalidMetadataError, NotFoundError, StoreConflictError
from webstore.domains.storage.schemas import (
    CreateRequest, UpdateRequest, StorageResponse, FileExistsResponse
)
from webstore.domains.storage.services import StorageGateway

router = APIRouter(tags=["storage"])


def get_storage_gateway(request: Request) -> StorageGateway:
    """Шлюз хранилища, созданный в create_app"""
    return request.app.state.gateway


@router.get("/{identifier:path}")
async def read_file(
    identifier: str,
    fmt: Literal["swish", "raw", "history"] = Query("swish", alias="format", description="How to render"),
    depth: Optional[int] = Query(None, ge=1, description="History depth"),
    gateway: StorageGateway = Depends(get_storage_gateway)
):
    """Документ по имени или хешу: страница, исходный текст или история"""
    try:
        if fmt == "raw":
            data, mime = await gateway.read_raw(identifier)
            return Response(content=data, media_type=mime)
        if fmt == "history":
            return await gateway.history(identifier, depth)
        return await gateway.render(identifier)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.post("/", response_model=Union[StorageResponse, FileExistsResponse])
async def create_file(
    payload: CreateRequest,
    request: Request,
    gateway: StorageGateway = Depends(get_storage_gateway)
):
    """Сохранение нового документа"""
    try:
        return await gateway.create(request, payload)
    except InvalidMetadataError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e)
        )


@router.put("/{identifier:path}", response_model=StorageResponse)
async def update_file(
    identifier: str,
    payload: UpdateRequest,
    request: Request,
    gateway: StorageGateway = Depends(get_storage_gateway)
):
    """Новая версия документа"""
    try:
        return await gateway.replace(request, identifier, payload)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InvalidMetadataError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e)
        )
    except StoreConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.delete("/{identifier:path}")
async def delete_file(
    identifier: str,
    request: Request,
    gateway: StorageGateway = Depends(get_storage_gateway)
):
    """Логическое удаление документа"""
    try:
        return await gateway.delete(request, identifier)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StoreConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
