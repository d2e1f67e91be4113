"""
Materials catalog endpoints.
"""

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import (
    get_mat_store,
    get_register_material_use_case,
    get_remove_material_use_case,
    get_update_material_use_case,
)
from src.application.dto.requests import CreateMaterialRequest, UpdateMaterialRequest
from src.application.dto.responses import (
    ErrorResponse,
    MaterialListResponse,
    MaterialResponse,
    RegisterMaterialResponse,
    RemoveMaterialResponse,
)
from src.application.use_cases.register_material import RegisterMaterialUseCase
from src.application.use_cases.remove_material import RemoveMaterialUseCase
from src.application.use_cases.update_material import UpdateMaterialUseCase
from src.core.entities.material import MaterialCategory, MaterialType
from src.core.exceptions import MaterialNotFoundError
from src.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.post(
    "",
    response_model=RegisterMaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def register_material(
    request: CreateMaterialRequest,
    use_case: RegisterMaterialUseCase = Depends(get_register_material_use_case),
) -> RegisterMaterialResponse:
    """Add a material to the catalog together with its stock row."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=MaterialListResponse)
async def list_materials(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    type: MaterialType | None = Query(default=None, description="Material family"),
    category: MaterialCategory | None = Query(default=None),
    q: str | None = Query(default=None, description="Search name, grade and description"),
    store: SQLiteMaterialStore = Depends(get_mat_store),
) -> MaterialListResponse:
    """List catalog materials with optional filtering and search."""
    materials = await store.list_materials(
        limit=limit,
        offset=offset,
        material_type=type.value if type else None,
        category=category.value if category else None,
        search=q,
    )
    return MaterialListResponse(
        items=[MaterialResponse.from_entity(m) for m in materials],
        total=len(materials),
    )


@router.get(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(
    material_id: str,
    store: SQLiteMaterialStore = Depends(get_mat_store),
) -> MaterialResponse:
    """Get a catalog material by ID."""
    material = await store.get_material(material_id)
    if material is None:
        raise MaterialNotFoundError(material_id)
    return MaterialResponse.from_entity(material)


@router.patch(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_material(
    material_id: str,
    request: UpdateMaterialRequest,
    use_case: UpdateMaterialUseCase = Depends(get_update_material_use_case),
) -> MaterialResponse:
    """Edit descriptive fields. Stock quantities are not touched."""
    material = await use_case.execute(material_id, request)
    return MaterialResponse.from_entity(material)


@router.delete(
    "/{material_id}",
    response_model=RemoveMaterialResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def remove_material(
    material_id: str,
    purge_transactions: bool = Query(
        default=False, description="Also delete the stock row's transaction history"
    ),
    use_case: RemoveMaterialUseCase = Depends(get_remove_material_use_case),
) -> RemoveMaterialResponse:
    """Delete a material, its stock row and its settled assignments."""
    result = await use_case.execute(material_id, purge_transactions=purge_transactions)
    return use_case.to_response(result)
