import uuid

from fastapi import APIRouter, status

from vidya.core.exceptions import NotFoundException
from vidya.dependencies import CurrentPrincipal, StorageDep
from vidya.schemas.pathway import PathwayCreate, PathwayProgressUpdate, PathwayResponse

router = APIRouter()


@router.get("", response_model=list[PathwayResponse])
async def list_pathways(principal: CurrentPrincipal, storage: StorageDep):
    return await storage.list_pathways(principal.id)


@router.post("", response_model=PathwayResponse, status_code=status.HTTP_201_CREATED)
async def create_pathway(payload: PathwayCreate, principal: CurrentPrincipal, storage: StorageDep):
    return await storage.create_pathway(principal.id, ai_generated=False, **payload.model_dump())


@router.put("/{pathway_id}/progress", response_model=PathwayResponse)
async def update_pathway_progress(
    pathway_id: uuid.UUID,
    payload: PathwayProgressUpdate,
    principal: CurrentPrincipal,
    storage: StorageDep,
):
    pathway = await storage.update_pathway_progress(principal.id, pathway_id, payload.progress)
    if not pathway:
        raise NotFoundException("Pathway not found")
    return pathway
