"""
Trait normalization and avatar generation endpoints.

Handles the core workflow:
1. Client submits metadata documents → normalize traits
2. Assemble avatar geometry, skipping invalid items
3. Optionally export one avatar as binary glTF
"""

from fastapi import APIRouter, HTTPException, Response, status
from loguru import logger

from voxel_avatars.config import get_settings
from voxel_avatars.models.schemas import (
    BatchResult,
    ErrorResponse,
    MetadataBatchRequest,
    MetadataDocument,
    NormalizeResponse,
)
from voxel_avatars.services.assembler import MissingOrInvalidTrait, assemble
from voxel_avatars.services.batch import generate_avatars
from voxel_avatars.services.gltf_export import GltfExporter
from voxel_avatars.services.normalizer import normalize_metadata

router = APIRouter()


def _check_batch_size(request: MetadataBatchRequest) -> None:
    settings = get_settings()
    if len(request.documents) > settings.batch.max_items:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": "batch_too_large",
                "message": f"At most {settings.batch.max_items} documents per request",
                "details": {"received": len(request.documents)},
            },
        )


# =============================================================================
# Trait Normalization
# =============================================================================


@router.post(
    "/traits/normalize",
    response_model=NormalizeResponse,
    responses={413: {"model": ErrorResponse, "description": "Batch too large"}},
)
async def normalize_traits(request: MetadataBatchRequest) -> NormalizeResponse:
    """
    Normalize metadata documents into canonical trait records.

    Records are returned in request order. No validation is applied;
    unparseable numeric traits come back as null.
    """
    _check_batch_size(request)
    return NormalizeResponse(records=[normalize_metadata(document) for document in request.documents])


# =============================================================================
# Avatar Generation
# =============================================================================


@router.post(
    "/avatars",
    response_model=BatchResult,
    responses={413: {"model": ErrorResponse, "description": "Batch too large"}},
)
async def create_avatars(request: MetadataBatchRequest) -> BatchResult:
    """
    Assemble avatar geometry for a batch of metadata documents.

    Documents with a missing or invalid required trait are reported under
    `skipped`; they never fail the request.
    """
    _check_batch_size(request)
    settings = get_settings()

    logger.info(f"Generating avatars for {len(request.documents)} documents")
    return generate_avatars(
        request.documents,
        eye_color=settings.assembly.eye_color,
        max_workers=settings.batch.max_workers,
    )


@router.post(
    "/avatars/export",
    response_class=Response,
    responses={
        200: {"content": {"model/gltf-binary": {}}, "description": "Binary glTF file"},
        422: {"model": ErrorResponse, "description": "Invalid traits"},
    },
)
async def export_avatar(document: MetadataDocument) -> Response:
    """
    Assemble a single avatar and return it as a GLB file.
    """
    settings = get_settings()
    traits = normalize_metadata(document)

    try:
        model = assemble(traits, eye_color=settings.assembly.eye_color)
    except MissingOrInvalidTrait as e:
        logger.warning(f"Export rejected: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "invalid_trait",
                "message": str(e),
                "details": {"field": e.field},
            },
        )

    exporter = GltfExporter(settings.export)
    name = document.name if isinstance(document.name, str) and document.name else "avatar"
    glb_data = exporter.export(model, name=name)
    return Response(content=glb_data, media_type="model/gltf-binary")
