"""
Pydantic schemas for API request/response validation.

These schemas define the contract between the API and clients.
Internal data structures (trait records, avatar geometry) live in
`traits` and `geometry`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from voxel_avatars.models.geometry import AvatarModel
from voxel_avatars.models.traits import TraitRecord

# =============================================================================
# Request Schemas
# =============================================================================


class MetadataDocument(BaseModel):
    """
    Token metadata document.

    Attributes are normally supplied as a list of `trait_type`/`value` entries.
    Documents without one are read as flat trait mappings, from `traits` when
    present, otherwise from the document's own fields.

    Fields are not type-checked here: a malformed document is reported per
    avatar by the batch pipeline instead of rejecting the whole request.
    """

    name: Any = None
    description: Any = None
    image: Any = None
    attributes: Any = Field(default=None, description="List of `trait_type`/`value` entries")
    traits: Any = Field(default=None, description="Flat `{name: value}` trait mapping")

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "name": "Voxel Avatar #0",
                "attributes": [
                    {"trait_type": "Head Size", "value": "1.00", "display_type": "number"},
                    {"trait_type": "Body Width", "value": "1.20", "display_type": "number"},
                    {"trait_type": "Body Height", "value": "2.00", "display_type": "number"},
                    {"trait_type": "Arm Length", "value": "1.20", "display_type": "number"},
                    {"trait_type": "Leg Length", "value": "1.20", "display_type": "number"},
                    {"trait_type": "Skin Color R", "value": 0.8},
                    {"trait_type": "Skin Color G", "value": 0.6},
                    {"trait_type": "Skin Color B", "value": 0.4},
                    {"trait_type": "Cloth Color R", "value": 0.2},
                    {"trait_type": "Cloth Color G", "value": 0.4},
                    {"trait_type": "Cloth Color B", "value": 0.8},
                    {"trait_type": "Has Hat", "value": True},
                    {"trait_type": "Hat Type", "value": "cube"},
                    {"trait_type": "Has Eyes", "value": "true"},
                    {"trait_type": "Pose Arms Down", "value": True},
                ],
            }
        },
    )


class MetadataBatchRequest(BaseModel):
    """Batch of metadata documents, one per avatar."""

    documents: list[MetadataDocument | Any] = Field(
        ...,
        min_length=1,
        description="Metadata documents in avatar order; entries that are not objects are skipped per avatar",
    )


# =============================================================================
# Response Schemas
# =============================================================================


class SkippedAvatar(BaseModel):
    """An input item that could not be assembled."""

    index: int = Field(..., ge=0, description="Position of the item in the request")
    field: str | None = Field(
        default=None, description="First missing or invalid required trait; null when the item could not be read"
    )
    message: str = Field(..., description="Human-readable reason")


class GeneratedAvatar(BaseModel):
    """An assembled avatar and the position of its source item."""

    index: int = Field(..., ge=0)
    avatar: AvatarModel


class BatchResult(BaseModel):
    """Result of a batch generation run."""

    avatars: list[GeneratedAvatar] = Field(default_factory=list)
    skipped: list[SkippedAvatar] = Field(default_factory=list)


class NormalizeResponse(BaseModel):
    """Trait records normalized from metadata documents, in request order."""

    records: list[TraitRecord]


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type/code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(None, description="Additional error details")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "invalid_trait",
                "message": "Invalid or missing trait 'head_size'",
                "details": {"field": "head_size"},
            }
        }
    )
