"""
Trait data structures.

RawAttribute is the loosely-typed input unit read from metadata documents.
TraitRecord is the canonical, fixed-schema record the normalizer produces:
typed canonical fields plus an open mapping for traits with no canonical key.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

# Display name -> canonical key
TRAIT_NAME_MAP: dict[str, str] = {
    "Head Size": "head_size",
    "Body Width": "body_width",
    "Body Height": "body_height",
    "Arm Length": "arm_length",
    "Leg Length": "leg_length",
    "Skin Color R": "color_skin_r",
    "Skin Color G": "color_skin_g",
    "Skin Color B": "color_skin_b",
    "Cloth Color R": "color_cloth_r",
    "Cloth Color G": "color_cloth_g",
    "Cloth Color B": "color_cloth_b",
    "Has Hat": "has_hat",
    "Hat Type": "hat_type",
    "Has Eyes": "has_eyes",
    "Pose Arms Down": "pose_arms_down",
}

# Required for assembly, in validation order
NUMERIC_TRAITS: tuple[str, ...] = (
    "head_size",
    "body_width",
    "body_height",
    "arm_length",
    "leg_length",
    "color_skin_r",
    "color_skin_g",
    "color_skin_b",
    "color_cloth_r",
    "color_cloth_g",
    "color_cloth_b",
)

BOOLEAN_TRAITS: tuple[str, ...] = ("has_hat", "has_eyes", "pose_arms_down")


class RawAttribute(BaseModel):
    """
    A single free-form attribute entry.

    Accepts the metadata JSON shape (`trait_type`/`value`) as well as `name`/`value`.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("trait_type", "name"),
        description="Display name of the trait",
    )
    value: Any = Field(default=None, description="Raw value (string, number or boolean)")
    display_type: Any = Field(default=None, description="Optional display hint, ignored")


class TraitRecord(BaseModel):
    """
    Canonical trait record for one avatar.

    Numeric fields may hold NaN: rejection of unusable values is deferred
    to the assembler's validation step.
    """

    head_size: float | None = None
    body_width: float | None = None
    body_height: float | None = None
    arm_length: float | None = None
    leg_length: float | None = None
    color_skin_r: float | None = None
    color_skin_g: float | None = None
    color_skin_b: float | None = None
    color_cloth_r: float | None = None
    color_cloth_g: float | None = None
    color_cloth_b: float | None = None

    has_hat: bool = False
    has_eyes: bool = False
    pose_arms_down: bool = False

    hat_type: Any = None

    extensions: Mapping[str, Any] = Field(
        default_factory=dict,
        validate_default=True,
        description="Traits without a canonical key, stored under their display name (read-only)",
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "head_size": 1.0,
                "body_width": 1.2,
                "body_height": 2.0,
                "arm_length": 1.2,
                "leg_length": 1.2,
                "color_skin_r": 0.8,
                "color_skin_g": 0.6,
                "color_skin_b": 0.4,
                "color_cloth_r": 0.2,
                "color_cloth_g": 0.4,
                "color_cloth_b": 0.8,
                "has_hat": True,
                "has_eyes": True,
                "pose_arms_down": True,
                "hat_type": "cube",
                "extensions": {"Background": "Teal"},
            }
        },
    )

    @field_validator("extensions", mode="after")
    @classmethod
    def freeze_extensions(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("extensions")
    def serialize_extensions(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    def __hash__(self) -> int:
        # Extension and hat_type values may be unhashable
        scalars = tuple(getattr(self, key) for key in (*NUMERIC_TRAITS, *BOOLEAN_TRAITS))
        return hash((scalars, tuple(sorted(self.extensions))))

    def __getitem__(self, key: str) -> Any:
        """Look up a canonical field by key, falling back to extension traits."""
        if key != "extensions" and key in type(self).model_fields:
            return getattr(self, key)
        return self.extensions[key]

    def __contains__(self, key: object) -> bool:
        if key != "extensions" and key in type(self).model_fields:
            return getattr(self, key) is not None
        return key in self.extensions

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default
