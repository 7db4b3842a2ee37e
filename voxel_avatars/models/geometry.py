"""
Geometry data structures for assembled avatars.

An AvatarModel owns an ordered tuple of parts and the palette they share.
Parts reference a material role, never a color, so every part with the same
role renders identically.
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Vec3 = tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)


class PartKind(str, Enum):
    """Kind of avatar part."""

    HEAD = "head"
    BODY = "body"
    ARM = "arm"
    LEG = "leg"
    HAT = "hat"
    EYE = "eye"


class MaterialRole(str, Enum):
    """Logical color category shared across parts."""

    SKIN = "skin"
    CLOTH = "cloth"
    EYE = "eye"


class HatKind(str, Enum):
    """Hat variant selected by the `hat_type` trait."""

    CUBE = "cube"
    CONE = "cone"

    @classmethod
    def from_trait(cls, hat_type: Any) -> "HatKind":
        # Only the exact string "cube" selects the box; everything else is a cone
        return cls.CUBE if hat_type == "cube" else cls.CONE


class Pose(str, Enum):
    """Arm orientation selected by the `pose_arms_down` trait."""

    ARMS_DOWN = "arms_down"
    T_POSE = "t_pose"

    @classmethod
    def from_trait(cls, pose_arms_down: bool) -> "Pose":
        return cls.ARMS_DOWN if pose_arms_down else cls.T_POSE


class BoxShape(BaseModel):
    """Axis-aligned box centered on the part origin."""

    model_config = ConfigDict(frozen=True)

    type: Literal["box"] = "box"
    width: float
    height: float
    depth: float


class ConeShape(BaseModel):
    """Cone centered on the part origin, apex along +Y."""

    model_config = ConfigDict(frozen=True)

    type: Literal["cone"] = "cone"
    radius: float
    height: float
    segments: int = Field(..., ge=3)


Shape = Annotated[BoxShape | ConeShape, Field(discriminator="type")]


class Color(BaseModel):
    """Linear RGB color. Channels are conventionally 0-1 but never clamped."""

    model_config = ConfigDict(frozen=True)

    r: float
    g: float
    b: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


class MaterialPalette(BaseModel):
    """Per-avatar colors, one per material role."""

    model_config = ConfigDict(frozen=True)

    skin: Color
    cloth: Color
    eye: Color

    def resolve(self, role: MaterialRole) -> Color:
        """Get the color for a material role."""
        return getattr(self, role.value)


class Part(BaseModel):
    """One shaped, positioned piece of an avatar."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique part name within the avatar, e.g. 'arm_left'")
    kind: PartKind
    shape: Shape
    position: Vec3 = Field(..., description="Local position relative to the avatar root")
    rotation: Vec3 = Field(default=ZERO, description="Euler angles (XYZ order) in radians")
    material: MaterialRole


class AvatarModel(BaseModel):
    """
    Geometry handed to the scene composer.

    Parts are ordered head, body, arms, legs, hat, eyes. The model carries
    no raw trait data.
    """

    model_config = ConfigDict(frozen=True)

    parts: tuple[Part, ...]
    palette: MaterialPalette

    def parts_of(self, kind: PartKind) -> list[Part]:
        """Get all parts of a kind, in model order."""
        return [part for part in self.parts if part.kind == kind]

    def part(self, name: str) -> Part:
        """Get a part by name."""
        for part in self.parts:
            if part.name == name:
                return part
        raise KeyError(name)

    def color_of(self, part: Part) -> Color:
        """Resolve a part's material role against this avatar's palette."""
        return self.palette.resolve(part.material)
