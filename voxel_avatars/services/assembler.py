"""
Avatar geometry assembly.

Turns one complete TraitRecord into an AvatarModel. All positions are local
to the avatar root, Z-up:

- Head box sits on top of the body
- Body box stands on the origin
- Arms hang at the body sides (arms-down) or stick out in a T-pose
- Legs extend below the origin
- Optional hat (cube or cone) above the head
- Optional pair of eyes on the front face of the head

Assembly is referentially transparent: the same record always yields an
equal model.
"""

import math
from typing import Any

from voxel_avatars.models.geometry import (
    ZERO,
    AvatarModel,
    BoxShape,
    Color,
    ConeShape,
    HatKind,
    MaterialPalette,
    MaterialRole,
    Part,
    PartKind,
    Pose,
)
from voxel_avatars.models.traits import NUMERIC_TRAITS, TraitRecord

BLACK: tuple[float, float, float] = (0.0, 0.0, 0.0)

# Fixed part dimensions (world units)
BODY_DEPTH = 0.5
ARM_WIDTH = 0.5
ARM_DEPTH = 0.5
LEG_DEPTH = 0.5
CUBE_HAT_SCALE = 1.2
CUBE_HAT_HEIGHT = 0.4
CONE_HAT_HEIGHT = 1.0
CONE_HAT_SEGMENTS = 32
# Vertical offset of the hat center above the top of the head
CUBE_HAT_LIFT = 0.2
CONE_HAT_LIFT = 0.75
EYE_SIZE = 0.15
EYE_OFFSETS = (-0.3, 0.3)
EYE_SURFACE_GAP = 0.01
SIDES = (-1, 1)


class AvatarAssemblyError(Exception):
    """Base error for avatar assembly."""


class MissingOrInvalidTrait(AvatarAssemblyError):
    """A required numeric trait is absent or not a finite number."""

    def __init__(self, field: str, traits: TraitRecord):
        self.field = field
        self.traits = traits
        super().__init__(f"Invalid or missing trait '{field}'")


def validate_traits(traits: TraitRecord) -> None:
    """
    Check that every required numeric trait is present and finite.

    Raises:
        MissingOrInvalidTrait: naming the first offending field
    """
    for field in NUMERIC_TRAITS:
        if not _is_finite_number(getattr(traits, field)):
            raise MissingOrInvalidTrait(field, traits)


def build_palette(
    traits: TraitRecord,
    eye_color: tuple[float, float, float] = BLACK,
) -> MaterialPalette:
    """Build the per-avatar palette. Channel values are used as-is."""
    return MaterialPalette(
        skin=Color(r=traits.color_skin_r, g=traits.color_skin_g, b=traits.color_skin_b),
        cloth=Color(r=traits.color_cloth_r, g=traits.color_cloth_g, b=traits.color_cloth_b),
        eye=Color(r=eye_color[0], g=eye_color[1], b=eye_color[2]),
    )


def assemble(
    traits: TraitRecord,
    *,
    eye_color: tuple[float, float, float] = BLACK,
) -> AvatarModel:
    """
    Assemble an avatar model from a trait record.

    Args:
        traits: Normalized trait record
        eye_color: RGB color of the eye material

    Returns:
        The assembled avatar model

    Raises:
        MissingOrInvalidTrait: If a required numeric trait is absent or not finite
    """
    validate_traits(traits)

    hs = traits.head_size
    bw = traits.body_width
    bh = traits.body_height
    al = traits.arm_length
    ll = traits.leg_length

    parts = [
        Part(
            name="head",
            kind=PartKind.HEAD,
            shape=BoxShape(width=hs, height=hs, depth=hs),
            position=(0.0, 0.0, bh + hs / 2),
            material=MaterialRole.SKIN,
        ),
        Part(
            name="body",
            kind=PartKind.BODY,
            shape=BoxShape(width=bw, height=BODY_DEPTH, depth=bh),
            position=(0.0, 0.0, bh / 2),
            material=MaterialRole.CLOTH,
        ),
    ]
    parts.extend(_arms(bw, bh, al, Pose.from_trait(traits.pose_arms_down)))
    parts.extend(_legs(bw, ll))
    if traits.has_hat:
        parts.append(_hat(hs, bh, HatKind.from_trait(traits.hat_type)))
    if traits.has_eyes:
        parts.extend(_eyes(hs, bh))

    return AvatarModel(parts=tuple(parts), palette=build_palette(traits, eye_color))


def _arms(bw: float, bh: float, al: float, pose: Pose) -> list[Part]:
    if pose is Pose.ARMS_DOWN:
        z = bh * 0.75
        rotation = ZERO
    else:
        z = bh / 2
        rotation = (math.pi / 2, 0.0, 0.0)

    return [
        Part(
            name=f"arm_{_side_name(side)}",
            kind=PartKind.ARM,
            shape=BoxShape(width=ARM_WIDTH, height=ARM_DEPTH, depth=al),
            position=(side * (bw / 2 + ARM_WIDTH / 2), 0.0, z),
            rotation=rotation,
            material=MaterialRole.SKIN,
        )
        for side in SIDES
    ]


def _legs(bw: float, ll: float) -> list[Part]:
    leg_width = bw / 3
    return [
        Part(
            name=f"leg_{_side_name(side)}",
            kind=PartKind.LEG,
            shape=BoxShape(width=leg_width, height=LEG_DEPTH, depth=ll),
            position=(side * (leg_width / 2), 0.0, -ll / 2),
            material=MaterialRole.SKIN,
        )
        for side in SIDES
    ]


def _hat(hs: float, bh: float, kind: HatKind) -> Part:
    if kind is HatKind.CUBE:
        shape = BoxShape(width=CUBE_HAT_SCALE * hs, height=CUBE_HAT_SCALE * hs, depth=CUBE_HAT_HEIGHT)
        lift = CUBE_HAT_LIFT
    else:
        shape = ConeShape(radius=hs / 2, height=CONE_HAT_HEIGHT, segments=CONE_HAT_SEGMENTS)
        lift = CONE_HAT_LIFT

    return Part(
        name="hat",
        kind=PartKind.HAT,
        shape=shape,
        position=(0.0, 0.0, bh + hs + lift),
        material=MaterialRole.CLOTH,
    )


def _eyes(hs: float, bh: float) -> list[Part]:
    return [
        Part(
            name=f"eye_{_side_name(offset)}",
            kind=PartKind.EYE,
            shape=BoxShape(width=EYE_SIZE, height=EYE_SIZE / 4, depth=EYE_SIZE),
            position=(offset, hs / 2 + EYE_SURFACE_GAP, bh + hs / 2),
            material=MaterialRole.EYE,
        )
        for offset in EYE_OFFSETS
    ]


def _side_name(side: float) -> str:
    return "left" if side < 0 else "right"


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
