"""Avatar geometry assembly tests."""

import math

import pytest

from voxel_avatars.models.geometry import (
    BoxShape,
    Color,
    ConeShape,
    HatKind,
    MaterialRole,
    PartKind,
    Pose,
)
from voxel_avatars.models.traits import NUMERIC_TRAITS
from voxel_avatars.services.assembler import (
    AvatarAssemblyError,
    MissingOrInvalidTrait,
    assemble,
    build_palette,
    validate_traits,
)
from voxel_avatars.services.normalizer import normalize


def _vec_approx(actual, expected):
    return list(actual) == pytest.approx(list(expected))


class TestValidation:
    """The validation gate names the offending field."""

    def test_complete_record_passes(self, scenario_traits):
        validate_traits(scenario_traits)

    @pytest.mark.parametrize("field", NUMERIC_TRAITS)
    def test_missing_field_is_named(self, scenario_traits, field):
        traits = scenario_traits.model_copy(update={field: None})
        with pytest.raises(MissingOrInvalidTrait) as exc_info:
            assemble(traits)
        assert exc_info.value.field == field
        assert exc_info.value.traits is traits
        assert field in str(exc_info.value)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_field_is_rejected(self, scenario_traits, value):
        traits = scenario_traits.model_copy(update={"arm_length": value})
        with pytest.raises(MissingOrInvalidTrait) as exc_info:
            assemble(traits)
        assert exc_info.value.field == "arm_length"

    def test_unparseable_attribute_fails_at_assembly(self, scenario_attributes):
        scenario_attributes[0] = {"trait_type": "Head Size", "value": "large"}
        traits = normalize(scenario_attributes)
        with pytest.raises(MissingOrInvalidTrait) as exc_info:
            assemble(traits)
        assert exc_info.value.field == "head_size"

    def test_error_hierarchy(self):
        assert issubclass(MissingOrInvalidTrait, AvatarAssemblyError)

    def test_optional_traits_may_be_absent(self, scenario_traits):
        traits = scenario_traits.model_copy(
            update={"has_hat": False, "has_eyes": False, "pose_arms_down": False, "hat_type": None}
        )
        model = assemble(traits)
        assert len(model.parts) == 6


class TestScenario:
    """Reference avatar: cube hat, eyes, arms down."""

    def test_part_counts(self, scenario_traits):
        model = assemble(scenario_traits)
        assert len(model.parts) == 9
        assert [part.kind for part in model.parts] == [
            PartKind.HEAD,
            PartKind.BODY,
            PartKind.ARM,
            PartKind.ARM,
            PartKind.LEG,
            PartKind.LEG,
            PartKind.HAT,
            PartKind.EYE,
            PartKind.EYE,
        ]

    def test_part_names_are_unique(self, scenario_traits):
        names = [part.name for part in assemble(scenario_traits).parts]
        assert len(set(names)) == len(names)

    def test_head(self, scenario_traits):
        head = assemble(scenario_traits).part("head")
        assert head.shape == BoxShape(width=1.0, height=1.0, depth=1.0)
        assert _vec_approx(head.position, (0.0, 0.0, 2.5))
        assert head.material == MaterialRole.SKIN

    def test_body(self, scenario_traits):
        body = assemble(scenario_traits).part("body")
        assert body.shape == BoxShape(width=1.2, height=0.5, depth=2.0)
        assert _vec_approx(body.position, (0.0, 0.0, 1.0))
        assert body.material == MaterialRole.CLOTH

    def test_arms_down(self, scenario_traits):
        arms = assemble(scenario_traits).parts_of(PartKind.ARM)
        assert [arm.name for arm in arms] == ["arm_left", "arm_right"]
        assert _vec_approx(arms[0].position, (-0.85, 0.0, 1.5))
        assert _vec_approx(arms[1].position, (0.85, 0.0, 1.5))
        for arm in arms:
            assert arm.rotation == (0.0, 0.0, 0.0)
            assert arm.shape == BoxShape(width=0.5, height=0.5, depth=1.2)
            assert arm.material == MaterialRole.SKIN

    def test_legs(self, scenario_traits):
        legs = assemble(scenario_traits).parts_of(PartKind.LEG)
        assert _vec_approx(legs[0].position, (-0.2, 0.0, -0.6))
        assert _vec_approx(legs[1].position, (0.2, 0.0, -0.6))
        for leg in legs:
            assert leg.shape.width == pytest.approx(0.4)
            assert leg.shape.height == 0.5
            assert leg.shape.depth == 1.2
            assert leg.material == MaterialRole.SKIN

    def test_cube_hat(self, scenario_traits):
        hat = assemble(scenario_traits).part("hat")
        assert hat.shape == BoxShape(width=1.2, height=1.2, depth=0.4)
        assert _vec_approx(hat.position, (0.0, 0.0, 3.2))
        assert hat.material == MaterialRole.CLOTH

    def test_eyes(self, scenario_traits):
        eyes = assemble(scenario_traits).parts_of(PartKind.EYE)
        assert _vec_approx(eyes[0].position, (-0.3, 0.51, 2.5))
        assert _vec_approx(eyes[1].position, (0.3, 0.51, 2.5))
        for eye in eyes:
            assert eye.shape.width == pytest.approx(0.15)
            assert eye.shape.height == pytest.approx(0.0375)
            assert eye.shape.depth == pytest.approx(0.15)
            assert eye.material == MaterialRole.EYE


class TestPoseBranch:
    """T-pose moves and rotates the arms only."""

    def test_t_pose_arms(self, scenario_traits):
        model = assemble(scenario_traits.model_copy(update={"pose_arms_down": False}))
        for arm in model.parts_of(PartKind.ARM):
            assert arm.position[2] == pytest.approx(1.0)
            assert _vec_approx(arm.rotation, (math.pi / 2, 0.0, 0.0))

    def test_other_parts_unchanged(self, scenario_traits):
        down = assemble(scenario_traits)
        t_pose = assemble(scenario_traits.model_copy(update={"pose_arms_down": False}))
        assert [p for p in down.parts if p.kind != PartKind.ARM] == [
            p for p in t_pose.parts if p.kind != PartKind.ARM
        ]

    def test_pose_resolution(self):
        assert Pose.from_trait(True) is Pose.ARMS_DOWN
        assert Pose.from_trait(False) is Pose.T_POSE


class TestHatBranch:
    """Any hat type other than "cube" is a cone."""

    @pytest.mark.parametrize("hat_type", ["cone", "Cube", "", None, 7])
    def test_cone_hat(self, scenario_traits, hat_type):
        hat = assemble(scenario_traits.model_copy(update={"hat_type": hat_type})).part("hat")
        assert hat.shape == ConeShape(radius=0.5, height=1.0, segments=32)
        assert _vec_approx(hat.position, (0.0, 0.0, 3.75))

    def test_no_hat(self, scenario_traits):
        model = assemble(scenario_traits.model_copy(update={"has_hat": False}))
        assert model.parts_of(PartKind.HAT) == []
        assert len(model.parts) == 8

    def test_no_eyes(self, scenario_traits):
        model = assemble(scenario_traits.model_copy(update={"has_eyes": False}))
        assert model.parts_of(PartKind.EYE) == []
        assert len(model.parts) == 7

    def test_hat_kind_resolution(self):
        assert HatKind.from_trait("cube") is HatKind.CUBE
        assert HatKind.from_trait("cone") is HatKind.CONE
        assert HatKind.from_trait(None) is HatKind.CONE


class TestPalette:
    """Parts share per-avatar material roles."""

    def test_palette_from_traits(self, scenario_traits):
        palette = build_palette(scenario_traits)
        assert palette.skin == Color(r=0.8, g=0.6, b=0.4)
        assert palette.cloth == Color(r=0.2, g=0.4, b=0.8)
        assert palette.eye == Color(r=0.0, g=0.0, b=0.0)

    def test_eye_color_is_injected(self, scenario_traits):
        model = assemble(scenario_traits, eye_color=(0.1, 0.1, 0.1))
        assert model.color_of(model.part("eye_left")) == Color(r=0.1, g=0.1, b=0.1)

    def test_same_role_same_color(self, scenario_traits):
        model = assemble(scenario_traits)
        skin_colors = {model.color_of(p) for p in model.parts if p.material == MaterialRole.SKIN}
        assert skin_colors == {Color(r=0.8, g=0.6, b=0.4)}

    def test_out_of_range_colors_accepted(self, scenario_traits):
        model = assemble(scenario_traits.model_copy(update={"color_skin_r": 204.0, "color_cloth_b": -1.0}))
        assert model.palette.skin.r == 204.0
        assert model.palette.cloth.b == -1.0


class TestDeterminism:
    """Same input, same model."""

    def test_repeated_assembly(self, scenario_attributes):
        assert assemble(normalize(scenario_attributes)) == assemble(normalize(scenario_attributes))

    def test_model_serializes_without_traits(self, scenario_traits):
        data = assemble(scenario_traits).model_dump(mode="json")
        assert set(data) == {"parts", "palette"}
        assert data["parts"][6]["shape"] == {"type": "box", "width": 1.2, "height": 1.2, "depth": 0.4}
