import pytest
from fastapi.testclient import TestClient

from voxel_avatars.models.traits import TraitRecord

SCENARIO_TRAITS = {
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
    "hat_type": "cube",
    "has_eyes": True,
    "pose_arms_down": True,
}

SCENARIO_ATTRIBUTES = [
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
]


@pytest.fixture
def scenario_traits() -> TraitRecord:
    return TraitRecord(**SCENARIO_TRAITS)


@pytest.fixture
def scenario_attributes() -> list[dict]:
    return [dict(entry) for entry in SCENARIO_ATTRIBUTES]


@pytest.fixture
def client():
    from voxel_avatars.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
