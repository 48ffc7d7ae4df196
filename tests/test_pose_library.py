import pytest

from posetrainer.pose.types import Skeleton
from posetrainer.pose_library import (
	GENERIC_ADJUSTMENT,
	GENERIC_REFERENCE,
	PoseDefinition,
	PoseLibrary,
	friendly_keypoint_name,
)


def test_builtin_catalog():
	lib = PoseLibrary()
	ids = [p.pose_id for p in lib.list()]
	assert ids[:4] == ["mountain", "warrior2", "tree", "downdog"]
	assert len(ids) == 10
	assert lib.get("mountain").display_name == "Mountain Pose (Tadasana) - Level 1"


def test_unknown_pose_raises_key_error():
	with pytest.raises(KeyError):
		PoseLibrary().get("levitation")
	assert "levitation" not in PoseLibrary()


def test_reference_falls_back_to_generic():
	lib = PoseLibrary()
	assert lib.reference_for("downdog") is GENERIC_REFERENCE
	assert lib.reference_for("mountain") is not GENERIC_REFERENCE
	assert len(lib.reference_for("warrior2")) == 13


def test_hint_fallbacks():
	lib = PoseLibrary()
	assert lib.hints_for("downdog", "leftHip") == "Lift your hips high"
	bridge = lib.get("bridge")
	assert bridge.hint_for("leftKnee") == bridge.instructions[0]
	assert PoseDefinition("x", "X").hint_for("nose") == GENERIC_ADJUSTMENT
	assert lib.hints_for(None, "nose") == GENERIC_ADJUSTMENT


def test_difficulty_is_clamped():
	assert PoseDefinition("x", "X", difficulty=9).difficulty == 5
	assert PoseDefinition("x", "X", difficulty=0).difficulty == 1
	assert PoseDefinition("x", "X", difficulty=2).display_name == "X - Level 2"


def test_register_and_attach_reference():
	lib = PoseLibrary([])
	lib.register(PoseDefinition("custom", "Custom Pose"))
	assert lib.reference_for("custom") is GENERIC_REFERENCE
	sk = Skeleton.from_mapping({"nose": (0.5, 0.1)})
	lib.with_reference("custom", sk)
	assert lib.reference_for("custom") is sk


def test_friendly_names():
	assert friendly_keypoint_name("nose") == "Head Position"
	assert friendly_keypoint_name("rightAnkle") == "Right Ankle"
	assert friendly_keypoint_name("tail") == "tail"
