from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from posetrainer.pose.types import Skeleton


logger = logging.getLogger(__name__)


FRIENDLY_KEYPOINT_NAMES: Dict[str, str] = {
	"nose": "Head Position",
	"leftShoulder": "Left Shoulder",
	"rightShoulder": "Right Shoulder",
	"leftElbow": "Left Elbow",
	"rightElbow": "Right Elbow",
	"leftWrist": "Left Wrist",
	"rightWrist": "Right Wrist",
	"leftHip": "Left Hip",
	"rightHip": "Right Hip",
	"leftKnee": "Left Knee",
	"rightKnee": "Right Knee",
	"leftAnkle": "Left Ankle",
	"rightAnkle": "Right Ankle",
}

GENERIC_ADJUSTMENT = "Focus on your form"


def friendly_keypoint_name(name: str) -> str:
	return FRIENDLY_KEYPOINT_NAMES.get(name, name)


@dataclass(frozen=True)
class PoseDefinition:
	"""A pose in the catalog plus everything feedback needs about it."""

	pose_id: str
	name: str
	sanskrit_name: str = ""
	difficulty: int = 1  # 1..5
	category: str = ""
	description: str = ""
	instructions: Tuple[str, ...] = ()
	keypoint_hints: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
	reference: Optional[Skeleton] = None

	def __post_init__(self) -> None:
		object.__setattr__(self, "difficulty", max(1, min(5, int(self.difficulty))))

	@property
	def display_name(self) -> str:
		if self.sanskrit_name:
			return f"{self.name} ({self.sanskrit_name}) - Level {self.difficulty}"
		return f"{self.name} - Level {self.difficulty}"

	def hint_for(self, keypoint: str) -> str:
		"""
		Keypoint-specific adjustment; falls back to the first general
		instruction, then to a generic cue.
		"""
		hints = self.keypoint_hints.get(keypoint)
		if hints:
			return hints[0]
		if self.instructions:
			return self.instructions[0]
		return GENERIC_ADJUSTMENT


def _sk(points: Dict[str, Tuple[float, float, float]]) -> Skeleton:
	return Skeleton.from_mapping(points, source="reference")


GENERIC_REFERENCE = _sk(
	{
		"nose": (0.5, 0.2, 0.9),
		"leftShoulder": (0.4, 0.3, 0.9),
		"rightShoulder": (0.6, 0.3, 0.9),
		"leftHip": (0.45, 0.6, 0.85),
		"rightHip": (0.55, 0.6, 0.85),
	}
)

_MOUNTAIN_REFERENCE = _sk(
	{
		"nose": (0.5, 0.2, 0.9),
		"leftShoulder": (0.4, 0.3, 0.9),
		"rightShoulder": (0.6, 0.3, 0.9),
		"leftElbow": (0.35, 0.4, 0.8),
		"rightElbow": (0.65, 0.4, 0.8),
		"leftHip": (0.45, 0.6, 0.85),
		"rightHip": (0.55, 0.6, 0.85),
		"leftKnee": (0.45, 0.75, 0.8),
		"rightKnee": (0.55, 0.75, 0.8),
		"leftAnkle": (0.45, 0.9, 0.75),
		"rightAnkle": (0.55, 0.9, 0.75),
	}
)

_WARRIOR_REFERENCE = _sk(
	{
		"nose": (0.5, 0.2, 0.9),
		"leftShoulder": (0.4, 0.3, 0.9),
		"rightShoulder": (0.6, 0.3, 0.9),
		"leftElbow": (0.3, 0.3, 0.8),
		"rightElbow": (0.7, 0.3, 0.8),
		"leftWrist": (0.2, 0.3, 0.7),
		"rightWrist": (0.8, 0.3, 0.7),
		"leftHip": (0.45, 0.6, 0.85),
		"rightHip": (0.55, 0.6, 0.85),
		"leftKnee": (0.35, 0.75, 0.8),
		"rightKnee": (0.65, 0.65, 0.8),
		"leftAnkle": (0.25, 0.9, 0.75),
		"rightAnkle": (0.75, 0.9, 0.75),
	}
)

_TREE_REFERENCE = _sk(
	{
		"nose": (0.5, 0.2, 0.9),
		"leftShoulder": (0.4, 0.3, 0.9),
		"rightShoulder": (0.6, 0.3, 0.9),
		"leftElbow": (0.3, 0.25, 0.8),
		"rightElbow": (0.7, 0.25, 0.8),
		"leftWrist": (0.4, 0.15, 0.7),
		"rightWrist": (0.6, 0.15, 0.7),
		"leftHip": (0.45, 0.6, 0.85),
		"rightHip": (0.55, 0.6, 0.85),
		"leftKnee": (0.55, 0.5, 0.8),  # bent leg
		"rightKnee": (0.55, 0.75, 0.8),
		"leftAnkle": (0.55, 0.6, 0.7),  # foot against standing leg
		"rightAnkle": (0.55, 0.9, 0.75),
	}
)


def _mirrored(left: Tuple[str, ...], right: Optional[Tuple[str, ...]] = None) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
	return left, (right if right is not None else left)


def _hints(**groups: Tuple[Tuple[str, ...], Tuple[str, ...]]) -> Dict[str, Tuple[str, ...]]:
	"""shoulder=(left_hints, right_hints) -> {"leftShoulder": ..., "rightShoulder": ...}"""
	out: Dict[str, Tuple[str, ...]] = {}
	for joint, (left, right) in groups.items():
		cap = joint[0].upper() + joint[1:]
		out["left" + cap] = left
		out["right" + cap] = right
	return out


BUILTIN_POSES: Tuple[PoseDefinition, ...] = (
	PoseDefinition(
		pose_id="mountain",
		name="Mountain Pose",
		sanskrit_name="Tadasana",
		difficulty=1,
		category="Standing",
		description="A foundational standing pose that improves posture and body awareness",
		instructions=(
			"Stand taller, elongate your spine",
			"Distribute weight evenly through both feet",
			"Engage your core muscles",
			"Relax your shoulders away from your ears",
			"Breathe deeply and steadily",
		),
		keypoint_hints=_hints(
			shoulder=_mirrored(("Lower your shoulders away from your ears", "Keep shoulders back and down")),
			hip=_mirrored(("Square your hips forward", "Keep your weight evenly distributed")),
			knee=_mirrored(("Straighten your leg without locking the knee", "Engage your quad muscles")),
			ankle=_mirrored(
				("Balance your weight evenly through all four corners of your foot", "Lift your arches slightly")
			),
		),
		reference=_MOUNTAIN_REFERENCE,
	),
	PoseDefinition(
		pose_id="warrior2",
		name="Warrior Pose",
		sanskrit_name="Virabhadrasana II",
		difficulty=2,
		category="Standing",
		description="A pose that builds strength and stamina in the legs while opening the hips",
		instructions=(
			"Bend your front knee more",
			"Keep your back leg straight",
			"Extend your arms more firmly",
			"Square your hips forward",
			"Keep your stance wide and stable",
		),
		keypoint_hints=_hints(
			shoulder=_mirrored(("Keep your shoulders down and away from your ears", "Engage your shoulder blades")),
			elbow=_mirrored(
				("Extend your arm fully without locking your elbow", "Keep your elbow in line with your shoulder")
			),
			hip=_mirrored(("Square your hips forward", "Keep your hips level")),
			knee=_mirrored(
				("Bend your front knee to 90 degrees", "Keep your knee aligned over your ankle"),
				("Keep your back leg straight", "Engage your quad muscles"),
			),
			ankle=_mirrored(
				("Press the outer edge of your back foot firmly into the floor", "Keep your ankle in line with your knee"),
				("Root down through your heel", "Keep your ankle in line with your knee"),
			),
		),
		reference=_WARRIOR_REFERENCE,
	),
	PoseDefinition(
		pose_id="tree",
		name="Tree Pose",
		sanskrit_name="Vrksasana",
		difficulty=2,
		category="Balance",
		description="A balancing pose that strengthens the legs and improves focus",
		instructions=(
			"Focus on a fixed point to improve balance",
			"Press your foot firmly into your inner thigh",
			"Keep your hips level",
			"Engage your standing leg",
			"Bring your hands to heart center if needed for balance",
		),
		keypoint_hints=_hints(
			shoulder=_mirrored(("Keep your shoulders relaxed and away from your ears", "Open your chest")),
			elbow=_mirrored(("Keep your elbows soft", "Bring your palms together at your heart center")),
			hip=_mirrored(("Keep your hips level", "Engage your core to stabilize")),
			knee=_mirrored(
				("Place your foot higher on your inner thigh", "Rotate your knee outward"),
				("Engage your standing leg", "Micro-bend your knee to avoid locking"),
			),
			ankle=_mirrored(
				("Press your foot firmly against your inner thigh", "Flex your foot"),
				("Distribute your weight evenly across your standing foot", "Root down through all four corners of your foot"),
			),
		),
		reference=_TREE_REFERENCE,
	),
	PoseDefinition(
		pose_id="downdog",
		name="Downward-Facing Dog",
		sanskrit_name="Adho Mukha Svanasana",
		difficulty=1,
		category="Inversion",
		description="An energizing pose that stretches the hamstrings and strengthens the arms",
		instructions=(
			"Push the floor away, straighten your arms",
			"Press your heels toward the floor",
			"Keep your head between your arms",
			"Create a straight line from hands to hips",
			"Engage your core to support your spine",
		),
		keypoint_hints=_hints(
			shoulder=_mirrored(
				("Externally rotate your shoulders", "Push the floor away to create space between shoulders and ears")
			),
			elbow=_mirrored(
				("Straighten your arms without locking your elbows", "Rotate your elbow creases toward each other")
			),
			hip=_mirrored(("Lift your hips high", "Draw your sit bones toward the ceiling")),
			knee=_mirrored(("Straighten your legs", "Engage your quadriceps to lift your kneecaps")),
			ankle=_mirrored(("Press your heels toward the floor", "Spread your toes wide")),
		),
	),
	PoseDefinition(
		pose_id="warrior1",
		name="Warrior I",
		sanskrit_name="Virabhadrasana I",
		difficulty=2,
		category="Standing",
		description="A strengthening pose that opens the chest and stretches the legs",
		instructions=(
			"Align front knee over ankle",
			"Turn back foot to 45-degree angle",
			"Square hips toward the front",
			"Reach arms overhead with shoulders relaxed",
			"Engage core and lift through the chest",
		),
	),
	PoseDefinition(
		pose_id="triangle",
		name="Triangle Pose",
		sanskrit_name="Trikonasana",
		difficulty=2,
		category="Standing",
		description="A standing pose that stretches the legs and opens the chest",
		instructions=(
			"Keep both legs straight",
			"Extend through both sides of the waist",
			"Stack shoulders vertically",
			"Gaze upward toward top hand",
			"Keep chest open toward the side",
		),
	),
	PoseDefinition(
		pose_id="chair",
		name="Chair Pose",
		sanskrit_name="Utkatasana",
		difficulty=2,
		category="Standing",
		description="A strengthening pose for the legs that builds heat in the body",
		instructions=(
			"Bend knees deeply as if sitting in a chair",
			"Keep weight in the heels",
			"Reach arms up by ears",
			"Drop shoulders away from ears",
			"Keep chest lifted and spine long",
		),
	),
	PoseDefinition(
		pose_id="bridge",
		name="Bridge Pose",
		sanskrit_name="Setu Bandha Sarvangasana",
		difficulty=2,
		category="Backbend",
		description="A gentle backbend that opens the chest and strengthens the spine",
		instructions=(
			"Press firmly into feet with knees hip-width apart",
			"Lift hips toward ceiling",
			"Keep thighs parallel",
			"Interlace fingers beneath you",
			"Roll shoulders under to open chest",
		),
	),
	PoseDefinition(
		pose_id="pigeon",
		name="Pigeon Pose",
		sanskrit_name="Eka Pada Rajakapotasana",
		difficulty=3,
		category="Hip Opener",
		description="A deep hip opener that stretches the hip flexors and rotators",
		instructions=(
			"Square hips toward the front",
			"Flex front foot to protect knee",
			"Lengthen through the spine before folding",
		),
	),
	PoseDefinition(
		pose_id="child",
		name="Child's Pose",
		sanskrit_name="Balasana",
		difficulty=1,
		category="Restorative",
		description="A resting pose that gently stretches the back and hips",
		instructions=(
			"Sink your hips toward your heels",
			"Reach your arms forward and relax your shoulders",
			"Rest your forehead on the mat",
		),
	),
)


class PoseLibrary:
	"""
	Catalog of pose definitions keyed by pose id.

	Insertion order is preserved so listing is stable.
	"""

	def __init__(self, poses: Optional[List[PoseDefinition]] = None) -> None:
		self._poses: Dict[str, PoseDefinition] = {}
		for p in poses if poses is not None else BUILTIN_POSES:
			self.register(p)

	def register(self, pose: PoseDefinition) -> None:
		if pose.pose_id in self._poses:
			logger.info("[Library] Replacing pose definition %r", pose.pose_id)
		self._poses[pose.pose_id] = pose

	def get(self, pose_id: str) -> PoseDefinition:
		try:
			return self._poses[pose_id]
		except KeyError:
			raise KeyError(f"Pose with id {pose_id!r} not found") from None

	def __contains__(self, pose_id: object) -> bool:
		return pose_id in self._poses

	def list(self) -> List[PoseDefinition]:
		return list(self._poses.values())

	def reference_for(self, pose_id: str) -> Skeleton:
		"""Reference skeleton for a pose; poses without one use the generic torso."""
		ref = self.get(pose_id).reference
		return ref if ref is not None else GENERIC_REFERENCE

	def hints_for(self, pose_id: Optional[str], keypoint: str) -> str:
		if pose_id is None or pose_id not in self._poses:
			return GENERIC_ADJUSTMENT
		return self._poses[pose_id].hint_for(keypoint)

	def with_reference(self, pose_id: str, skeleton: Skeleton) -> PoseDefinition:
		"""Attach (or replace) a stored reference skeleton for a pose."""
		updated = replace(self.get(pose_id), reference=skeleton)
		self._poses[pose_id] = updated
		return updated
