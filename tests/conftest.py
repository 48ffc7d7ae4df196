import random
from typing import Dict, Optional, Tuple

import pytest

from posetrainer.pose.types import Keypoint, Skeleton


# Upright figure with straight limbs, arms held out to the sides.
STANDING_POINTS: Dict[str, Tuple[float, float]] = {
	"nose": (0.5, 0.2),
	"leftShoulder": (0.4, 0.3),
	"rightShoulder": (0.6, 0.3),
	"leftElbow": (0.3, 0.35),
	"rightElbow": (0.7, 0.35),
	"leftWrist": (0.2, 0.4),
	"rightWrist": (0.8, 0.4),
	"leftHip": (0.45, 0.6),
	"rightHip": (0.55, 0.6),
	"leftKnee": (0.45, 0.75),
	"rightKnee": (0.55, 0.75),
	"leftAnkle": (0.45, 0.9),
	"rightAnkle": (0.55, 0.9),
}


def make_skeleton(
	points: Optional[Dict[str, Tuple[float, float]]] = None,
	confidence: float = 1.0,
	deviation: float = 0.0,
	seed: int = 0,
	dx: float = 0.0,
	dy: float = 0.0,
) -> Skeleton:
	"""
	Synthetic skeleton: `points` shifted by (dx, dy), plus uniform jitter of
	up to `deviation` per axis from a seeded generator.
	"""
	rng = random.Random(seed)
	kps = {}
	for name, (x, y) in (points or STANDING_POINTS).items():
		jx = rng.uniform(-deviation, deviation) if deviation else 0.0
		jy = rng.uniform(-deviation, deviation) if deviation else 0.0
		kps[name] = Keypoint(name=name, x=x + dx + jx, y=y + dy + jy, confidence=confidence)
	return Skeleton(keypoints=kps, source="synthetic")


class FakeClock:
	def __init__(self, t: float = 0.0) -> None:
		self.t = float(t)

	def __call__(self) -> float:
		return self.t

	def advance(self, dt: float) -> None:
		self.t += dt


@pytest.fixture
def standing() -> Skeleton:
	return make_skeleton()


@pytest.fixture
def clock() -> FakeClock:
	return FakeClock()
