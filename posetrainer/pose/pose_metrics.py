from __future__ import annotations

import math
from typing import Optional

from posetrainer.pose.types import Keypoint


# Angle differences at or beyond this many degrees score zero similarity.
ANGLE_TOLERANCE_DEG: float = 45.0


def joint_angle_deg(proximal: Keypoint, middle: Keypoint, distal: Keypoint) -> Optional[float]:
	"""
	Included angle at `middle` in degrees [0..180].

	Uses v1 = proximal - middle and v2 = distal - middle,
	angle = acos(dot / (|v1| |v2|)) with the cosine clamped to [-1, 1].
	Returns None when either limb vector has zero length (coincident points),
	so callers can treat the angle as absent instead of propagating NaN.
	"""
	v1x = float(proximal.x) - float(middle.x)
	v1y = float(proximal.y) - float(middle.y)
	v2x = float(distal.x) - float(middle.x)
	v2y = float(distal.y) - float(middle.y)
	m1 = math.hypot(v1x, v1y)
	m2 = math.hypot(v2x, v2y)
	if m1 == 0.0 or m2 == 0.0:
		return None
	cos_a = (v1x * v2x + v1y * v2y) / (m1 * m2)
	cos_a = max(-1.0, min(1.0, cos_a))
	return math.degrees(math.acos(cos_a))


def angle_difference_deg(a: float, b: float) -> float:
	"""
	Absolute difference between two angles, folded so it never exceeds 180.
	"""
	diff = abs(float(a) - float(b)) % 360.0
	if diff > 180.0:
		diff = 360.0 - diff
	return diff


def angle_similarity(a: float, b: float, tolerance_deg: float = ANGLE_TOLERANCE_DEG) -> float:
	"""
	Map an angle difference to [0..1]: 0° -> 1.0, >= tolerance -> 0.0.
	"""
	return max(0.0, 1.0 - angle_difference_deg(a, b) / float(tolerance_deg))
