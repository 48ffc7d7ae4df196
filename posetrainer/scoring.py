"""
Skeleton similarity scoring.

Pure functions comparing a reference skeleton with a detected one:

  - Aggregate score: weighted per-keypoint positional similarity (distance
    scale AGGREGATE_MAX_DISTANCE, scaled by detected confidence) plus
    per-limb joint-angle similarity weighted by ANGLE_WEIGHT.
  - Diagnostics: an independent, stricter per-keypoint percentage (distance
    scale DIAGNOSTIC_MAX_DISTANCE) used for feedback and suggestions.

The two distance scales are independent: changing one must not move the other.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from posetrainer.pose.pose_metrics import angle_similarity, joint_angle_deg
from posetrainer.pose.types import Keypoint, Skeleton


# Anatomical importance of each keypoint in the aggregate score.
KEYPOINT_WEIGHTS: Dict[str, float] = {
	"nose": 0.5,
	"leftShoulder": 1.0,
	"rightShoulder": 1.0,
	"leftElbow": 1.0,
	"rightElbow": 1.0,
	"leftWrist": 0.8,
	"rightWrist": 0.8,
	"leftHip": 1.2,
	"rightHip": 1.2,
	"leftKnee": 1.0,
	"rightKnee": 1.0,
	"leftAnkle": 0.8,
	"rightAnkle": 0.8,
}
DEFAULT_KEYPOINT_WEIGHT: float = 1.0

# (name, proximal, middle, distal)
JOINT_ANGLE_TRIPLES: List[Tuple[str, str, str, str]] = [
	("rightArmAngle", "rightShoulder", "rightElbow", "rightWrist"),
	("leftArmAngle", "leftShoulder", "leftElbow", "leftWrist"),
	("rightLegAngle", "rightHip", "rightKnee", "rightAnkle"),
	("leftLegAngle", "leftHip", "leftKnee", "leftAnkle"),
]

# Normalized distance at which a keypoint stops contributing to the aggregate.
AGGREGATE_MAX_DISTANCE: float = 0.3
# Normalized distance at which a keypoint's diagnostic percentage hits 0.
DIAGNOSTIC_MAX_DISTANCE: float = 0.2
# One limb angle counts 1.5x an average keypoint.
ANGLE_WEIGHT: float = 1.5


@dataclass(frozen=True)
class ComparisonResult:
	"""Outcome of one reference/detected comparison."""

	overall: float  # 0..100
	keypoint_scores: Dict[str, float] = field(default_factory=dict)  # 0..100
	angle_scores: Dict[str, float] = field(default_factory=dict)  # 0..1
	matched: bool = False

	def to_dict(self) -> Dict[str, Any]:
		return {
			"overall": self.overall,
			"matched": self.matched,
			"keypoint_scores": dict(self.keypoint_scores),
			"angle_scores": dict(self.angle_scores),
		}


def _distance(a: Keypoint, b: Keypoint) -> float:
	return math.hypot(float(a.x) - float(b.x), float(a.y) - float(b.y))


def position_similarity(reference: Keypoint, detected: Keypoint, max_distance: float) -> float:
	"""
	Distance-based similarity in [0..1], confidence not applied.
	"""
	return max(0.0, 1.0 - _distance(reference, detected) / float(max_distance))


def joint_angle_scores(reference: Skeleton, detected: Skeleton) -> Dict[str, float]:
	"""
	Angle similarity (0..1) for each limb whose three keypoints exist in both
	skeletons and form non-degenerate vectors in both.
	"""
	scores: Dict[str, float] = {}
	for angle_name, p1, p2, p3 in JOINT_ANGLE_TRIPLES:
		names = (p1, p2, p3)
		if not all(n in reference and n in detected for n in names):
			continue
		ref_angle = joint_angle_deg(reference.keypoints[p1], reference.keypoints[p2], reference.keypoints[p3])
		det_angle = joint_angle_deg(detected.keypoints[p1], detected.keypoints[p2], detected.keypoints[p3])
		if ref_angle is None or det_angle is None:
			continue
		scores[angle_name] = angle_similarity(ref_angle, det_angle)
	return scores


def keypoint_match_percentages(reference: Skeleton, detected: Skeleton) -> Dict[str, float]:
	"""
	Diagnostic per-keypoint match percentage (0..100) for every reference
	keypoint; keypoints missing from `detected` score 0.
	"""
	out: Dict[str, float] = {}
	for name, ref_kp in reference.keypoints.items():
		det_kp = detected.get(name)
		if det_kp is None:
			out[name] = 0.0
			continue
		pct = position_similarity(ref_kp, det_kp, DIAGNOSTIC_MAX_DISTANCE) * 100.0
		out[name] = pct * float(det_kp.confidence)
	return out


def _shares_keypoints(reference: Skeleton, detected: Skeleton) -> bool:
	return any(name in detected for name in reference)


def compare(reference: Skeleton, detected: Skeleton, detection_threshold: float = 50.0) -> ComparisonResult:
	"""
	Compare `detected` against `reference`.

	Never raises for sparse or noisy input: empty skeletons, or skeletons with
	no keypoint in common, yield an overall score of 0 and empty diagnostics.
	"""
	if reference is None or detected is None or reference.is_empty or detected.is_empty:
		return ComparisonResult(overall=0.0)
	if not _shares_keypoints(reference, detected):
		return ComparisonResult(overall=0.0)

	total_score = 0.0
	max_possible = 0.0

	# Step 1: weighted positional agreement; a missing keypoint still costs its weight.
	for name, ref_kp in reference.keypoints.items():
		weight = KEYPOINT_WEIGHTS.get(name, DEFAULT_KEYPOINT_WEIGHT)
		det_kp = detected.get(name)
		if det_kp is not None:
			pos = position_similarity(ref_kp, det_kp, AGGREGATE_MAX_DISTANCE)
			total_score += pos * float(det_kp.confidence) * weight
		max_possible += weight

	# Step 2: limb angles.
	angles = joint_angle_scores(reference, detected)
	for sim in angles.values():
		total_score += sim * ANGLE_WEIGHT
		max_possible += ANGLE_WEIGHT

	overall = (total_score / max_possible) * 100.0 if max_possible > 0 else 0.0

	return ComparisonResult(
		overall=overall,
		keypoint_scores=keypoint_match_percentages(reference, detected),
		angle_scores=angles,
		matched=overall >= float(detection_threshold),
	)


def best_match(
	candidates: Dict[str, Skeleton],
	detected: Skeleton,
	detection_threshold: float = 50.0,
) -> Optional[Tuple[str, ComparisonResult]]:
	"""
	Score `detected` against several references and return the best one that
	reaches the threshold, or None.
	"""
	best: Optional[Tuple[str, ComparisonResult]] = None
	for key, ref in candidates.items():
		res = compare(ref, detected, detection_threshold)
		if not res.matched:
			continue
		if best is None or res.overall > best[1].overall:
			best = (key, res)
	return best
