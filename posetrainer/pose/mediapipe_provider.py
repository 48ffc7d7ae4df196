from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from posetrainer.pose.base import PoseProvider
from posetrainer.pose.types import Keypoint, Skeleton


# BlazePose landmark indices for the trainer's keypoint vocabulary.
BLAZEPOSE_INDEX: Dict[str, int] = {
	"nose": 0,
	"leftShoulder": 11,
	"rightShoulder": 12,
	"leftElbow": 13,
	"rightElbow": 14,
	"leftWrist": 15,
	"rightWrist": 16,
	"leftHip": 23,
	"rightHip": 24,
	"leftKnee": 25,
	"rightKnee": 26,
	"leftAnkle": 27,
	"rightAnkle": 28,
}


def skeleton_from_landmarks(
	landmarks: Sequence[Any],
	source: str = "mediapipe_pose",
	t_host: Optional[float] = None,
	min_visibility: float = 0.0,
) -> Skeleton:
	"""
	Convert a MediaPipe landmark list into a Skeleton.

	Notes:
	- MediaPipe coordinates are already normalized to the frame; they are kept
	  as-is.
	- `visibility` is used as confidence (best-effort, missing -> 0).
	- Landmarks below `min_visibility` are left out of the skeleton.
	"""
	kps = {}
	for name, idx in BLAZEPOSE_INDEX.items():
		if idx >= len(landmarks):
			continue
		p = landmarks[idx]
		try:
			vis = float(getattr(p, "visibility", 0.0) or 0.0)
			if vis < min_visibility:
				continue
			kps[name] = Keypoint(
				name=name,
				x=float(p.x),
				y=float(p.y),
				confidence=max(0.0, min(1.0, vis)),
			)
		except (AttributeError, TypeError, ValueError):
			continue
	return Skeleton(keypoints=kps, source=source, t_host=t_host)


class MediaPipePoseProvider(PoseProvider):
	"""
	MediaPipe Pose provider that outputs the trainer's 13-keypoint skeleton.
	"""

	def __init__(
		self,
		model_complexity: int = 1,
		min_detection_confidence: float = 0.5,
		min_tracking_confidence: float = 0.5,
		min_visibility: float = 0.0,
	) -> None:
		try:
			import mediapipe as mp  # type: ignore
		except ImportError as e:
			raise RuntimeError(
				"MediaPipe is not installed. Install detector deps with: pip install -e .[mediapipe]"
			) from e

		self._mp = mp
		self._min_visibility = float(min_visibility)
		self._pose = mp.solutions.pose.Pose(
			static_image_mode=False,
			model_complexity=int(model_complexity),
			enable_segmentation=False,
			smooth_landmarks=True,
			min_detection_confidence=float(min_detection_confidence),
			min_tracking_confidence=float(min_tracking_confidence),
		)

	@classmethod
	def from_config(cls, cfg) -> "MediaPipePoseProvider":
		"""Build from a posetrainer.config.DetectorConfig."""
		return cls(
			model_complexity=cfg.model_complexity,
			min_detection_confidence=cfg.min_detection_confidence,
			min_tracking_confidence=cfg.min_tracking_confidence,
			min_visibility=cfg.min_visibility,
		)

	def name(self) -> str:
		return "mediapipe_pose"

	def infer_rgb(self, rgb, t_host: Optional[float] = None) -> Skeleton:
		res = self._pose.process(rgb)
		if not res or not getattr(res, "pose_landmarks", None):
			return Skeleton(source=self.name(), t_host=t_host)
		return skeleton_from_landmarks(
			res.pose_landmarks.landmark,
			source=self.name(),
			t_host=t_host,
			min_visibility=self._min_visibility,
		)

	def close(self) -> None:
		if self._pose:
			self._pose.close()
			self._pose = None
