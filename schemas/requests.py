"""Pydantic request body models for the comparison and training endpoints."""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from posetrainer.pose.types import Skeleton


class KeypointIn(BaseModel):
	"""One detector keypoint in normalized frame coordinates."""

	x: float = Field(..., description="Horizontal position, 0..1 of frame width")
	y: float = Field(..., description="Vertical position, 0..1 of frame height")
	confidence: float = Field(1.0, description="Detector confidence; clamped to 0..1")


class SkeletonPayload(BaseModel):
	"""A skeleton keyed by keypoint name (nose, leftShoulder, ...). Unknown names are ignored."""

	keypoints: Dict[str, KeypointIn] = Field(default_factory=dict)
	t_host: Optional[float] = Field(None, description="Host timestamp (epoch seconds), informational")

	def to_skeleton(self, source: str = "api") -> Skeleton:
		return Skeleton.from_mapping(
			{name: kp.model_dump() for name, kp in self.keypoints.items()},
			source=source,
			t_host=self.t_host,
		)


class ComparePayload(BaseModel):
	"""Request body for POST /api/compare. Reference given inline or by pose_id."""

	detected: SkeletonPayload
	pose_id: Optional[str] = Field(None, description="Compare against this pose's reference skeleton")
	reference: Optional[SkeletonPayload] = Field(None, description="Inline reference; wins over pose_id")
	detection_threshold: Optional[float] = Field(None, ge=0, le=100)
	max_suggestions: Optional[int] = Field(None, ge=0, le=13)


class RecognizePayload(BaseModel):
	"""Request body for POST /api/recognize. Best matching pose among candidates."""

	detected: SkeletonPayload
	pose_ids: Optional[List[str]] = Field(None, description="Candidates; defaults to every pose with a reference")
	detection_threshold: Optional[float] = Field(None, ge=0, le=100)


class PoseSlotIn(BaseModel):
	pose_id: str
	active: bool = True


class TrainingStartPayload(BaseModel):
	"""Request body for POST /training/start. Omitted fields come from config."""

	session_id: Optional[str] = Field(None, description="Session identifier; generated if empty")
	poses: Optional[List[PoseSlotIn]] = Field(None, min_length=1, description="Ordered pose slots")
	detection_threshold: Optional[float] = Field(None, ge=0, le=100)
	hold_time_seconds: Optional[float] = Field(None, gt=0, description="Seconds a pose must be held")
	auto_pose_progression: Optional[bool] = None


class SelectPosePayload(BaseModel):
	"""Request body for POST /training/pose."""

	index: int = Field(..., description="Slot index (0-based)")
