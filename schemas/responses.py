"""Pydantic response models for API docs (routes build them from core results)."""
from typing import Dict, List, Optional

from pydantic import BaseModel


class ComparisonOut(BaseModel):
	overall: float
	matched: bool
	keypoint_scores: Dict[str, float]
	angle_scores: Dict[str, float]


class SuggestionOut(BaseModel):
	keypoint: str
	label: str
	score: float
	severity: str
	hint: str
	text: str


class CompareResponse(BaseModel):
	"""Response from POST /api/compare."""

	pose_id: Optional[str] = None
	comparison: ComparisonOut
	suggestions: List[SuggestionOut]
	messages: List[str]


class HoldUpdateOut(BaseModel):
	transition: str
	pose_index: int
	accuracy: float
	is_holding: bool
	hold_percentage: float
	remaining_seconds: float
	next_pose_index: Optional[int] = None
	messages: List[str] = []


class FrameResponse(BaseModel):
	"""Response from POST /training/frame."""

	pose_index: int
	pose_id: str
	comparison: ComparisonOut
	hold: HoldUpdateOut
	suggestions: List[SuggestionOut]
	messages: List[str]


class PoseOut(BaseModel):
	pose_id: str
	name: str
	sanskrit_name: str
	display_name: str
	difficulty: int
	category: str
	description: str
	instructions: List[str]
	has_reference: bool
