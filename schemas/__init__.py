"""Pydantic request/response models for API validation and docs."""
from schemas.requests import (
	ComparePayload,
	KeypointIn,
	PoseSlotIn,
	RecognizePayload,
	SelectPosePayload,
	SkeletonPayload,
	TrainingStartPayload,
)
from schemas.responses import (
	CompareResponse,
	ComparisonOut,
	FrameResponse,
	HoldUpdateOut,
	PoseOut,
	SuggestionOut,
)

__all__ = [
	"ComparePayload",
	"KeypointIn",
	"PoseSlotIn",
	"RecognizePayload",
	"SelectPosePayload",
	"SkeletonPayload",
	"TrainingStartPayload",
	"CompareResponse",
	"ComparisonOut",
	"FrameResponse",
	"HoldUpdateOut",
	"PoseOut",
	"SuggestionOut",
]
