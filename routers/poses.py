"""Pose catalog and stateless comparison. Routes: /api/poses*, /api/compare, /api/recognize."""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from app_state import AppState
from deps import get_state
from posetrainer.pose_library import PoseDefinition
from posetrainer.scoring import best_match, compare
from posetrainer.suggestions import generate_suggestions, messages_for
from schemas.requests import ComparePayload, RecognizePayload
from schemas.responses import CompareResponse, PoseOut

router = APIRouter(tags=["poses"])


def pose_to_dict(pose: PoseDefinition) -> Dict[str, Any]:
	return {
		"pose_id": pose.pose_id,
		"name": pose.name,
		"sanskrit_name": pose.sanskrit_name,
		"display_name": pose.display_name,
		"difficulty": pose.difficulty,
		"category": pose.category,
		"description": pose.description,
		"instructions": list(pose.instructions),
		"has_reference": pose.reference is not None,
	}


@router.get("/api/poses")
async def list_poses(state: AppState = Depends(get_state)):
	"""List the pose catalog."""
	return {"poses": [pose_to_dict(p) for p in state.library.list()]}


@router.get("/api/poses/{pose_id}", response_model=PoseOut)
async def get_pose(pose_id: str, state: AppState = Depends(get_state)):
	if pose_id not in state.library:
		raise HTTPException(status_code=404, detail=f"Pose {pose_id!r} not found")
	return pose_to_dict(state.library.get(pose_id))


@router.get("/api/poses/{pose_id}/reference")
async def get_pose_reference(pose_id: str, state: AppState = Depends(get_state)):
	"""Reference skeleton for a pose (generic torso when none is stored)."""
	if pose_id not in state.library:
		raise HTTPException(status_code=404, detail=f"Pose {pose_id!r} not found")
	pose = state.library.get(pose_id)
	return {
		"pose_id": pose_id,
		"generic": pose.reference is None,
		"keypoints": state.library.reference_for(pose_id).to_dict(),
	}


@router.post("/api/compare", response_model=CompareResponse)
async def compare_pose(payload: ComparePayload, state: AppState = Depends(get_state)):
	"""Score a detected skeleton against an inline reference or a catalog pose."""
	training_cfg = state.cfg.training
	pose_id = payload.pose_id
	if payload.reference is not None:
		reference = payload.reference.to_skeleton(source="reference")
	elif pose_id is not None:
		if pose_id not in state.library:
			raise HTTPException(status_code=404, detail=f"Pose {pose_id!r} not found")
		reference = state.library.reference_for(pose_id)
	else:
		raise HTTPException(status_code=422, detail="Provide either 'reference' or 'pose_id'")

	threshold = payload.detection_threshold if payload.detection_threshold is not None else training_cfg.detection_threshold
	max_sugg = payload.max_suggestions if payload.max_suggestions is not None else training_cfg.max_suggestions
	result = compare(reference, payload.detected.to_skeleton(), threshold)
	suggestions = generate_suggestions(result.keypoint_scores, pose_id, state.library, max_sugg)
	return {
		"pose_id": pose_id,
		"comparison": result.to_dict(),
		"suggestions": [s.to_dict() for s in suggestions],
		"messages": messages_for(result.keypoint_scores, suggestions),
	}


@router.post("/api/recognize")
async def recognize_pose(payload: RecognizePayload, state: AppState = Depends(get_state)):
	"""Best matching catalog pose at or above the threshold, if any."""
	threshold = (
		payload.detection_threshold if payload.detection_threshold is not None else state.cfg.training.detection_threshold
	)
	if payload.pose_ids:
		missing = [p for p in payload.pose_ids if p not in state.library]
		if missing:
			raise HTTPException(status_code=404, detail=f"Unknown pose ids: {missing}")
		candidates = {p: state.library.reference_for(p) for p in payload.pose_ids}
	else:
		candidates = {p.pose_id: p.reference for p in state.library.list() if p.reference is not None}
	found = best_match(candidates, payload.detected.to_skeleton(), threshold)
	if found is None:
		return {"pose_id": None, "comparison": None}
	pose_id, result = found
	return {"pose_id": pose_id, "comparison": result.to_dict()}
