"""Training session routes. Routes: /training/start, /training/stop, /training/status, /training/frame, /training/pose, /training/next."""
import logging
import time
from dataclasses import replace
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from app_state import AppState
from deps import get_state, require_training
from posetrainer.config import PoseSlotConfig
from posetrainer.hold_tracker import HoldUpdate
from posetrainer.training import TrainingSession
from schemas.requests import SelectPosePayload, SkeletonPayload, TrainingStartPayload
from schemas.responses import FrameResponse

router = APIRouter(tags=["training"])
logger = logging.getLogger(__name__)


def hold_to_dict(hold: HoldUpdate) -> Dict[str, Any]:
	return {
		"transition": hold.transition.value,
		"pose_index": hold.pose_index,
		"accuracy": hold.accuracy,
		"is_holding": hold.is_holding,
		"hold_percentage": hold.hold_percentage,
		"remaining_seconds": hold.remaining_seconds,
		"next_pose_index": hold.next_pose_index,
		"messages": list(hold.messages),
	}


@router.post("/training/start")
async def training_start(payload: TrainingStartPayload, state: AppState = Depends(get_state)):
	"""Start a training session. Replies with the existing one if already running."""
	async with state.session_lock:
		if state.training is not None:
			return {"detail": "Session already running", "session_id": state.training.session_id}
		sid = (payload.session_id or "").strip() or time.strftime("%Y%m%d_%H%M%S")

		if payload.poses:
			unknown = [p.pose_id for p in payload.poses if p.pose_id not in state.library]
			if unknown:
				raise HTTPException(status_code=404, detail=f"Unknown pose ids: {unknown}")
			slots = [PoseSlotConfig(pose_id=p.pose_id, active=p.active) for p in payload.poses]
		else:
			slots = list(state.cfg.poses)

		overrides: Dict[str, Any] = {}
		if payload.detection_threshold is not None:
			overrides["detection_threshold"] = float(payload.detection_threshold)
		if payload.hold_time_seconds is not None:
			overrides["hold_time_seconds"] = float(payload.hold_time_seconds)
		if payload.auto_pose_progression is not None:
			overrides["auto_pose_progression"] = bool(payload.auto_pose_progression)
		training_cfg = replace(state.cfg.training, **overrides)

		state.training = TrainingSession(slots, training=training_cfg, library=state.library, session_id=sid)
		logger.info("[Training] Session %s started with %d slot(s)", sid, len(slots))
		return {"detail": "Session started", "session_id": sid, "status": state.training.status()}


@router.post("/training/stop")
async def training_stop(state: AppState = Depends(get_state)):
	"""Stop the active session and return its statistics."""
	async with state.session_lock:
		if state.training is None:
			return {"detail": "No active session"}
		session = state.training
		state.training = None
		logger.info("[Training] Session %s stopped after %d frame(s)", session.session_id, session.stats.frames)
		return {"detail": "Session stopped", "session_id": session.session_id, "statistics": session.statistics()}


@router.get("/training/status")
async def training_status(state: AppState = Depends(get_state)):
	session = state.training
	if session is None:
		return {"session_id": None}
	return {**session.status(), "statistics": session.statistics()}


@router.post("/training/frame", response_model=FrameResponse)
async def training_frame(payload: SkeletonPayload, state: AppState = Depends(get_state)):
	"""Process one detected skeleton for the current pose; publishes hold events on /ws."""
	async with state.session_lock:
		session = require_training(state)
		res = session.process_frame(payload.to_skeleton(source="frame"))
	events = res.events()
	if events and state.manager is not None:
		await state.manager.broadcast_events(events)
	return {
		"pose_index": res.pose_index,
		"pose_id": res.pose_id,
		"comparison": res.comparison.to_dict(),
		"hold": hold_to_dict(res.hold),
		"suggestions": [s.to_dict() for s in res.suggestions],
		"messages": res.messages,
	}


@router.post("/training/pose")
async def training_select_pose(payload: SelectPosePayload, state: AppState = Depends(get_state)):
	"""Select a slot. Inactive or out-of-range slots are a no-op (changed=false)."""
	async with state.session_lock:
		session = require_training(state)
		changed = session.select_pose(payload.index)
		out = {"changed": changed, "status": session.status()}
		if not changed:
			out["detail"] = f"Pose slot {payload.index} is not selectable"
		return out


@router.post("/training/next")
async def training_next_pose(state: AppState = Depends(get_state)):
	"""Advance to the next active slot; a no-op when no other slot is active."""
	async with state.session_lock:
		session = require_training(state)
		nxt = session.next_pose()
		out = {"changed": nxt is not None, "status": session.status()}
		if nxt is None:
			out["detail"] = "No active poses available to move to next"
		return out
