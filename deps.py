"""
FastAPI dependencies. Use Depends(get_state) in route handlers to receive AppState.
"""
from fastapi import HTTPException, Request

from app_state import AppState
from posetrainer.training import TrainingSession


def get_state(request: Request) -> AppState:
	"""Return the app state instance attached in lifespan."""
	return request.app.state.state


def require_training(state: AppState) -> TrainingSession:
	"""Active training session or 409."""
	if state.training is None:
		raise HTTPException(status_code=409, detail="No active training session")
	return state.training
