"""
Explicit app state: single source of truth for runtime lifecycle.
Created in lifespan, attached to app.state.state; injected into routes via Depends(get_state).
"""
import asyncio
from typing import Any, Optional

from posetrainer.config import AppConfig
from posetrainer.pose_library import PoseLibrary
from posetrainer.training import TrainingSession


class AppState:
	"""
	Holds all runtime state for the app.
	Populated in server lifespan; routes receive this instance as argument.
	"""
	# Config and pose catalog
	cfg: AppConfig
	library: PoseLibrary

	# Active training session (one at a time); frames and selections are
	# serialized through session_lock.
	training: Optional[TrainingSession] = None
	session_lock: asyncio.Lock

	# WebSocket event fan-out (routers.ws.ConnectionManager)
	manager: Any = None

	def __init__(self, cfg: AppConfig, library: Optional[PoseLibrary] = None) -> None:
		self.cfg = cfg
		self.library = library if library is not None else PoseLibrary()
		self.training = None
		self.session_lock = asyncio.Lock()
