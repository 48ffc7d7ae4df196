import argparse
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app_state import AppState
from posetrainer import __version__
from posetrainer.config import AppConfig, get_config, set_config_path
from posetrainer.pose_library import PoseLibrary
from routers import poses, training, ws
from routers.ws import ConnectionManager

logger = logging.getLogger("posetrainer.server")


def _configure_logging(level: str) -> None:
	logging.basicConfig(
		level=getattr(logging, level.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)


@asynccontextmanager
async def lifespan(app: FastAPI):
	cfg: AppConfig = app.state.cfg
	_configure_logging(cfg.logging.level)
	state = AppState(cfg, library=PoseLibrary())
	state.manager = ConnectionManager()
	app.state.state = state
	logger.info("[Server] Loaded %d poses, %d training slot(s)", len(state.library.list()), len(cfg.poses))
	try:
		yield
	finally:
		if state.training is not None:
			logger.info("[Server] Dropping active session %s on shutdown", state.training.session_id)
			state.training = None


async def health(request: Request):
	state: AppState = request.app.state.state
	return {
		"status": "ok",
		"version": __version__,
		"training": state.training is not None,
		"ws_clients": state.manager.client_count if state.manager is not None else 0,
	}


def create_app(cfg: Optional[AppConfig] = None) -> FastAPI:
	"""
	Build the app from one config snapshot; CORS, lifespan state and routes
	all read the same AppConfig (defaults to get_config()).
	"""
	cfg = cfg if cfg is not None else get_config()
	app = FastAPI(title="posetrainer", version=__version__, lifespan=lifespan)
	app.state.cfg = cfg
	app.add_middleware(
		CORSMiddleware,
		allow_origins=list(cfg.server.cors_origins),
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
	)
	app.include_router(poses.router)
	app.include_router(training.router)
	app.include_router(ws.router)
	app.add_api_route("/health", health, methods=["GET"])
	return app


app = create_app()


def main(argv: Optional[list] = None) -> None:
	parser = argparse.ArgumentParser(description="Pose training server")
	parser.add_argument("--config", help="Path to config.json (overrides POSETRAINER_CONFIG)")
	parser.add_argument("--host", help="Bind address")
	parser.add_argument("--port", type=int, help="Bind port")
	parser.add_argument("--debug", action="store_true", help="Verbose logging")
	args = parser.parse_args(argv)

	if args.config:
		set_config_path(args.config)
	cfg = get_config()
	level = "DEBUG" if args.debug else cfg.logging.level
	_configure_logging(level)
	uvicorn.run(
		create_app(cfg),
		host=args.host or cfg.server.host,
		port=args.port or cfg.server.port,
		log_level=level.lower(),
	)


if __name__ == "__main__":
	main()
