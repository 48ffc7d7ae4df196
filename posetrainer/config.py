from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "POSETRAINER_CONFIG"


@dataclass(frozen=True)
class TrainingConfig:
	# Minimum match percentage (0..100) that counts as "in the pose".
	detection_threshold: float = 50.0
	# Seconds a pose must be held continuously (recommended 1..10).
	hold_time_seconds: float = 3.0
	# Move to the next active slot automatically after a completed hold.
	auto_pose_progression: bool = True
	# Cap on per-keypoint corrections returned per frame.
	max_suggestions: int = 3


@dataclass(frozen=True)
class PoseSlotConfig:
	pose_id: str
	active: bool = True


def _default_slots() -> Tuple[PoseSlotConfig, ...]:
	return (
		PoseSlotConfig("mountain", True),
		PoseSlotConfig("warrior2", True),
		PoseSlotConfig("tree", True),
		PoseSlotConfig("downdog", False),
		PoseSlotConfig("triangle", False),
		PoseSlotConfig("chair", False),
	)


@dataclass(frozen=True)
class DetectorConfig:
	# MediaPipe Pose settings; only used when the optional provider is created.
	model_complexity: int = 1
	min_detection_confidence: float = 0.5
	min_tracking_confidence: float = 0.5
	min_visibility: float = 0.0


@dataclass(frozen=True)
class ServerConfig:
	host: str = "127.0.0.1"
	port: int = 8000
	cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class LoggingConfig:
	level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
	training: TrainingConfig = field(default_factory=TrainingConfig)
	poses: Tuple[PoseSlotConfig, ...] = field(default_factory=_default_slots)
	detector: DetectorConfig = field(default_factory=DetectorConfig)
	server: ServerConfig = field(default_factory=ServerConfig)
	logging: LoggingConfig = field(default_factory=LoggingConfig)


_CONFIG_PATH: Optional[Path] = None
_CONFIG_CACHE: Optional[AppConfig] = None


def _repo_root() -> Path:
	# posetrainer/config.py -> repo root is one level up.
	return Path(__file__).resolve().parents[1]


def get_default_config_path() -> Path:
	env = os.getenv(CONFIG_ENV_VAR)
	if env:
		return Path(env).expanduser().resolve()
	return _repo_root() / "config.json"


def set_config_path(path: str | Path) -> None:
	"""
	Override the config path (must be called before first get_config()).
	Intended for tooling and tests; the server normally uses the default path.
	"""
	global _CONFIG_PATH
	global _CONFIG_CACHE
	_CONFIG_PATH = Path(path).expanduser().resolve()
	_CONFIG_CACHE = None


def _deep_get(d: Dict[str, Any], keys: list[str], default: Any = None) -> Any:
	cur: Any = d
	for k in keys:
		if not isinstance(cur, dict):
			return default
		cur = cur.get(k)
	return cur if cur is not None else default


def _as_int(v: Any, default: int) -> int:
	try:
		return int(v)
	except (TypeError, ValueError):
		return int(default)


def _as_bool(v: Any, default: bool) -> bool:
	if isinstance(v, bool):
		return v
	if isinstance(v, (int, float)):
		return bool(v)
	if isinstance(v, str):
		return v.strip().lower() in ("1", "true", "yes", "on")
	return bool(default)


def _as_str(v: Any, default: str = "") -> str:
	return str(v) if v is not None else str(default)


def _as_float(v: Any, default: float) -> float:
	try:
		return float(v)
	except (TypeError, ValueError):
		return float(default)


def _parse_slots(obj: Any) -> Tuple[PoseSlotConfig, ...]:
	if not isinstance(obj, list) or not obj:
		return _default_slots()
	out = []
	for item in obj:
		if isinstance(item, str) and item.strip():
			out.append(PoseSlotConfig(pose_id=item.strip(), active=True))
			continue
		if not isinstance(item, dict):
			continue
		pose_id = _as_str(item.get("pose_id"), "").strip()
		if not pose_id:
			continue
		out.append(PoseSlotConfig(pose_id=pose_id, active=_as_bool(item.get("active"), True)))
	return tuple(out) if out else _default_slots()


def _parse_training(raw: Dict[str, Any]) -> TrainingConfig:
	d = TrainingConfig()
	threshold = _as_float(_deep_get(raw, ["training", "detection_threshold"], d.detection_threshold), d.detection_threshold)
	if not math.isfinite(threshold) or not 0.0 <= threshold <= 100.0:
		logger.warning("[Config] detection_threshold %r out of range 0..100; using %s", threshold, d.detection_threshold)
		threshold = d.detection_threshold
	hold = _as_float(_deep_get(raw, ["training", "hold_time_seconds"], d.hold_time_seconds), d.hold_time_seconds)
	if not math.isfinite(hold) or hold <= 0.0:
		logger.warning("[Config] hold_time_seconds %r must be a positive finite number; using %s", hold, d.hold_time_seconds)
		hold = d.hold_time_seconds
	max_sugg = _as_int(_deep_get(raw, ["training", "max_suggestions"], d.max_suggestions), d.max_suggestions)
	return TrainingConfig(
		detection_threshold=threshold,
		hold_time_seconds=hold,
		auto_pose_progression=_as_bool(
			_deep_get(raw, ["training", "auto_pose_progression"], d.auto_pose_progression), d.auto_pose_progression
		),
		max_suggestions=max_sugg if max_sugg >= 0 else d.max_suggestions,
	)


def load_config(path: Optional[str | Path] = None) -> AppConfig:
	p = Path(path).expanduser().resolve() if path else (_CONFIG_PATH or get_default_config_path())
	if not p.exists():
		# Defaults-only config; app can still run.
		return AppConfig()
	try:
		raw = json.loads(p.read_text(encoding="utf-8"))
	except (OSError, ValueError) as e:
		# If config is malformed, fail safe to defaults (but keep app running).
		logger.warning("[Config] Could not read %s (%r); using defaults", p, e)
		return AppConfig()

	if not isinstance(raw, dict):
		return AppConfig()

	dd = DetectorConfig()
	complexity = _as_int(_deep_get(raw, ["detector", "model_complexity"], dd.model_complexity), dd.model_complexity)
	det_conf = _as_float(
		_deep_get(raw, ["detector", "min_detection_confidence"], dd.min_detection_confidence), dd.min_detection_confidence
	)
	trk_conf = _as_float(
		_deep_get(raw, ["detector", "min_tracking_confidence"], dd.min_tracking_confidence), dd.min_tracking_confidence
	)
	min_vis = _as_float(_deep_get(raw, ["detector", "min_visibility"], dd.min_visibility), dd.min_visibility)

	host = _as_str(_deep_get(raw, ["server", "host"], "127.0.0.1"), "127.0.0.1").strip() or "127.0.0.1"
	port = _as_int(_deep_get(raw, ["server", "port"], 8000), 8000)
	origins = _deep_get(raw, ["server", "cors_origins"], ["*"])
	if not isinstance(origins, list):
		origins = ["*"]

	level = _as_str(_deep_get(raw, ["logging", "level"], "INFO"), "INFO").strip().upper() or "INFO"

	return AppConfig(
		training=_parse_training(raw),
		poses=_parse_slots(raw.get("poses")),
		detector=DetectorConfig(
			model_complexity=complexity if complexity in (0, 1, 2) else dd.model_complexity,
			min_detection_confidence=det_conf,
			min_tracking_confidence=trk_conf,
			min_visibility=min_vis,
		),
		server=ServerConfig(host=host, port=port if port > 0 else 8000, cors_origins=[str(o) for o in origins]),
		logging=LoggingConfig(level=level),
	)


def get_config() -> AppConfig:
	global _CONFIG_CACHE
	if _CONFIG_CACHE is None:
		_CONFIG_CACHE = load_config()
	return _CONFIG_CACHE
