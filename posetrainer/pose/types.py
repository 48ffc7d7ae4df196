from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


KEYPOINT_NAMES: Tuple[str, ...] = (
	"nose",
	"leftShoulder",
	"rightShoulder",
	"leftElbow",
	"rightElbow",
	"leftWrist",
	"rightWrist",
	"leftHip",
	"rightHip",
	"leftKnee",
	"rightKnee",
	"leftAnkle",
	"rightAnkle",
)


@dataclass(frozen=True)
class Keypoint:
	"""
	A single 2D keypoint in normalized frame coordinates.
	"""

	name: str
	x: float  # [0..1] of frame width
	y: float  # [0..1] of frame height
	confidence: float = 1.0  # [0..1]

	def to_dict(self) -> Dict[str, float]:
		return {"x": self.x, "y": self.y, "confidence": self.confidence}


def _clamp01(v: float) -> float:
	return max(0.0, min(1.0, v))


def _coerce_keypoint(name: str, raw: Any) -> Optional[Keypoint]:
	"""
	Best-effort conversion of a detector value into a Keypoint.

	Accepts a Keypoint, a mapping with x/y and confidence (or score/visibility),
	or an (x, y[, confidence]) sequence. Returns None for anything unusable.
	"""
	if isinstance(raw, Keypoint):
		x, y, conf = raw.x, raw.y, raw.confidence
	elif isinstance(raw, Mapping):
		x = raw.get("x")
		y = raw.get("y")
		conf = raw.get("confidence", raw.get("score", raw.get("visibility", 1.0)))
	elif isinstance(raw, (list, tuple)) and len(raw) >= 2:
		x, y = raw[0], raw[1]
		conf = raw[2] if len(raw) >= 3 else 1.0
	else:
		return None
	try:
		x_f = float(x)
		y_f = float(y)
		c_f = float(conf if conf is not None else 0.0)
	except (TypeError, ValueError):
		return None
	if not (math.isfinite(x_f) and math.isfinite(y_f)):
		return None
	if not math.isfinite(c_f):
		c_f = 0.0
	return Keypoint(name=name, x=x_f, y=y_f, confidence=_clamp01(c_f))


@dataclass(frozen=True)
class Skeleton:
	"""
	Immutable set of named keypoints for one detected or reference pose.

	- Keys come from KEYPOINT_NAMES; keys the detector could not resolve are
	  simply absent.
	- `source` and `t_host` are optional provenance (detector name, host
	  timestamp in seconds).
	"""

	keypoints: Mapping[str, Keypoint] = field(default_factory=dict)
	source: Optional[str] = None
	t_host: Optional[float] = None

	def __post_init__(self) -> None:
		object.__setattr__(self, "keypoints", MappingProxyType(dict(self.keypoints)))

	@classmethod
	def from_mapping(
		cls,
		data: Optional[Mapping[str, Any]],
		source: Optional[str] = None,
		t_host: Optional[float] = None,
	) -> "Skeleton":
		"""
		Build a skeleton from detector output.

		Unknown names and unusable values are dropped rather than rejected so a
		noisy frame degrades into a sparser skeleton.
		"""
		out: Dict[str, Keypoint] = {}
		for name, raw in (data or {}).items():
			if name not in KEYPOINT_NAMES:
				continue
			kp = _coerce_keypoint(name, raw)
			if kp is not None:
				out[name] = kp
		return cls(keypoints=out, source=source, t_host=t_host)

	def get(self, name: str) -> Optional[Keypoint]:
		return self.keypoints.get(name)

	def __contains__(self, name: object) -> bool:
		return name in self.keypoints

	def __len__(self) -> int:
		return len(self.keypoints)

	def __iter__(self) -> Iterator[str]:
		return iter(self.keypoints)

	@property
	def is_empty(self) -> bool:
		return not self.keypoints

	def to_dict(self) -> Dict[str, Dict[str, float]]:
		return {name: kp.to_dict() for name, kp in self.keypoints.items()}
