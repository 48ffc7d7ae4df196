from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from posetrainer.pose.types import Skeleton


class PoseProvider(ABC):
	"""
	Keypoint detector adapter interface.

	Implementations take an RGB image (H,W,3 uint8) and return a Skeleton with
	normalized coordinates. Inference itself is the provider's business; the
	scorer only ever sees the Skeleton.
	"""

	@abstractmethod
	def name(self) -> str: ...

	@abstractmethod
	def infer_rgb(self, rgb, t_host: Optional[float] = None) -> Skeleton: ...

	@abstractmethod
	def close(self) -> None: ...
