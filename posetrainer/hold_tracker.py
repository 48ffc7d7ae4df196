import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence


logger = logging.getLogger(__name__)


class HoldTransition(str, Enum):
	NONE = "none"
	HOLD_STARTED = "hold_started"
	HOLD_LOST = "hold_lost"
	HOLD_COMPLETED = "hold_completed"


@dataclass
class HoldSession:
	"""Mutable per-session hold record; owned by one PoseHoldTracker."""

	active_pose_mask: List[bool]
	required_hold_seconds: float = 3.0
	current_pose_index: int = 0
	is_holding: bool = False
	hold_start_time: float = 0.0


@dataclass(frozen=True)
class HoldUpdate:
	"""
	Result of feeding one accuracy value to the tracker.

	`hold_percentage` / `remaining_seconds` are the progress at evaluation
	time, so a completing update reports 100 / 0 even though the tracker is
	already back to not-holding afterwards.
	"""

	transition: HoldTransition
	pose_index: int
	accuracy: float
	is_holding: bool
	hold_percentage: float
	remaining_seconds: float
	next_pose_index: Optional[int] = None
	messages: List[str] = field(default_factory=list)

	@property
	def completed(self) -> bool:
		return self.transition is HoldTransition.HOLD_COMPLETED

	@property
	def advanced(self) -> bool:
		return self.next_pose_index is not None and self.next_pose_index != self.pose_index


class PoseHoldTracker:
	"""
	Hold/transition state machine for a sequence of pose slots.

	Per update (one comparison result):
	  - not holding, accuracy >= threshold  -> HOLD_STARTED (start time recorded)
	  - holding, accuracy < threshold       -> HOLD_LOST
	  - holding, elapsed >= required        -> HOLD_COMPLETED, then not holding;
	    with auto progression the current slot moves to the next active one
	    (cyclic, inactive slots skipped)

	Time comes from a monotonic clock; pass `clock` (or `now=` per call) to
	drive it deterministically. Not thread-safe: callers serialize updates.
	"""

	def __init__(
		self,
		active_pose_mask: Sequence[bool],
		required_hold_seconds: float = 3.0,
		detection_threshold: float = 50.0,
		auto_progression: bool = True,
		pose_names: Optional[Sequence[str]] = None,
		clock: Optional[Callable[[], float]] = None,
		logger: Optional[Callable[[str], None]] = None,
	) -> None:
		mask = [bool(a) for a in active_pose_mask]
		self.session = HoldSession(
			active_pose_mask=mask,
			required_hold_seconds=float(required_hold_seconds),
			current_pose_index=next((i for i, a in enumerate(mask) if a), 0),
		)
		self.detection_threshold = float(detection_threshold)
		self.auto_progression = bool(auto_progression)
		self.pose_names: List[str] = list(pose_names) if pose_names else [f"Pose {i + 1}" for i in range(len(mask))]
		self._clock: Callable[[], float] = clock or time.monotonic
		self.logger: Callable[[str], None] = logger or _log_info

	# ------------------------------------------------------------------ queries

	@property
	def current_pose_index(self) -> int:
		return self.session.current_pose_index

	@property
	def is_holding(self) -> bool:
		return self.session.is_holding

	@property
	def pose_count(self) -> int:
		return len(self.session.active_pose_mask)

	def pose_name(self, index: int) -> str:
		if 0 <= index < len(self.pose_names):
			return self.pose_names[index]
		return "Unknown Pose"

	def is_active(self, index: int) -> bool:
		return 0 <= index < self.pose_count and self.session.active_pose_mask[index]

	def elapsed_seconds(self, now: Optional[float] = None) -> float:
		if not self.session.is_holding:
			return 0.0
		t = self._clock() if now is None else float(now)
		return max(0.0, t - self.session.hold_start_time)

	def remaining_hold_seconds(self, now: Optional[float] = None) -> float:
		required = self.session.required_hold_seconds
		if not self.session.is_holding:
			return max(0.0, required)
		return max(0.0, required - self.elapsed_seconds(now))

	def hold_percentage(self, now: Optional[float] = None) -> float:
		if not self.session.is_holding:
			return 0.0
		required = self.session.required_hold_seconds
		if required <= 0:
			return 100.0
		return min(100.0, 100.0 * self.elapsed_seconds(now) / required)

	# ------------------------------------------------------------------ update

	def update(self, accuracy: float, now: Optional[float] = None) -> HoldUpdate:
		"""
		Feed one match percentage (0..100) for the current pose.
		"""
		t = self._clock() if now is None else float(now)
		s = self.session
		idx = s.current_pose_index
		acc = float(accuracy)
		messages: List[str] = []

		if not s.is_holding:
			if acc < self.detection_threshold:
				return self._snapshot(HoldTransition.NONE, idx, acc, t, messages)
			s.is_holding = True
			s.hold_start_time = t
			messages.append(f"[Hold] Starting to hold {self.pose_name(idx)}...")
			self.logger(messages[-1])
			# Zero (or negative) hold time is satisfied the moment the hold begins.
			if s.required_hold_seconds > 0:
				return self._snapshot(HoldTransition.HOLD_STARTED, idx, acc, t, messages)
			return self._complete(idx, acc, messages)

		if acc < self.detection_threshold:
			s.is_holding = False
			messages.append(f"[Hold] Lost pose hold on {self.pose_name(idx)}.")
			self.logger(messages[-1])
			return self._snapshot(HoldTransition.HOLD_LOST, idx, acc, t, messages)

		if t - s.hold_start_time >= s.required_hold_seconds:
			return self._complete(idx, acc, messages)

		return self._snapshot(HoldTransition.NONE, idx, acc, t, messages)

	def _complete(self, idx: int, acc: float, messages: List[str]) -> HoldUpdate:
		s = self.session
		messages.append(
			f"[Hold] Successfully held {self.pose_name(idx)} for {s.required_hold_seconds:g} seconds!"
		)
		self.logger(messages[-1])
		s.is_holding = False
		next_idx: Optional[int] = None
		if self.auto_progression:
			next_idx = self._next_active_index()
			if next_idx is None:
				messages.append("[Hold] No active poses available to move to next.")
				self.logger(messages[-1])
			else:
				self._switch_to(next_idx, messages)
		return HoldUpdate(
			transition=HoldTransition.HOLD_COMPLETED,
			pose_index=idx,
			accuracy=acc,
			is_holding=False,
			hold_percentage=100.0,
			remaining_seconds=0.0,
			next_pose_index=next_idx,
			messages=messages,
		)

	def _snapshot(
		self, transition: HoldTransition, idx: int, acc: float, t: float, messages: List[str]
	) -> HoldUpdate:
		return HoldUpdate(
			transition=transition,
			pose_index=idx,
			accuracy=acc,
			is_holding=self.session.is_holding,
			hold_percentage=self.hold_percentage(t),
			remaining_seconds=self.remaining_hold_seconds(t),
			messages=messages,
		)

	# ------------------------------------------------------------------ sequencing

	def _next_active_index(self) -> Optional[int]:
		n = self.pose_count
		cur = self.session.current_pose_index
		for step in range(1, n):
			cand = (cur + step) % n
			if self.session.active_pose_mask[cand]:
				return cand
		return None

	def _switch_to(self, index: int, messages: List[str]) -> None:
		old = self.session.current_pose_index
		self.session.current_pose_index = index
		self.session.is_holding = False
		if old != index:
			messages.append(f"[Hold] Transition: {self.pose_name(old)} -> {self.pose_name(index)}")
			self.logger(messages[-1])

	def advance(self) -> Optional[int]:
		"""
		Move to the next active slot. Returns the new index, or None (state
		unchanged) when no other slot is active.
		"""
		nxt = self._next_active_index()
		if nxt is None:
			self.logger("[Hold] No active poses available to move to next.")
			return None
		self._switch_to(nxt, [])
		return nxt

	def set_current_pose(self, index: int) -> bool:
		"""
		Select a slot. Out-of-range or inactive slots are rejected (returns
		False, state unchanged). A successful selection resets the hold.
		"""
		if not 0 <= index < self.pose_count:
			self.logger(f"[Hold] Pose index {index} is out of range (0..{self.pose_count - 1}).")
			return False
		if not self.session.active_pose_mask[index]:
			self.logger(f"[Hold] Pose {self.pose_name(index)} is not active. Cannot switch to it.")
			return False
		self._switch_to(index, [])
		return True

	def set_pose_active(self, index: int, active: bool) -> bool:
		if not 0 <= index < self.pose_count:
			self.logger(f"[Hold] Pose index {index} is out of range (0..{self.pose_count - 1}).")
			return False
		self.session.active_pose_mask[index] = bool(active)
		return True

	def set_detection_threshold(self, threshold: float) -> bool:
		t = float(threshold)
		if not 0.0 <= t <= 100.0:
			self.logger(f"[Hold] Detection threshold {t:g} rejected; must be within 0..100.")
			return False
		self.detection_threshold = t
		return True

	def set_required_hold_seconds(self, seconds: float) -> bool:
		s = float(seconds)
		if s < 0:
			self.logger(f"[Hold] Hold time {s:g}s rejected; must not be negative.")
			return False
		self.session.required_hold_seconds = s
		return True

	def reset(self) -> None:
		self.session.is_holding = False
		self.session.hold_start_time = 0.0


def _log_info(msg: str) -> None:
	logger.info(msg)
