from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from posetrainer.config import PoseSlotConfig, TrainingConfig
from posetrainer.hold_tracker import HoldTransition, HoldUpdate, PoseHoldTracker
from posetrainer.pose.types import Skeleton
from posetrainer.pose_library import PoseLibrary
from posetrainer.scoring import ComparisonResult, compare
from posetrainer.suggestions import Suggestion, generate_suggestions, messages_for


logger = logging.getLogger(__name__)


@dataclass
class SessionStatistics:
	frames: int = 0
	accuracy_sum: float = 0.0
	best_accuracy: float = 0.0
	best_pose_id: Optional[str] = None
	completed_holds: Dict[str, int] = field(default_factory=dict)

	@property
	def mean_accuracy(self) -> float:
		return self.accuracy_sum / self.frames if self.frames else 0.0

	def record(self, pose_id: str, accuracy: float, completed: bool) -> None:
		self.frames += 1
		self.accuracy_sum += accuracy
		if self.best_pose_id is None or accuracy > self.best_accuracy:
			self.best_accuracy = accuracy
			self.best_pose_id = pose_id
		if completed:
			self.completed_holds[pose_id] = self.completed_holds.get(pose_id, 0) + 1

	def to_dict(self) -> Dict[str, Any]:
		return {
			"frames": self.frames,
			"mean_accuracy": self.mean_accuracy,
			"best_accuracy": self.best_accuracy,
			"best_pose_id": self.best_pose_id,
			"completed_holds": dict(self.completed_holds),
		}


@dataclass(frozen=True)
class FrameResult:
	pose_index: int
	pose_id: str
	comparison: ComparisonResult
	hold: HoldUpdate
	suggestions: List[Suggestion]
	messages: List[str]

	def events(self) -> List[Dict[str, Any]]:
		"""Hold/transition events for announcers and UI highlights."""
		if self.hold.transition is HoldTransition.NONE:
			return []
		ev: Dict[str, Any] = {
			"type": "hold",
			"transition": self.hold.transition.value,
			"pose_index": self.pose_index,
			"pose_id": self.pose_id,
			"accuracy": self.hold.accuracy,
		}
		if self.hold.completed:
			ev["next_pose_index"] = self.hold.next_pose_index
		return [ev]


class TrainingSession:
	"""
	One user's training run over an ordered list of pose slots.

	Each detected skeleton is compared against the current slot's reference,
	the match percentage drives the hold tracker, and diagnostics become
	feedback. Single owner; callers serialize process_frame calls.
	"""

	def __init__(
		self,
		slots: Sequence[PoseSlotConfig],
		training: Optional[TrainingConfig] = None,
		library: Optional[PoseLibrary] = None,
		clock: Optional[Callable[[], float]] = None,
		session_id: Optional[str] = None,
	) -> None:
		self.library = library if library is not None else PoseLibrary()
		self.training = training if training is not None else TrainingConfig()
		self.session_id = session_id
		self.slots: List[PoseSlotConfig] = []
		for slot in slots:
			if slot.pose_id not in self.library:
				logger.warning("[Training] Unknown pose id %r in slot list; slot disabled", slot.pose_id)
				self.slots.append(PoseSlotConfig(pose_id=slot.pose_id, active=False))
			else:
				self.slots.append(slot)
		self.tracker = PoseHoldTracker(
			active_pose_mask=[s.active for s in self.slots],
			required_hold_seconds=self.training.hold_time_seconds,
			detection_threshold=self.training.detection_threshold,
			auto_progression=self.training.auto_pose_progression,
			pose_names=[self._slot_name(s) for s in self.slots],
			clock=clock,
		)
		self.stats = SessionStatistics()

	def _slot_name(self, slot: PoseSlotConfig) -> str:
		if slot.pose_id in self.library:
			return self.library.get(slot.pose_id).name
		return slot.pose_id

	@property
	def current_pose_index(self) -> int:
		return self.tracker.current_pose_index

	@property
	def current_pose_id(self) -> str:
		if not self.slots:
			return ""
		return self.slots[self.tracker.current_pose_index].pose_id

	def process_frame(self, detected: Skeleton, now: Optional[float] = None) -> FrameResult:
		idx = self.tracker.current_pose_index
		pose_id = self.current_pose_id
		if pose_id and pose_id in self.library and self.tracker.is_active(idx):
			reference = self.library.reference_for(pose_id)
			comparison = compare(reference, detected, self.training.detection_threshold)
		else:
			comparison = ComparisonResult(overall=0.0)

		hold = self.tracker.update(comparison.overall, now=now)
		max_sugg = self.training.max_suggestions
		suggestions = generate_suggestions(comparison.keypoint_scores, pose_id, self.library, max_sugg)
		messages = messages_for(comparison.keypoint_scores, suggestions)
		self.stats.record(pose_id, comparison.overall, hold.completed)
		return FrameResult(
			pose_index=idx,
			pose_id=pose_id,
			comparison=comparison,
			hold=hold,
			suggestions=suggestions,
			messages=messages,
		)

	def select_pose(self, index: int) -> bool:
		return self.tracker.set_current_pose(index)

	def next_pose(self) -> Optional[int]:
		return self.tracker.advance()

	def status(self, now: Optional[float] = None) -> Dict[str, Any]:
		return {
			"session_id": self.session_id,
			"current_pose_index": self.tracker.current_pose_index,
			"current_pose_id": self.current_pose_id,
			"is_holding": self.tracker.is_holding,
			"hold_percentage": self.tracker.hold_percentage(now),
			"remaining_hold_seconds": self.tracker.remaining_hold_seconds(now),
			"required_hold_seconds": self.tracker.session.required_hold_seconds,
			"detection_threshold": self.tracker.detection_threshold,
			"slots": [
				{"pose_id": s.pose_id, "active": self.tracker.is_active(i)} for i, s in enumerate(self.slots)
			],
		}

	def statistics(self) -> Dict[str, Any]:
		return self.stats.to_dict()
