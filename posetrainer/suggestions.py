from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from posetrainer.pose_library import PoseLibrary, friendly_keypoint_name


# Keypoints at or above this diagnostic percentage need no correction.
SUGGESTION_THRESHOLD: float = 70.0
MAJOR_THRESHOLD: float = 50.0
CRITICAL_THRESHOLD: float = 30.0
DEFAULT_MAX_SUGGESTIONS: int = 3

POSITIVE_MESSAGES = (
	"Great form! Try to hold the pose for a few breaths.",
	"Your alignment looks excellent! Focus on your breathing now.",
)
NO_DATA_MESSAGE = "Stand in the correct starting position to receive personalized feedback."


class Severity(str, Enum):
	CRITICAL = "Critical"
	MAJOR = "Major"
	MINOR = "Minor"


def severity_for(score: float) -> Optional[Severity]:
	if score < CRITICAL_THRESHOLD:
		return Severity.CRITICAL
	if score < MAJOR_THRESHOLD:
		return Severity.MAJOR
	if score < SUGGESTION_THRESHOLD:
		return Severity.MINOR
	return None


@dataclass(frozen=True)
class Suggestion:
	keypoint: str
	score: float
	severity: Severity
	hint: str

	@property
	def text(self) -> str:
		return f"[{self.severity.value}] {friendly_keypoint_name(self.keypoint)}: {self.hint}"

	def to_dict(self) -> Dict[str, object]:
		return {
			"keypoint": self.keypoint,
			"label": friendly_keypoint_name(self.keypoint),
			"score": self.score,
			"severity": self.severity.value,
			"hint": self.hint,
			"text": self.text,
		}


def select_weak_keypoints(
	keypoint_scores: Mapping[str, float],
	max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> List[Tuple[str, float]]:
	"""
	Keypoints below SUGGESTION_THRESHOLD, worst first, at most `max_suggestions`.

	The sort is stable, so equal scores keep the diagnostics' order.
	"""
	weak = [(name, float(score)) for name, score in keypoint_scores.items() if float(score) < SUGGESTION_THRESHOLD]
	weak.sort(key=lambda item: item[1])
	return weak[: max(0, int(max_suggestions))]


def generate_suggestions(
	keypoint_scores: Mapping[str, float],
	pose_id: Optional[str] = None,
	library: Optional[PoseLibrary] = None,
	max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> List[Suggestion]:
	lib = library if library is not None else PoseLibrary()
	out: List[Suggestion] = []
	for name, score in select_weak_keypoints(keypoint_scores, max_suggestions):
		sev = severity_for(score)
		if sev is None:
			continue
		out.append(Suggestion(keypoint=name, score=score, severity=sev, hint=lib.hints_for(pose_id, name)))
	return out


def messages_for(keypoint_scores: Mapping[str, float], suggestions: Sequence[Suggestion]) -> List[str]:
	"""
	User-facing feedback lines for already selected suggestions: corrections
	when something is off, positive reinforcement when nothing is, and a
	positioning prompt when there is nothing to compare yet.
	"""
	if not keypoint_scores:
		return [NO_DATA_MESSAGE]
	if not suggestions:
		return list(POSITIVE_MESSAGES)
	return [s.text for s in suggestions]


def suggestion_messages(
	keypoint_scores: Mapping[str, float],
	pose_id: Optional[str] = None,
	library: Optional[PoseLibrary] = None,
	max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> List[str]:
	return messages_for(keypoint_scores, generate_suggestions(keypoint_scores, pose_id, library, max_suggestions))
