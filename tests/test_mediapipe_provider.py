import sys
from types import SimpleNamespace

import pytest

from posetrainer.config import DetectorConfig
from posetrainer.pose.mediapipe_provider import BLAZEPOSE_INDEX, MediaPipePoseProvider, skeleton_from_landmarks


def landmarks(n=33, visibility=0.9):
	return [SimpleNamespace(x=i / 100.0, y=1.0 - i / 100.0, visibility=visibility) for i in range(n)]


def test_landmarks_map_to_named_keypoints():
	sk = skeleton_from_landmarks(landmarks(), t_host=12.5)
	assert len(sk) == 13
	assert sk.source == "mediapipe_pose"
	assert sk.t_host == 12.5
	knee = sk.get("leftKnee")
	assert knee.x == pytest.approx(BLAZEPOSE_INDEX["leftKnee"] / 100.0)
	assert knee.y == pytest.approx(1.0 - 0.25)
	assert knee.confidence == pytest.approx(0.9)


def test_low_visibility_and_short_lists():
	lms = landmarks()
	lms[BLAZEPOSE_INDEX["rightWrist"]].visibility = 0.1
	sk = skeleton_from_landmarks(lms, min_visibility=0.5)
	assert "rightWrist" not in sk
	assert len(sk) == 12

	short = skeleton_from_landmarks(landmarks(n=17))
	assert set(short) == {
		"nose",
		"leftShoulder",
		"rightShoulder",
		"leftElbow",
		"rightElbow",
		"leftWrist",
		"rightWrist",
	}


def test_missing_visibility_counts_as_zero_confidence():
	lms = [SimpleNamespace(x=0.5, y=0.5) for _ in range(33)]
	sk = skeleton_from_landmarks(lms)
	assert all(sk.get(n).confidence == 0.0 for n in sk)


def test_provider_requires_mediapipe(monkeypatch):
	monkeypatch.setitem(sys.modules, "mediapipe", None)
	with pytest.raises(RuntimeError, match="pip install"):
		MediaPipePoseProvider()


def test_provider_from_config_uses_detector_settings(monkeypatch):
	created = {}

	class FakePose:
		def __init__(self, **kw):
			created.update(kw)

		def close(self):
			created["closed"] = True

	fake_mp = SimpleNamespace(solutions=SimpleNamespace(pose=SimpleNamespace(Pose=FakePose)))
	monkeypatch.setitem(sys.modules, "mediapipe", fake_mp)
	provider = MediaPipePoseProvider.from_config(DetectorConfig(model_complexity=2, min_detection_confidence=0.7))
	assert provider.name() == "mediapipe_pose"
	assert created["model_complexity"] == 2
	assert created["min_detection_confidence"] == 0.7
	provider.close()
	assert created["closed"] is True
