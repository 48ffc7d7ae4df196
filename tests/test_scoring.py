import pytest

from posetrainer.pose.types import Keypoint, Skeleton
from posetrainer.pose_library import PoseLibrary
from posetrainer.scoring import best_match, compare, joint_angle_scores, keypoint_match_percentages

from conftest import STANDING_POINTS, make_skeleton


def test_identical_skeletons_score_100(standing):
	res = compare(standing, standing)
	assert res.overall == pytest.approx(100.0)
	assert res.matched
	assert set(res.angle_scores) == {"rightArmAngle", "leftArmAngle", "rightLegAngle", "leftLegAngle"}
	assert all(v == pytest.approx(1.0) for v in res.angle_scores.values())
	assert all(v == pytest.approx(100.0) for v in res.keypoint_scores.values())


def test_single_keypoint_exact_values():
	ref = Skeleton(keypoints={"nose": Keypoint("nose", 0.5, 0.5)})
	det = Skeleton(keypoints={"nose": Keypoint("nose", 0.5, 0.56)})
	res = compare(ref, det)
	# 1 - 0.06 / 0.3 for the aggregate, 1 - 0.06 / 0.2 for diagnostics
	assert res.overall == pytest.approx(80.0)
	assert res.keypoint_scores["nose"] == pytest.approx(70.0)
	assert res.angle_scores == {}


def test_score_drops_as_detection_drifts(standing):
	near = compare(standing, make_skeleton(dx=0.03))
	far = compare(standing, make_skeleton(dx=0.1))
	assert 100.0 > near.overall > far.overall
	# translation keeps limb angles intact
	assert all(v == pytest.approx(1.0) for v in far.angle_scores.values())


def test_jitter_lowers_score(standing):
	jittered = compare(standing, make_skeleton(deviation=0.05, seed=7))
	assert jittered.overall < 100.0
	assert jittered.overall > 0.0


def test_low_confidence_scales_position_terms(standing):
	half = compare(standing, make_skeleton(confidence=0.5))
	assert half.overall < 100.0
	assert all(v == pytest.approx(50.0) for v in half.keypoint_scores.values())
	# angles ignore confidence
	assert all(v == pytest.approx(1.0) for v in half.angle_scores.values())


def test_missing_keypoint_is_penalized(standing):
	points = dict(STANDING_POINTS)
	del points["leftKnee"]
	res = compare(standing, make_skeleton(points))
	assert res.overall < 100.0
	assert res.keypoint_scores["leftKnee"] == 0.0
	assert "leftLegAngle" not in res.angle_scores


def test_empty_or_disjoint_input_scores_zero(standing):
	assert compare(standing, Skeleton()).overall == 0.0
	assert compare(Skeleton(), standing).overall == 0.0
	ref = Skeleton(keypoints={"nose": Keypoint("nose", 0.5, 0.2)})
	det = Skeleton(keypoints={"leftKnee": Keypoint("leftKnee", 0.45, 0.75)})
	res = compare(ref, det)
	assert res.overall == 0.0
	assert res.keypoint_scores == {}
	assert not res.matched


def test_zero_length_limb_skips_angle(standing):
	points = dict(STANDING_POINTS)
	points["leftKnee"] = points["leftHip"]
	angles = joint_angle_scores(standing, make_skeleton(points))
	assert "leftLegAngle" not in angles
	assert "rightLegAngle" in angles


def test_diagnostics_cover_every_reference_keypoint(standing):
	det = Skeleton(keypoints={"nose": Keypoint("nose", 0.5, 0.2)})
	scores = keypoint_match_percentages(standing, det)
	assert set(scores) == set(standing.keypoints)
	assert scores["nose"] == pytest.approx(100.0)
	assert scores["rightAnkle"] == 0.0


def test_matched_flag_follows_threshold(standing):
	res = compare(standing, make_skeleton(dx=0.1), detection_threshold=99.0)
	assert not res.matched
	res = compare(standing, make_skeleton(dx=0.1), detection_threshold=0.0)
	assert res.matched


def test_best_match_picks_closest_reference():
	lib = PoseLibrary()
	candidates = {p: lib.reference_for(p) for p in ("mountain", "warrior2", "tree")}
	found = best_match(candidates, lib.reference_for("warrior2"))
	assert found is not None
	assert found[0] == "warrior2"
	assert best_match(candidates, lib.reference_for("warrior2"), detection_threshold=101.0) is None
	assert best_match(candidates, Skeleton()) is None


def test_missing_keypoint_costs_as_much_as_a_useless_one(standing):
	# nose belongs to no limb, so dropping it leaves the angle terms alone
	points = dict(STANDING_POINTS)
	del points["nose"]
	missing = compare(standing, make_skeleton(points))
	points["nose"] = (0.5, 0.9)
	far = compare(standing, make_skeleton(points))
	points["nose"] = (0.5, 0.3)
	near = compare(standing, make_skeleton(points))
	assert missing.overall == pytest.approx(far.overall)
	assert missing.overall < near.overall < 100.0
	assert missing.keypoint_scores["nose"] == far.keypoint_scores["nose"] == 0.0


def test_single_keypoint_drift_lowers_its_diagnostic(standing):
	prev_overall = 100.0
	prev_wrist = 100.0
	for shift, expected in ((0.02, 90.0), (0.05, 75.0), (0.1, 50.0), (0.3, 0.0)):
		points = dict(STANDING_POINTS)
		x, y = points["leftWrist"]
		points["leftWrist"] = (x - shift, y)
		res = compare(standing, make_skeleton(points))
		assert res.keypoint_scores["leftWrist"] == pytest.approx(expected)
		assert res.keypoint_scores["leftWrist"] < prev_wrist
		assert res.overall < prev_overall
		assert all(v == pytest.approx(100.0) for n, v in res.keypoint_scores.items() if n != "leftWrist")
		prev_overall = res.overall
		prev_wrist = res.keypoint_scores["leftWrist"]
