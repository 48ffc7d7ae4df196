import pytest

from posetrainer.pose.pose_metrics import angle_difference_deg, angle_similarity, joint_angle_deg
from posetrainer.pose.types import Keypoint


def kp(x, y):
	return Keypoint(name="p", x=x, y=y)


def test_joint_angle_right_and_straight():
	assert joint_angle_deg(kp(0, 1), kp(0, 0), kp(1, 0)) == pytest.approx(90.0)
	assert joint_angle_deg(kp(0, 0), kp(0.5, 0.5), kp(1, 1)) == pytest.approx(180.0)


def test_joint_angle_zero_length_limb_is_absent():
	assert joint_angle_deg(kp(0.3, 0.3), kp(0.3, 0.3), kp(1, 0)) is None
	assert joint_angle_deg(kp(0, 1), kp(0.2, 0.2), kp(0.2, 0.2)) is None


def test_angle_difference_wraps():
	assert angle_difference_deg(170, -170) == pytest.approx(20.0)
	assert angle_difference_deg(10, 350) == pytest.approx(20.0)
	assert angle_difference_deg(90, 90) == 0.0
	assert angle_difference_deg(0, 180) == pytest.approx(180.0)


def test_angle_similarity_linear_to_tolerance():
	assert angle_similarity(90, 90) == 1.0
	assert angle_similarity(0, 22.5) == pytest.approx(0.5)
	assert angle_similarity(0, 45) == 0.0
	assert angle_similarity(0, 120) == 0.0
	assert angle_similarity(170, -170) == pytest.approx(1.0 - 20.0 / 45.0)
