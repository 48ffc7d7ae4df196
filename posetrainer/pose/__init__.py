"""
Pose data model and geometry.

This package defines the detector-agnostic Skeleton value type, the joint-angle
math used by the scorer, and provider adapters (e.g., MediaPipe Pose) so the
keypoint detector can be swapped without touching scoring code.
"""
