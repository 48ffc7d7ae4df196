import json

import pytest
from fastapi.testclient import TestClient

import server
from posetrainer import config as config_mod
from posetrainer.pose_library import PoseLibrary
from posetrainer.suggestions import POSITIVE_MESSAGES
from server import app, create_app


def skeleton_payload(pose_id="mountain", dx=0.0):
	ref = PoseLibrary().reference_for(pose_id)
	return {
		"keypoints": {
			n: {"x": kp.x + dx, "y": kp.y, "confidence": kp.confidence} for n, kp in ref.keypoints.items()
		}
	}


@pytest.fixture
def client():
	with TestClient(app) as c:
		yield c


def test_health(client):
	r = client.get("/health")
	assert r.status_code == 200
	body = r.json()
	assert body["status"] == "ok"
	assert body["training"] is False


def test_pose_catalog(client):
	poses = client.get("/api/poses").json()["poses"]
	assert poses[0]["pose_id"] == "mountain"
	assert poses[0]["has_reference"] is True

	r = client.get("/api/poses/tree")
	assert r.status_code == 200
	assert r.json()["sanskrit_name"] == "Vrksasana"
	assert client.get("/api/poses/levitation").status_code == 404

	ref = client.get("/api/poses/downdog/reference").json()
	assert ref["generic"] is True
	assert set(ref["keypoints"]) == {"nose", "leftShoulder", "rightShoulder", "leftHip", "rightHip"}


def test_compare_by_pose_id(client):
	r = client.post("/api/compare", json={"pose_id": "mountain", "detected": skeleton_payload()})
	assert r.status_code == 200
	body = r.json()
	assert body["comparison"]["matched"] is True
	assert body["suggestions"] == []
	assert body["messages"] == list(POSITIVE_MESSAGES)


def test_compare_inline_reference_wins(client):
	ref = {"keypoints": {"nose": {"x": 0.5, "y": 0.5}}}
	det = {"keypoints": {"nose": {"x": 0.5, "y": 0.56}}}
	r = client.post("/api/compare", json={"pose_id": "tree", "reference": ref, "detected": det})
	assert r.status_code == 200
	assert r.json()["comparison"]["overall"] == pytest.approx(80.0)


def test_compare_errors(client):
	det = skeleton_payload()
	assert client.post("/api/compare", json={"detected": det}).status_code == 422
	assert client.post("/api/compare", json={"pose_id": "levitation", "detected": det}).status_code == 404
	r = client.post("/api/compare", json={"pose_id": "mountain", "detected": det, "detection_threshold": 150})
	assert r.status_code == 422


def test_recognize(client):
	r = client.post("/api/recognize", json={"detected": skeleton_payload("warrior2")})
	assert r.json()["pose_id"] == "warrior2"
	r = client.post("/api/recognize", json={"detected": {"keypoints": {}}})
	assert r.json() == {"pose_id": None, "comparison": None}


def test_training_requires_session(client):
	assert client.post("/training/frame", json=skeleton_payload()).status_code == 409
	assert client.post("/training/next").status_code == 409
	assert client.get("/training/status").json() == {"session_id": None}


def test_training_flow(client):
	r = client.post(
		"/training/start",
		json={
			"session_id": "morning",
			"poses": [{"pose_id": "mountain"}, {"pose_id": "tree"}, {"pose_id": "chair", "active": False}],
			"hold_time_seconds": 30,
		},
	)
	assert r.status_code == 200
	assert r.json()["session_id"] == "morning"
	assert client.post("/training/start", json={}).json()["detail"] == "Session already running"

	frame = client.post("/training/frame", json=skeleton_payload()).json()
	assert frame["pose_id"] == "mountain"
	assert frame["hold"]["transition"] == "hold_started"
	assert client.get("/training/status").json()["is_holding"] is True

	r = client.post("/training/pose", json={"index": 2}).json()
	assert r["changed"] is False
	r = client.post("/training/pose", json={"index": 1}).json()
	assert r["changed"] is True
	assert r["status"]["current_pose_id"] == "tree"
	r = client.post("/training/next").json()
	assert r["changed"] is True
	assert r["status"]["current_pose_index"] == 0

	stopped = client.post("/training/stop").json()
	assert stopped["statistics"]["frames"] == 1
	assert client.post("/training/stop").json()["detail"] == "No active session"


def test_training_start_validation(client):
	assert client.post("/training/start", json={"poses": [{"pose_id": "levitation"}]}).status_code == 404
	assert client.post("/training/start", json={"hold_time_seconds": 0}).status_code == 422
	assert client.post("/training/start", json={"poses": []}).status_code == 422


def test_hold_events_reach_websocket(client):
	client.post("/training/start", json={"poses": [{"pose_id": "mountain"}]})
	with client.websocket_connect("/ws") as ws:
		client.post("/training/frame", json=skeleton_payload())
		ev = ws.receive_json()
	assert ev["type"] == "hold"
	assert ev["transition"] == "hold_started"
	assert ev["pose_id"] == "mountain"
	client.post("/training/stop")


@pytest.fixture
def only_origin_config(tmp_path, monkeypatch):
	monkeypatch.setattr(config_mod, "_CONFIG_PATH", None)
	monkeypatch.setattr(config_mod, "_CONFIG_CACHE", None)
	p = tmp_path / "config.json"
	p.write_text(json.dumps({"server": {"cors_origins": ["http://only.example"], "port": 9123}}), encoding="utf-8")
	return p


def test_cors_origins_follow_config_path(only_origin_config):
	config_mod.set_config_path(only_origin_config)
	with TestClient(create_app()) as c:
		r = c.get("/health", headers={"Origin": "http://only.example"})
		assert r.headers["access-control-allow-origin"] == "http://only.example"
		r = c.get("/health", headers={"Origin": "http://elsewhere.example"})
		assert "access-control-allow-origin" not in r.headers


def test_main_builds_app_from_config_flag(only_origin_config, monkeypatch):
	launched = {}

	def fake_run(app_obj, **kw):
		launched["app"] = app_obj
		launched.update(kw)

	monkeypatch.setattr(server.uvicorn, "run", fake_run)
	server.main(["--config", str(only_origin_config)])
	assert launched["port"] == 9123
	with TestClient(launched["app"]) as c:
		r = c.get("/health", headers={"Origin": "http://only.example"})
		assert r.headers["access-control-allow-origin"] == "http://only.example"
		r = c.get("/health", headers={"Origin": "http://elsewhere.example"})
		assert "access-control-allow-origin" not in r.headers
