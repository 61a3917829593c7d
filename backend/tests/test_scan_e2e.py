"""
End-to-end tests for the /scan_wine endpoint.

Tests complete workflow:
- Multipart upload -> pre-filled wine fields
- Request validation (plain-text 400s)
- Gateway failures mapped to {ok: false, error}
"""

import pytest
from fastapi.testclient import TestClient

from conftest import FIXTURES_DIR, RecordingStorage, RecordingVision, create_test_image
from main import app
from savemywines.feature_flags import FeatureFlags, get_feature_flags
from savemywines.routes.scan import get_scan_pipeline
from savemywines.services.label_storage import StorageError
from savemywines.services.scan_pipeline import ScanPipeline
from savemywines.services.vision import ReplayVisionService, VisionAnnotations, VisionServiceError


client = TestClient(app)


@pytest.fixture
def gateways():
    """Install recording gateways behind /scan_wine."""
    storage = RecordingStorage()
    vision = RecordingVision(VisionAnnotations(
        full_text="Domaine Example\nPinot Noir\n2019",
        label_descriptions=["wine", "bottle"],
    ))
    app.dependency_overrides[get_scan_pipeline] = lambda: ScanPipeline(storage, vision)
    yield storage, vision
    app.dependency_overrides.clear()


def post_scan(device_id="device-123", image=True, filename="label.png"):
    files = {"file": (filename, create_test_image(), "image/png")} if image else None
    data = {"device_id": device_id} if device_id is not None else {}
    if files is None:
        # Force a multipart body even without a file part
        files = {"placeholder": (None, "x")}
    return client.post("/scan_wine", data=data, files=files)


class TestScanWineContract:

    def test_success_response(self, gateways):
        response = post_scan()

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        data = response.json()
        assert data == {
            "ok": True,
            "device_id": "device-123",
            "name": "Domaine Example",
            "producer": "",
            "varietal": "pinot noir",
            "vintage": 2019,
            "region": "",
            "alcohol": "",
            "notes": "",
            "label_image_url": data["label_image_url"],
        }
        assert data["label_image_url"].startswith("https://cdn.test/labels/")
        assert data["label_image_url"].endswith("-label.png")

    def test_null_vintage_serialized(self, gateways):
        _, vision = gateways
        vision.annotations = VisionAnnotations(full_text="Estate Only")
        data = post_scan().json()
        assert data["vintage"] is None
        assert data["name"] == "Estate Only"

    def test_uploaded_file_details_reach_storage(self, gateways):
        storage, vision = gateways
        post_scan(filename="my bottle.png")

        file_bytes, file_name, content_type = storage.calls[0]
        assert file_name == "my bottle.png"
        assert content_type == "image/png"
        assert vision.calls == [file_bytes]

    def test_device_id_echoed_unchanged(self, gateways):
        data = post_scan(device_id=" device-123 ").json()
        assert data["ok"] is True
        assert data["device_id"] == " device-123 "


class TestScanWineValidation:

    def test_wrong_content_type(self, gateways):
        storage, vision = gateways
        response = client.post("/scan_wine", json={"device_id": "x"})

        assert response.status_code == 400
        assert response.text == "Bad Request"
        assert storage.calls == [] and vision.calls == []

    def test_missing_device_id(self, gateways):
        storage, vision = gateways
        response = post_scan(device_id=None)

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Missing fields"
        assert storage.calls == []
        assert vision.calls == []

    def test_blank_device_id(self, gateways):
        storage, _ = gateways
        response = post_scan(device_id="  ")
        assert response.status_code == 400
        assert storage.calls == []

    def test_missing_file(self, gateways):
        storage, _ = gateways
        response = post_scan(image=False)
        assert response.status_code == 400
        assert response.text == "Missing fields"
        assert storage.calls == []

    def test_empty_file(self, gateways):
        storage, _ = gateways
        response = client.post(
            "/scan_wine",
            data={"device_id": "device-123"},
            files={"file": ("empty.png", b"", "image/png")},
        )
        assert response.status_code == 400
        assert storage.calls == []

    def test_file_too_large(self, gateways, monkeypatch):
        from savemywines.config import Config
        monkeypatch.setattr(Config, "MAX_IMAGE_SIZE_BYTES", 10)
        storage, _ = gateways

        response = post_scan()

        assert response.status_code == 400
        assert "too large" in response.text
        assert storage.calls == []


class TestScanWineFailures:

    def test_storage_failure(self, gateways):
        storage, vision = gateways
        storage.fail_with = StorageError("bucket quota exceeded")

        response = post_scan()

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "bucket quota exceeded"}
        assert vision.calls == []

    def test_vision_failure(self, gateways):
        storage, vision = gateways
        vision.fail_with = VisionServiceError("deadline exceeded")

        response = post_scan()

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "deadline exceeded"}
        assert len(storage.calls) == 1

    def test_unexpected_error(self, gateways):
        _, vision = gateways
        vision.fail_with = RuntimeError("boom")

        response = post_scan()

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "boom"}


class TestScanWineWiring:

    def test_replayed_vision_fixture(self):
        storage = RecordingStorage()
        vision = ReplayVisionService(FIXTURES_DIR / "vision_responses" / "domaine_example_jpg.json")
        app.dependency_overrides[get_scan_pipeline] = lambda: ScanPipeline(storage, vision)
        try:
            data = post_scan().json()
        finally:
            app.dependency_overrides.clear()

        assert data["name"] == "Domaine Example"
        assert data["varietal"] == "pinot noir"
        assert data["vintage"] == 2019

    def test_parallel_flag_builds_parallel_pipeline(self):
        pipeline = get_scan_pipeline(FeatureFlags(feature_parallel_scan=True))
        assert pipeline.parallel is True
        assert get_scan_pipeline(FeatureFlags()).parallel is False

    def test_parallel_flag_end_to_end(self, gateways):
        storage, vision = gateways
        app.dependency_overrides[get_scan_pipeline] = lambda: ScanPipeline(storage, vision, parallel=True)
        app.dependency_overrides[get_feature_flags] = lambda: FeatureFlags(feature_parallel_scan=True)

        response = post_scan()

        assert response.status_code == 200
        assert len(storage.calls) == 1
        assert len(vision.calls) == 1


class TestAppEndpoints:

    def test_health(self):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_root(self):
        assert client.get("/").json()["name"] == "SaveMyWines API"
