"""Tests for the FastAPI front end."""

import pytest
from fastapi.testclient import TestClient

from croppy.config.schema import CroppyConfig
from croppy.core import Croppy
from croppy.server import create_app, to_response
from croppy.storage.memory import MemoryBlobStore
from croppy.types import Delivery, Outcome


@pytest.fixture
def client(croppy):
    with TestClient(create_app(croppy)) as c:
        yield c


class TestEndpoints:
    def test_health(self, client):
        response = client.get("/_croppy/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_stats(self, client):
        client.get("/images/cat-10x10.jpg")
        body = client.get("/_croppy/stats").json()
        assert body["success"] is True
        assert body["stats"]["generated"] == 1

    def test_derivative_bytes(self, client):
        response = client.get("/images/cat-10x10.jpg")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["cache-control"].startswith("public")
        assert response.content[:2] == b"\xff\xd8"

    def test_derivative_file(self, local_croppy):
        with TestClient(create_app(local_croppy)) as client:
            response = client.get("/images/cat-10x10-resize.jpg")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"

    def test_pass_through(self, client):
        response = client.get("/images/cat.jpg")
        assert response.status_code == 200
        assert response.content == b""

    def test_missing_source_is_404(self, client):
        response = client.get("/images/ghost-10x10.jpg")
        assert response.status_code == 404
        assert response.content == b""

    def test_bad_token_is_404(self, memory_store):
        croppy = Croppy(
            CroppyConfig(signing_key="secret"), src_store=memory_store, crops_store=memory_store
        )
        with TestClient(create_app(croppy)) as client:
            assert client.get("/images/cat-10x10.jpg?token=nope").status_code == 404
            url = croppy.url("/images/cat.jpg", 10, 10)
            assert client.get(url).status_code == 200

    def test_too_many_is_500(self, memory_store):
        croppy = Croppy(
            CroppyConfig(max_crops=1), src_store=memory_store, crops_store=memory_store
        )
        with TestClient(create_app(croppy)) as client:
            assert client.get("/images/cat-10x10.jpg").status_code == 200
            assert client.get("/images/cat-20x20.jpg").status_code == 500

    def test_app_state(self, croppy):
        assert create_app(croppy).state.croppy is croppy


class TestToResponse:
    def test_redirect(self):
        delivery = Delivery(
            outcome=Outcome.REDIRECT, status=301, location="https://cdn.example.com/a.jpg"
        )
        response = to_response(delivery)
        assert response.status_code == 301
        assert response.headers["location"] == "https://cdn.example.com/a.jpg"

    def test_bytes(self):
        delivery = Delivery(
            outcome=Outcome.STREAM, headers={"Content-Type": "image/gif"}, body=b"GIF89a"
        )
        response = to_response(delivery)
        assert response.body == b"GIF89a"
        assert response.media_type == "image/gif"

    def test_pass_through(self):
        response = to_response(Delivery(outcome=Outcome.PASS_THROUGH))
        assert response.status_code == 200
        assert response.body == b""


class TestRedirect:
    def test_remote_crops_redirect(self, memory_store):
        class RemoteStore(MemoryBlobStore):
            def is_remote(self):
                return True

            def url(self, key):
                return f"https://cdn.example.com/{key}"

        croppy = Croppy(CroppyConfig(), src_store=memory_store, crops_store=RemoteStore())
        with TestClient(create_app(croppy)) as client:
            response = client.get("/images/cat-10x10.jpg", follow_redirects=False)
        assert response.status_code == 301
        assert response.headers["location"] == "https://cdn.example.com/images/cat-10x10.jpg"
