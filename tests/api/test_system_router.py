"""
API Integration Tests for System Router Endpoints
"""

from pathlib import Path


class TestSystemRouterAPI:
    """Integration tests for system router endpoints"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "Image Editor"

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert all(data["services"].values())

    def test_get_status(self, client):
        """Test system status endpoint"""
        response = client.get("/api/system/status")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "healthy"
        assert data["uptime"] >= 0
        assert data["worker_pool"] == {"max_workers": 2, "queue_size": 4, "in_flight": 0}

    def test_get_config(self, client):
        response = client.get("/api/system/config")

        assert response.status_code == 200
        assert response.json()["editor"]["decode_max_width"] == 700

    def test_list_fonts_empty(self, client):
        response = client.get("/api/system/fonts")

        assert response.status_code == 200
        assert response.json() == {"fonts": []}

    def test_registered_font_listed(self, client, font_path):
        registered = client.post("/api/editor/registerFont", json={"path": font_path})
        assert registered.status_code == 200

        response = client.get("/api/system/fonts")

        assert response.json() == {"fonts": [Path(font_path).stem]}
