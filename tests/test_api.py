"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API endpoints and the scanning WebSocket.

==============================================================================
"""

import base64
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from stockscan.core.dependencies import get_barcode_generator
from stockscan.labels import BarcodeGenerator
from stockscan.main import app


PAYLOAD = {"sku": "SR1001", "price": 2500, "quantity": 50}


class TestHealthEndpoints:
    """Tests for health check endpoints."""
    
    def test_health_check(self, client: TestClient):
        """Test health check returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ["healthy", "degraded"]
        assert data["components"]["api"] == "healthy"
    
    def test_readiness_probe(self, client: TestClient):
        """Test readiness probe."""
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True
    
    def test_liveness_probe(self, client: TestClient):
        """Test liveness probe."""
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True


class TestProductEndpoints:
    """Tests for catalog endpoints."""
    
    def test_list_products(self, client: TestClient):
        """Test listing keeps catalog order."""
        response = client.get("/api/v1/products")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["total"] == 4
        assert [p["sku"] for p in data["data"]] == ["SR1001", "SR2002", "sn-300", "SN-300-XL"]
    
    def test_list_products_by_category(self, client: TestClient):
        """Test category filter accepts the category id."""
        response = client.get("/api/v1/products", params={"category": "snacks", "limit": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["data"][0]["id"] == "p-3"
    
    def test_get_product(self, client: TestClient):
        """Test getting a product by id."""
        response = client.get("/api/v1/products/p-1")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Sparkling Water"
        assert data["price"] == "2500"
        assert data["category"]["name"] == "Beverages"
    
    def test_get_product_not_found(self, client: TestClient):
        """Test unknown product id."""
        response = client.get("/api/v1/products/p-404")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"
    
    def test_get_by_sku_exact(self, client: TestClient):
        """Test SKU lookup is case-insensitive."""
        response = client.get("/api/v1/products/sku/sr1001")
        assert response.status_code == 200
        data = response.json()
        assert data["match"] == "exact"
        assert data["data"]["id"] == "p-1"
    
    def test_get_by_sku_fuzzy(self, client: TestClient):
        """Test SKU lookup falls back to containment."""
        response = client.get("/api/v1/products/sku/SR1001-B")
        assert response.status_code == 200
        data = response.json()
        assert data["match"] == "fuzzy"
        assert data["data"]["id"] == "p-1"
    
    def test_get_by_sku_oversized_quantity(self, client: TestClient):
        """Test an unparseable payload still falls back to SKU matching."""
        response = client.get("/api/v1/products/sku/SR1001|1|" + "9" * 5000)
        assert response.status_code == 200
        assert response.json()["match"] == "fuzzy"
    
    def test_get_by_sku_not_found(self, client: TestClient):
        """Test unknown SKU."""
        response = client.get("/api/v1/products/sku/ZZZ999")
        assert response.status_code == 404
    
    def test_get_by_sku_catalog_down(self, offline_client: TestClient):
        """Test unreachable catalog is not reported as not found."""
        response = offline_client.get("/api/v1/products/sku/SR1001")
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "CATALOG_UNAVAILABLE"
    
    def test_categories(self, client: TestClient):
        """Test category listing."""
        response = client.get("/api/v1/products/categories")
        assert response.status_code == 200
        names = [c["name"] for c in response.json()["categories"]]
        assert names == ["Beverages", "Snacks"]
    
    def test_stats(self, client: TestClient):
        """Test catalog statistics."""
        response = client.get("/api/v1/products/stats")
        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["total_products"] == 4
        assert stats["out_of_stock"] == 1


class TestBarcodeEndpoints:
    """Tests for barcode generation endpoints."""
    
    def test_preview(self, client: TestClient):
        """Test preview returns payload and data URI."""
        response = client.post("/api/v1/barcodes/preview", json=PAYLOAD)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["payload"] == "SR1001|2500|50"
        assert data["barcode_preview"].startswith("data:image/png;base64,")
    
    def test_image(self, client: TestClient):
        """Test raw PNG response."""
        response = client.post("/api/v1/barcodes/image", json={**PAYLOAD, "price": "950.50"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-barcode-payload"] == "SR1001|950.50|50"
        assert response.content.startswith(b"\x89PNG")
    
    def test_store(self, client: TestClient, generator):
        """Test barcode is written to the barcode directory."""
        response = client.post("/api/v1/barcodes/store", json=PAYLOAD)
        assert response.status_code == 200
        path = Path(response.json()["data"]["barcode_ref"])
        assert path.parent == generator.output_dir
        assert path.exists()
    
    def test_store_failure(self, client: TestClient, tmp_path):
        """Test an unwritable barcode directory is reported as an internal error."""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("occupied")
        app.dependency_overrides[get_barcode_generator] = lambda: BarcodeGenerator(output_dir=blocker)
        
        response = client.post("/api/v1/barcodes/store", json=PAYLOAD)
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    
    def test_delimiter_in_sku(self, client: TestClient):
        """Test SKU containing the payload delimiter is rejected."""
        response = client.post("/api/v1/barcodes/preview", json={**PAYLOAD, "sku": "SR|1001"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_SKU"
    
    def test_blank_sku(self, client: TestClient):
        """Test blank SKU fails validation."""
        response = client.post("/api/v1/barcodes/preview", json={**PAYLOAD, "sku": "   "})
        assert response.status_code == 422
    
    def test_negative_quantity(self, client: TestClient):
        """Test negative quantity fails validation."""
        response = client.post("/api/v1/barcodes/preview", json={**PAYLOAD, "quantity": -1})
        assert response.status_code == 422


class TestScanEndpoints:
    """Tests for one-shot scan resolution."""
    
    def test_resolve_payload(self, client: TestClient):
        """Test structured payload resolves by SKU."""
        response = client.post("/api/v1/scan/resolve", json={"raw_text": " SR1001|2500|50\r\n"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["normalized_text"] == "SR1001|2500|50"
        assert data["resolution"]["status"] == "found"
        assert data["resolution"]["match"] == "exact"
        assert data["resolution"]["payload"]["quantity"] == 50
        assert data["resolution"]["product"]["id"] == "p-1"
    
    def test_resolve_not_found(self, client: TestClient):
        """Test unknown SKU is a not_found resolution."""
        response = client.post("/api/v1/scan/resolve", json={"raw_text": "ZZZ999|1|1"})
        assert response.status_code == 200
        resolution = response.json()["data"]["resolution"]
        assert resolution["status"] == "not_found"
        assert resolution["product"] is None
    
    def test_resolve_catalog_down(self, offline_client: TestClient):
        """Test catalog failure is an error resolution."""
        response = offline_client.post("/api/v1/scan/resolve", json={"raw_text": "SR1001"})
        assert response.status_code == 200
        resolution = response.json()["data"]["resolution"]
        assert resolution["status"] == "error"
        assert resolution["error"] == "network_failure"
    
    def test_image_invalid_base64(self, client: TestClient):
        """Test non-base64 image data."""
        response = client.post("/api/v1/scan/image", json={"image": "not base64!!"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_IMAGE"
    
    def test_image_not_an_image(self, client: TestClient):
        """Test base64 data that is not an image."""
        image = base64.b64encode(b"plain text").decode("ascii")
        response = client.post("/api/v1/scan/image", json={"image": image})
        assert response.status_code == 400
    
    def test_image_round_trip(self, client: TestClient):
        """Test a generated label scans back to its product."""
        pytest.importorskip("pyzbar.pyzbar")
        preview = client.post("/api/v1/barcodes/preview", json=PAYLOAD).json()["data"]
        
        response = client.post("/api/v1/scan/image", json={"image": preview["barcode_preview"]})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["raw_text"] == "SR1001|2500|50"
        assert data["resolution"]["product"]["id"] == "p-1"


class TestScannerWebSocket:
    """Tests for the interactive scan session."""
    
    def test_scan_flow(self, client: TestClient):
        """Test accept, lock and success are pushed in order."""
        with client.websocket_connect("/ws/scan") as ws:
            initial = ws.receive_json()
            assert initial["type"] == "state"
            assert initial["state"]["phase"] == "idle"
            
            ws.send_json({"type": "scan", "raw_text": "SR1001|2500|50", "symbology": "CODE128"})
            
            assert ws.receive_json() == {"type": "feedback", "pattern": "accept"}
            locked = ws.receive_json()
            assert locked["state"]["phase"] == "locked"
            assert ws.receive_json() == {"type": "feedback", "pattern": "success"}
            success = ws.receive_json()
            assert success["state"]["phase"] == "success"
            assert success["state"]["product"]["id"] == "p-1"
            assert success["state"]["message"] == "Found Sparkling Water"
            
            ws.send_json({"type": "stop"})
    
    def test_not_found_flow(self, client: TestClient):
        """Test unknown SKU ends in failure with error feedback."""
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            ws.send_json({"type": "scan", "raw_text": "ZZZ999"})
            
            messages = [ws.receive_json() for _ in range(4)]
            assert messages[2] == {"type": "feedback", "pattern": "error"}
            assert messages[3]["state"]["phase"] == "failure"
            assert messages[3]["state"]["message"] == "Product not found"
            
            ws.send_json({"type": "stop"})
    
    def test_blur_resets_session(self, client: TestClient):
        """Test blur returns the session to a clean idle state."""
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            ws.send_json({"type": "scan", "raw_text": "ZZZ999"})
            for _ in range(4):
                ws.receive_json()
            
            ws.send_json({"type": "blur"})
            state = ws.receive_json()["state"]
            assert state["phase"] == "idle"
            assert state["active"] is False
            assert state["message"] is None
            
            ws.send_json({"type": "stop"})
    
    def test_unknown_message(self, client: TestClient):
        """Test unknown message types are reported."""
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            ws.send_json({"type": "dance"})
            
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["code"] == "UNKNOWN_MESSAGE"
            
            ws.send_json({"type": "stop"})
    
    def test_non_object_message(self, client: TestClient):
        """Test JSON arrays and strings are rejected without closing the session."""
        with client.websocket_connect("/ws/scan") as ws:
            ws.receive_json()
            
            for frame in ([], "scan", 42):
                ws.send_json(frame)
                error = ws.receive_json()
                assert error["type"] == "error"
                assert error["code"] == "UNKNOWN_MESSAGE"
            
            ws.send_json({"type": "frame", "frame": ["not", "base64"]})
            assert ws.receive_json()["code"] == "INVALID_FRAME"
            
            ws.send_json({"type": "scan", "raw_text": "SR1001"})
            assert ws.receive_json() == {"type": "feedback", "pattern": "accept"}
            
            ws.send_json({"type": "stop"})
