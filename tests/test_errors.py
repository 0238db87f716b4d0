from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)


def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    assert response.json() == {"code": 404, "message": "Not Found", "type": "ERROR"}


def test_405_method_not_allowed():
    response = client.get("/register")
    assert response.status_code == 405
    data = response.json()
    assert data["code"] == 405
    assert data["type"] == "ERROR"


def test_validation_error_structure():
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["type"] == "ERROR"
    assert "price" in data["message"]


def test_custom_exception():
    from app.core.exceptions import WrongPasswordError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise WrongPasswordError()

    response = client.get("/test-custom-error")
    assert response.status_code == 400
    assert response.json() == {"code": 400, "message": "Wrong Password", "type": "ERROR"}


def test_unhandled_exception_returns_500():
    @app.get("/test-unhandled-error")
    def trigger_unhandled_error():
        raise RuntimeError("boom")

    safe_client = TestClient(app, raise_server_exceptions=False)
    response = safe_client.get("/test-unhandled-error")
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == 500
    assert data["type"] == "ERROR"
