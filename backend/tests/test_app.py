"""Application wiring: CORS, API docs and health probes."""

from app.db.migrate import head_revision


def test_preflight_from_any_origin_is_allowed(client):
    response = client.options(
        "/api/products/",
        headers={
            "Origin": "https://shop.example.com",
            "Access-Control-Request-Method": "DELETE",
            "Access-Control-Request-Headers": "X-Requested-With",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "DELETE" in response.headers["access-control-allow-methods"]
    assert "x-requested-with" in response.headers["access-control-allow-headers"].lower()


def test_simple_request_carries_cors_header(client):
    response = client.get("/api/products/", headers={"Origin": "http://localhost:5173"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_openapi_documents_product_routes(client):
    response = client.get("/openapi.json")

    assert response.status_code == 200
    paths = response.json()["paths"]
    assert set(paths["/api/products/"]) == {"get", "post"}
    assert set(paths["/api/products/{product_id}"]) == {"get", "put", "delete"}


def test_swagger_ui_is_served(client):
    response = client.get("/swagger")

    assert response.status_code == 200
    assert "swagger-ui" in response.text


def test_liveness(client):
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "product-api"}


def test_readiness_on_migrated_database(client):
    response = client.get("/health/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["checks"]["database"]["status"] == "healthy"
    assert body["checks"]["migrations"] == {
        "status": "healthy",
        "current": head_revision(),
        "head": head_revision(),
    }


def test_readiness_fails_before_migration(engine, client_factory):
    client = client_factory(engine)

    response = client.get("/health/ready")

    assert response.status_code == 503
    detail = response.json()["detail"]
    assert detail["status"] == "unhealthy"
    assert detail["checks"]["migrations"]["current"] is None
