from barbershop.auth import create_access_token


def test_login_success_returns_token(client):
    response = client.post("/api/admin/login", json={"password": "owner-pass-123"})

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    assert response.json()["access_token"]


def test_login_wrong_password_401(client):
    response = client.post("/api/admin/login", json={"password": "guess"})

    assert response.status_code == 401


def test_login_empty_password_401(client):
    response = client.post("/api/admin/login", json={"password": ""})

    assert response.status_code == 401


def test_owner_route_without_token_401(client):
    response = client.get("/api/owner/dashboard/stats")

    assert response.status_code == 401


def test_owner_route_with_garbage_token_401(client):
    response = client.get("/api/owner/dashboard/stats", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_owner_route_with_foreign_subject_401(client):
    token = create_access_token({"sub": "someone-else"})

    response = client.get("/api/owner/dashboard/stats", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_expired_token_401(client):
    token = create_access_token({"sub": "owner"}, expires_minutes=-1)

    response = client.get("/api/owner/dashboard/stats", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_owner_route_with_token_200(client, admin_headers):
    response = client.get("/api/owner/dashboard/stats", headers=admin_headers)

    assert response.status_code == 200


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
