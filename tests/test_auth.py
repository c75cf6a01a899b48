def test_register_login_me(client):
    r = client.post(
        "/auth/register",
        json={
            "username": "dave",
            "email": "dave@example.com",
            "password": "longenough",
        },
    )
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "STUDENT"

    r = client.post("/auth/login", json={"username": "dave", "password": "longenough"})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["username"] == "dave"
    assert r.json()["admin_for_courses"] == []


def test_register_cannot_choose_role(client):
    r = client.post(
        "/auth/register",
        json={
            "username": "mallory",
            "email": "mallory@example.com",
            "password": "longenough",
            "role": "INSTRUCTOR",
        },
    )
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "STUDENT"

    r = client.post("/auth/login", json={"username": "mallory", "password": "longenough"})
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}

    r = client.post("/courses/", headers=headers, json={"title": "Not mine"})
    assert r.status_code == 403


def test_duplicate_username_rejected(client):
    r = client.post(
        "/auth/register",
        json={"username": "alice", "email": "other@example.com", "password": "longenough"},
    )
    assert r.status_code == 400


def test_bad_password(client):
    r = client.post("/auth/login", json={"username": "alice", "password": "wrong-password"})
    assert r.status_code == 401


def test_invalid_token_is_anonymous(client):
    headers = {"Authorization": "Bearer not-a-jwt"}
    assert client.get("/auth/me", headers=headers).status_code == 401
    assert client.get("/courses/", headers=headers).status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
