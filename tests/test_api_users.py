from conftest import bearer


def test_create_user_hides_password(client):
    r = client.post(
        "/api/v1/users",
        json={"firstName": "a", "lastName": "b", "email": "c@c.c", "password": "x"},
    )
    assert r.status_code == 201
    body = r.json()
    assert isinstance(body["id"], int)
    assert body == {"id": body["id"], "firstName": "a", "lastName": "b", "email": "c@c.c", "isAdmin": False}
    assert "password" not in body and "passwordHash" not in body


def test_create_user_rejects_duplicate_email(client, user):
    r = client.post(
        "/api/v1/users",
        json={"firstName": "a", "lastName": "b", "email": user.email, "password": "x"},
    )
    assert r.status_code == 400
    assert "already exists" in r.json()["message"]


def test_create_user_validation_messages(client):
    base = {"firstName": "a", "lastName": "b", "email": "c@c.c", "password": "x"}

    r = client.post("/api/v1/users", json={k: v for k, v in base.items() if k != "firstName"})
    assert r.status_code == 400
    assert "firstName" in r.json()["message"] and "required" in r.json()["message"]

    r = client.post("/api/v1/users", json={**base, "lastName": ""})
    assert r.status_code == 400
    assert "lastName" in r.json()["message"]

    r = client.post("/api/v1/users", json={**base, "firstName": 1})
    assert r.status_code == 400
    assert "firstName" in r.json()["message"] and "string" in r.json()["message"]

    r = client.post("/api/v1/users", json={**base, "email": "not-an-email"})
    assert r.status_code == 400
    assert "email" in r.json()["message"]


def test_create_user_strips_markup_from_names(client):
    r = client.post(
        "/api/v1/users",
        json={"firstName": "<b>Ann</b>", "lastName": " Lee ", "email": "ann@example.com", "password": "x"},
    )
    assert r.status_code == 201
    assert r.json()["firstName"] == "Ann"
    assert r.json()["lastName"] == "Lee"

    r = client.post(
        "/api/v1/users",
        json={"firstName": "<i></i>", "lastName": "Lee", "email": "bob@example.com", "password": "x"},
    )
    assert r.status_code == 400


def test_list_users_requires_admin(client, user_headers, admin_headers, user):
    r = client.get("/api/v1/users")
    assert r.status_code == 412

    r = client.get("/api/v1/users", headers=user_headers)
    assert r.status_code == 403

    r = client.get("/api/v1/users", headers=admin_headers)
    assert r.status_code == 200
    assert [u["email"] for u in r.json()] == [user.email]
    assert all("password" not in u and "passwordHash" not in u for u in r.json())


def test_get_own_user(client, user, user_headers):
    r = client.get(f"/api/v1/users/{user.id}", headers=user_headers)
    assert r.status_code == 200
    assert r.json() == {"id": user.id, "firstName": "a", "lastName": "b", "email": "d@d.d", "isAdmin": False}


def test_update_own_user(client, user, user_headers):
    r = client.put(
        f"/api/v1/users/{user.id}",
        json={"firstName": "x", "lastName": "y", "email": "z@z.z"},
        headers=user_headers,
    )
    assert r.status_code == 200
    assert r.json() == {"id": user.id, "firstName": "x", "lastName": "y", "email": "z@z.z", "isAdmin": False}


def test_update_user_validates_payload(client, user, user_headers):
    r = client.put(f"/api/v1/users/{user.id}", json={"lastName": "y", "email": "z@z.z"}, headers=user_headers)
    assert r.status_code == 400
    assert "firstName" in r.json()["message"]


def test_update_user_rejects_email_of_another_user(client, user, user_headers, make_user):
    other = make_user(email="taken@example.com")
    r = client.put(
        f"/api/v1/users/{user.id}",
        json={"firstName": "x", "lastName": "y", "email": other.email},
        headers=user_headers,
    )
    assert r.status_code == 400


def test_update_other_user_is_forbidden(client, tokens, user, make_user):
    other = make_user(email="other@example.com")
    r = client.put(
        f"/api/v1/users/{user.id}",
        json={"firstName": "x", "lastName": "y", "email": "z@z.z"},
        headers=bearer(tokens.issue(other)),
    )
    assert r.status_code == 403


def test_delete_user_as_admin(client, admin_headers, user):
    r = client.delete(f"/api/v1/users/{user.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["id"] == user.id
    assert r.json()["email"] == "d@d.d"

    # Deleting again should return 404
    r = client.delete(f"/api/v1/users/{user.id}", headers=admin_headers)
    assert r.status_code == 404
    assert "not found" in r.json()["message"]

    r = client.get("/api/v1/users", headers=admin_headers)
    assert r.json() == []


def test_delete_user_requires_admin(client, user, user_headers):
    r = client.delete(f"/api/v1/users/{user.id}")
    assert r.status_code == 412
    r = client.delete(f"/api/v1/users/{user.id}", headers=user_headers)
    assert r.status_code == 403


def test_delete_user_with_invalid_id(client, admin_headers):
    r = client.delete("/api/v1/users/abc", headers=admin_headers)
    assert r.status_code == 400
    assert "not a valid number" in r.json()["message"]


def test_delete_user_removes_their_orders(client, admin_headers, user, user_headers):
    r = client.post(f"/api/v1/users/{user.id}/orders", headers=user_headers)
    assert r.status_code == 201

    r = client.delete(f"/api/v1/users/{user.id}", headers=admin_headers)
    assert r.status_code == 200

    r = client.get("/api/v1/orders", headers=admin_headers)
    assert r.json() == []
