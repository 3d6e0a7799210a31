def test_create_and_list_users(client):
    response = client.post("/api/users", json={"username": "jane", "email": "jane@students.edu"})
    assert response.status_code == 201
    user = response.get_json()
    assert user["role"] == "student"
    assert user["collegeId"] is None

    assert [u["username"] for u in client.get("/api/users").get_json()] == ["jane"]


def test_user_with_college(client, make_college):
    college = make_college()
    response = client.post("/api/users", json={
        "username": "dean", "email": "dean@techu.edu", "role": "college_admin", "collegeId": college["id"]
    })
    assert response.status_code == 201
    assert response.get_json()["role"] == "college_admin"
    assert response.get_json()["collegeId"] == college["id"]

    response = client.post("/api/users", json={"username": "x", "email": "x@techu.edu", "collegeId": 99})
    assert response.status_code == 404


def test_duplicate_users_rejected(client):
    client.post("/api/users", json={"username": "jane", "email": "jane@students.edu"})
    response = client.post("/api/users", json={"username": "jane", "email": "JANE@students.edu"})
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["username is already taken", "email is already registered"]


def test_invalid_role(client):
    response = client.post("/api/users", json={"username": "jane", "email": "jane@students.edu", "role": "dean"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid user data"


def test_list_users_store_failure(monkeypatch, client, app_storage):
    def broken():
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(app_storage, "list_users", broken)
    response = client.get("/api/users")
    assert response.status_code == 500
    assert response.get_json() == {"message": "Failed to fetch users"}
