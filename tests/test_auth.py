def test_college_login(client, make_college):
    college = make_college(email="admin@techu.edu", password="secret123")

    response = client.post("/api/college/login", json={"email": "Admin@TechU.edu", "password": "secret123"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["college"]["id"] == college["id"]
    assert "password" not in body["college"]
    assert body["token"] == "mock-jwt-token"


def test_college_login_wrong_password(client, make_college):
    make_college(email="admin@techu.edu", password="secret123")
    response = client.post("/api/college/login", json={"email": "admin@techu.edu", "password": "nope"})
    assert response.status_code == 401
    assert response.get_json() == {"message": "Invalid email or password"}


def test_college_login_unknown_email(client):
    response = client.post("/api/college/login", json={"email": "ghost@techu.edu", "password": "x"})
    assert response.status_code == 401


def test_college_login_pending_approval(app, client, make_college):
    app.config["AUTO_APPROVE_COLLEGES"] = False
    make_college(email="admin@techu.edu", password="secret123")

    response = client.post("/api/college/login", json={"email": "admin@techu.edu", "password": "secret123"})
    assert response.status_code == 403
    assert response.get_json() == {"message": "College account is pending approval"}


def test_college_login_missing_fields(client):
    response = client.post("/api/college/login", json={"email": "admin@techu.edu"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "Email and password are required"


def test_admin_login(client):
    response = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["admin"]["username"] == "admin"
    assert "password" not in body["admin"]
    assert body["token"] == "mock-admin-token"


def test_admin_login_rejects_bad_credentials(client):
    response = client.post("/api/admin/login", json={"username": "admin", "password": "guess"})
    assert response.status_code == 401
    assert response.get_json() == {"message": "Invalid credentials"}

    assert client.post("/api/admin/login", json={}).status_code == 400
