def test_create_college(client):
    response = client.post("/api/colleges", json={"name": "Tech U", "email": "a@b.com", "location": "City"})
    assert response.status_code == 201
    body = response.get_json()
    assert body["id"] == 1
    assert body["isApproved"] is True
    assert body["studentsCount"] == 0
    assert "password" not in body


def test_create_college_ignores_client_approval(app, client):
    app.config["AUTO_APPROVE_COLLEGES"] = False
    response = client.post("/api/colleges", json={"name": "Tech U", "email": "a@b.com", "isApproved": True})
    assert response.status_code == 201
    assert response.get_json()["isApproved"] is False


def test_create_college_validation(client):
    response = client.post("/api/colleges", json={"email": "broken"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Invalid college data"
    assert "name is required" in body["errors"]


def test_create_college_without_body(client):
    response = client.post("/api/colleges", data="not json", content_type="text/plain")
    assert response.status_code == 400
    assert response.get_json() == {"message": "No data provided"}


def test_duplicate_email_is_rejected(client, make_college):
    make_college(email="admin@techu.edu")
    response = client.post("/api/colleges", json={"name": "Copy", "email": "ADMIN@techu.edu"})
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["email is already registered"]


def test_list_only_shows_approved(app, client, make_college):
    make_college(name="Visible", email="v@visible.edu")
    app.config["AUTO_APPROVE_COLLEGES"] = False
    make_college(name="Pending", email="p@pending.edu")

    response = client.get("/api/colleges")
    assert response.status_code == 200
    assert [c["name"] for c in response.get_json()] == ["Visible"]


def test_get_college_with_events(client, make_college, make_event):
    college = make_college()
    event = make_event(college["id"])

    response = client.get(f"/api/colleges/{college['id']}")
    assert response.status_code == 200
    body = response.get_json()
    assert body["college"]["id"] == college["id"]
    assert [e["id"] for e in body["events"]] == [event["id"]]


def test_get_college_errors(client):
    assert client.get("/api/colleges/99").status_code == 404
    assert client.get("/api/colleges/99").get_json() == {"message": "College not found"}

    response = client.get("/api/colleges/abc")
    assert response.status_code == 400
    assert response.get_json() == {"message": "Invalid college id"}
