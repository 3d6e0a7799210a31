import pytest


@pytest.fixture
def college(make_college):
    return make_college()


def test_create_event(client, college):
    response = client.post("/api/events", json={
        "name": "Fest",
        "collegeId": college["id"],
        "date": "2030-01-01T10:00:00Z",
        "fee": 0,
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body["currentParticipants"] == 0
    assert body["isActive"] is True
    assert body["date"] == "2030-01-01T10:00:00Z"


def test_create_event_for_missing_college(client):
    response = client.post("/api/events", json={"name": "Fest", "collegeId": 42, "date": "2030-01-01T10:00:00Z"})
    assert response.status_code == 404
    assert response.get_json() == {"message": "College not found"}


def test_create_event_validation(client, college):
    response = client.post("/api/events", json={"collegeId": college["id"], "date": "whenever"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Invalid event data"
    assert set(body["errors"]) == {"name is required", "date must be an ISO-8601 date"}


def test_create_event_rejects_malformed_fee(client, college):
    for fee in ("--5", "\u00b2"):
        response = client.post("/api/events", json={"name": "Fest", "collegeId": college["id"], "date": "2030-01-01", "fee": fee})
        assert response.status_code == 400
        assert response.get_json()["errors"] == ["fee must be an integer"]


def test_get_event_includes_college_name(client, college, make_event):
    event = make_event(college["id"])
    response = client.get(f"/api/events/{event['id']}")
    assert response.status_code == 200
    assert response.get_json()["collegeName"] == "Tech U"


def test_list_event_filters(client, college, make_event):
    fest = make_event(college["id"], category="technical")
    past = make_event(college["id"], name="Old", date="2020-01-01T10:00:00Z", category="cultural")
    hidden = make_event(college["id"], name="Hidden", category="technical", isActive=False)

    all_ids = [e["id"] for e in client.get("/api/events").get_json()]
    assert all_ids == [hidden["id"], past["id"], fest["id"]]

    technical = client.get("/api/events?category=Technical").get_json()
    assert [e["id"] for e in technical] == [fest["id"]]

    upcoming = client.get("/api/events?type=upcoming").get_json()
    assert [e["id"] for e in upcoming] == [fest["id"]]

    finished = client.get("/api/events?type=past").get_json()
    assert [e["id"] for e in finished] == [past["id"]]

    by_college = client.get(f"/api/events?collegeId={college['id']}").get_json()
    assert len(by_college) == 3


def test_list_event_bad_filters(client):
    assert client.get("/api/events?type=someday").status_code == 400
    assert client.get("/api/events?collegeId=abc").get_json() == {"message": "Invalid college id"}


def test_update_event_merges(client, college, make_event):
    event = make_event(college["id"], location="Main Hall")
    response = client.put(f"/api/events/{event['id']}", json={"fee": 250, "hosts": ["Tech Club"]})
    assert response.status_code == 200
    body = response.get_json()
    assert body["fee"] == 250
    assert body["hosts"] == ["Tech Club"]
    assert body["location"] == "Main Hall"
    assert body["name"] == "Fest"


def test_update_event_errors(client, college, make_event):
    event = make_event(college["id"])
    assert client.put("/api/events/99", json={"fee": 1}).status_code == 404
    assert client.put("/api/events/abc", json={"fee": 1}).status_code == 400
    assert client.put(f"/api/events/{event['id']}", json={}).get_json() == {"message": "No data provided"}
    assert client.put(f"/api/events/{event['id']}", json={"fee": -5}).status_code == 400
    assert client.put(f"/api/events/{event['id']}", json={"collegeId": 77}).status_code == 404


def test_delete_event(client, college, make_event):
    event = make_event(college["id"])
    response = client.delete(f"/api/events/{event['id']}")
    assert response.status_code == 200
    assert response.get_json() == {"message": "Event deleted successfully"}

    assert client.get(f"/api/events/{event['id']}").status_code == 404
    assert client.get("/api/events").get_json() == []
    assert client.delete(f"/api/events/{event['id']}").status_code == 404


def test_event_registrations(client, college, make_event, registration_payload):
    event = make_event(college["id"])
    client.post("/api/registrations", json=registration_payload(event["id"]))

    response = client.get(f"/api/events/{event['id']}/registrations")
    assert response.status_code == 200
    assert [r["fullName"] for r in response.get_json()] == ["Jane"]

    assert client.get("/api/events/99/registrations").status_code == 404


def test_events_on_database_backend(db_client):
    college = db_client.post("/api/colleges", json={"name": "Tech U", "email": "a@b.com"}).get_json()
    event = db_client.post("/api/events", json={
        "name": "Fest", "collegeId": college["id"], "date": "2030-01-01T10:00:00Z"
    }).get_json()

    fetched = db_client.get(f"/api/events/{event['id']}").get_json()
    assert fetched["collegeName"] == "Tech U"
    assert db_client.delete(f"/api/events/{event['id']}").status_code == 200
    assert db_client.get(f"/api/events/{event['id']}").status_code == 404


def test_oversized_fee_rejected_on_database_backend(db_client):
    college = db_client.post("/api/colleges", json={"name": "Tech U", "email": "a@b.com"}).get_json()
    response = db_client.post("/api/events", json={
        "name": "Fest", "collegeId": college["id"], "date": "2030-01-01T10:00:00Z", "fee": 10**30
    })
    assert response.status_code == 400
    assert response.get_json()["errors"] == ["fee must be at most 2147483647"]
    assert db_client.get("/api/events").get_json() == []
