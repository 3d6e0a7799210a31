from email_utils import mail

MESSAGE = {
    "name": "Jane",
    "email": "jane@students.edu",
    "subject": "Partnership",
    "message": "We would like to co-host an event.",
}


def test_contact_is_logged_without_recipient(client):
    with mail.record_messages() as outbox:
        response = client.post("/api/contact", json=MESSAGE)
    assert response.status_code == 200
    assert response.get_json() == {"message": "Message sent successfully", "forwarded": False}
    assert outbox == []


def test_contact_is_mailed_to_recipient(app, client):
    app.config["CONTACT_RECIPIENT"] = "team@collabzone.app"
    with mail.record_messages() as outbox:
        response = client.post("/api/contact", json=MESSAGE)

    assert response.get_json()["forwarded"] is True
    assert len(outbox) == 1
    sent = outbox[0]
    assert sent.recipients == ["team@collabzone.app"]
    assert sent.subject == "[CollabZone] Partnership"
    assert sent.reply_to == "jane@students.edu"
    assert "co-host" in sent.body


def test_contact_requires_all_fields(client):
    response = client.post("/api/contact", json={"name": "Jane"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "All fields are required"

    assert client.post("/api/contact").status_code == 400
