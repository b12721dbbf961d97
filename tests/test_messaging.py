from jobboard.core.enums import Role


def _start(client, headers, **body):
    response = client.post("/api/messages/conversations", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_applicant_starts_conversation(client, make_user, auth_headers):
    applicant = make_user()
    headers = auth_headers(applicant)

    conversation = _start(client, headers, subject="Interview schedule", initialMessage="  Hello there  ")
    assert conversation["applicantProfileId"] == applicant["profile_id"]
    assert conversation["lastMessageAt"] is not None
    assert conversation["messageCount"] == 1

    messages = client.get(
        f"/api/messages/conversations/{conversation['id']}/messages", headers=headers
    ).json()["data"]
    assert [m["content"] for m in messages] == ["Hello there"]
    assert messages[0]["senderRole"] == "APPLICANT"


def test_conversation_without_initial_message(client, make_user, auth_headers):
    conversation = _start(client, auth_headers(make_user()), subject="Question")
    assert conversation["lastMessageAt"] is None
    assert conversation["messageCount"] == 0


def test_staff_must_name_applicant_profile(client, make_user, auth_headers):
    staff = auth_headers(make_user(role=Role.HR))

    missing = client.post("/api/messages/conversations", headers=staff, json={"subject": "Hi"})
    assert missing.status_code == 400
    assert missing.json()["error"]["message"] == "applicantProfileId is required"

    unknown = client.post(
        "/api/messages/conversations", headers=staff, json={"applicantProfileId": "nope"}
    )
    assert unknown.status_code == 404

    applicant = make_user()
    conversation = _start(client, staff, applicantProfileId=applicant["profile_id"], initialMessage="Welcome")
    assert conversation["applicantProfileId"] == applicant["profile_id"]


def test_listing_is_scoped(client, make_user, auth_headers):
    first = make_user()
    second = make_user()
    _start(client, auth_headers(first), subject="first")
    _start(client, auth_headers(second), subject="second")

    own = client.get("/api/messages/conversations", headers=auth_headers(first)).json()["data"]
    assert [c["subject"] for c in own] == ["first"]

    staff = auth_headers(make_user(role=Role.ADMIN))
    everything = client.get("/api/messages/conversations", headers=staff).json()["data"]
    assert {c["subject"] for c in everything} == {"first", "second"}
    assert all("applicant" in c for c in everything)


def test_other_applicants_are_unauthorized(client, make_user, auth_headers):
    owner = make_user()
    intruder = auth_headers(make_user())
    conversation = _start(client, auth_headers(owner), initialMessage="private")
    base = f"/api/messages/conversations/{conversation['id']}"

    assert client.get(f"{base}/messages", headers=intruder).status_code == 401
    assert client.post(f"{base}/messages", headers=intruder, json={"content": "hi"}).status_code == 401
    assert client.post(f"{base}/read", headers=intruder).status_code == 401


def test_missing_conversation_is_not_found(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    response = client.get("/api/messages/conversations/nope/messages", headers=headers)
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Not found"

    posted = client.post("/api/messages/conversations/nope/messages", headers=headers, json={"content": "x"})
    assert posted.status_code == 404


def test_empty_content_is_rejected(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    conversation = _start(client, headers)
    response = client.post(
        f"/api/messages/conversations/{conversation['id']}/messages", headers=headers, json={"content": "   "}
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid content"


def test_reply_and_mark_read(client, make_user, auth_headers):
    applicant = make_user()
    applicant_headers = auth_headers(applicant)
    staff_headers = auth_headers(make_user(role=Role.HR))
    conversation = _start(client, applicant_headers, initialMessage="When is the interview?")
    base = f"/api/messages/conversations/{conversation['id']}"

    reply = client.post(f"{base}/messages", headers=staff_headers, json={"content": "Monday 9am"})
    assert reply.status_code == 201
    assert reply.json()["data"]["senderRole"] == "ADMIN"

    # staff reads the applicant's message only
    first = client.post(f"{base}/read", headers=staff_headers)
    assert first.json()["data"] == {"updatedCount": 1}
    second = client.post(f"{base}/read", headers=staff_headers)
    assert second.json()["data"] == {"updatedCount": 0}

    mine = client.post(f"{base}/read", headers=applicant_headers)
    assert mine.json()["data"] == {"updatedCount": 1}

    messages = client.get(f"{base}/messages", headers=applicant_headers).json()["data"]
    assert [m["content"] for m in messages] == ["When is the interview?", "Monday 9am"]
    assert all(m["readAt"] is not None for m in messages)
