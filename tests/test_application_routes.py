import json

from conftest import APPLICANT, OTHER_APPLICANT, REVIEWER, act_as, sign_out, valid_values


def submit(client, **overrides):
    form = {
        "type": "Building Permit (Individual)",
        "applicantName": "Amina Bello",
        "userId": APPLICANT["id"],
        "data": json.dumps(valid_values("residential-building-permit")),
    }
    form.update(overrides)
    form = {key: value for key, value in form.items() if value is not None}
    return client.post("/applications", data=form)


def test_submit_then_read_back(client):
    resp = submit(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Application submitted successfully!"
    assert "error" not in body

    detail = client.get(f"/applications/{body['applicationId']}")
    assert detail.status_code == 200
    record = detail.json()
    assert record["status"] == "Pending"
    assert record["userId"] == APPLICANT["id"]
    assert record["applicantName"] == "Amina Bello"
    assert record["data"]["firstName"] == "Amina"
    assert record["documents"] == []


def test_submission_without_user_is_unprocessable(client, repository):
    resp = submit(client, userId=None)

    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["reason"] == "invalid_envelope"
    assert body["fieldErrors"] == {"userId": "User ID must be provided."}


def test_submission_for_someone_else_is_forbidden(client):
    resp = submit(client, userId=OTHER_APPLICANT["id"])

    assert resp.status_code == 403
    assert resp.json() == {
        "success": False,
        "reason": "forbidden",
        "error": "You can only submit applications for your own account",
    }
    act_as(REVIEWER)
    assert client.get("/admin/applications").json() == []


def test_malformed_form_data(client):
    resp = submit(client, data="{not json")

    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "reason": "malformed_payload",
        "error": "Internal server error: Could not process form data.",
    }


def test_applicant_lists_only_own_applications(client):
    submit(client)
    submit(client)
    act_as(OTHER_APPLICANT)
    submit(client, userId=OTHER_APPLICANT["id"], applicantName="Musa Ibrahim")

    act_as(APPLICANT)
    mine = client.get("/applications/mine").json()

    assert len(mine) == 2
    assert {item["userId"] for item in mine} == {APPLICANT["id"]}
    assert mine[0]["date"] >= mine[1]["date"]


def test_other_applicants_cannot_view_an_application(client):
    application_id = submit(client).json()["applicationId"]

    act_as(OTHER_APPLICANT)
    assert client.get(f"/applications/{application_id}").status_code == 403

    act_as(REVIEWER)
    assert client.get(f"/applications/{application_id}").status_code == 200


def test_unknown_application(client):
    resp = client.get("/applications/APP-0-NOPE0")

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Application not found"


def test_anonymous_submission_is_refused(client):
    sign_out()

    resp = submit(client)

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"
    assert resp.json() == {
        "success": False,
        "reason": "unauthenticated",
        "error": "You must be logged in to submit.",
    }


def test_invalid_token_is_treated_as_anonymous(client):
    sign_out()

    resp = client.post("/applications", data={"type": "DIN Application"}, headers={"Authorization": "Bearer not-a-token"})

    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_dashboard_still_requires_authentication(client):
    sign_out()

    resp = client.get("/applications/mine")

    assert resp.status_code == 401


def test_new_submission_shows_up_pending_on_the_dashboard(client):
    application_id = submit(client).json()["applicationId"]

    mine = client.get("/applications/mine").json()

    assert [(item["id"], item["status"]) for item in mine] == [(application_id, "Pending")]
