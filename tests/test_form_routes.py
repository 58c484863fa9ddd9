from conftest import valid_values


def test_list_forms(client):
    forms = client.get("/forms").json()

    assert len(forms) == 9
    mast = next(form for form in forms if form["slug"] == "mast-permit")
    assert mast["type"] == "Mast Permit"
    assert [step["id"] for step in mast["steps"]] == [1, 2, 3, 4, 5]


def test_get_form_includes_defaults(client):
    body = client.get("/forms/stage-approval").json()

    assert body["type"] == "Stage Approval Application"
    assert body["defaults"]["declaration"] is False


def test_unknown_form(client):
    resp = client.get("/forms/demolition-permit")

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "Unknown permit form 'demolition-permit'"


def test_validate_whole_form(client):
    values = valid_values("mast-permit")
    values["siteTypeOfLand"] = "Private"

    body = client.post("/forms/mast-permit/validate", json={"values": values}).json()

    assert body == {"valid": False, "errors": {"siteProofOfOwnership": "Proof of Ownership is required for Private land"}}


def test_advance_step(client):
    values = valid_values("shop-owners-permit")

    moved = client.post("/forms/shop-owners-permit/steps/1/advance", json={"values": values}).json()
    assert moved["advanced"] is True
    assert moved["position"] == 2

    blocked = client.post("/forms/shop-owners-permit/steps/3/advance", json={"values": {}}).json()
    assert blocked["advanced"] is False
    assert set(blocked["errors"]) == {"typeOfDevelopment", "categoryOfBusiness", "plotAddressDescription"}

    done = client.post("/forms/shop-owners-permit/steps/4/advance", json={"values": values}).json()
    assert done["ready_to_submit"] is True


def test_advance_step_out_of_range(client):
    resp = client.post("/forms/shop-owners-permit/steps/9/advance", json={"values": {}})

    assert resp.status_code == 400
