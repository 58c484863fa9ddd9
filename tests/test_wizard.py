from datetime import date

import httpx
import pytest

from permit_portal.client import ApplicationWizard, IdentityProvider
from permit_portal.client.wizard import NOT_READY_MESSAGE, SIGNED_OUT_MESSAGE
from permit_portal.forms import FileReference, get_schema
from permit_portal.core.auth_dependencies import get_optional_user
from permit_portal.main import app
from permit_portal.repositories.application_repository import get_application_repository

from conftest import APPLICANT, OTHER_APPLICANT, act_as, sign_out, valid_values


@pytest.fixture
def api(repository):
    app.dependency_overrides = {}
    app.dependency_overrides[get_application_repository] = lambda: repository
    act_as(APPLICANT)
    yield app
    app.dependency_overrides = {}


def http_client(asgi_app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=asgi_app), base_url="http://testserver")


@pytest.mark.asyncio
async def test_wizard_submits_a_stage_approval(api, repository):
    async with http_client(api) as client:
        identity = IdentityProvider(client, token="test-token")
        wizard = ApplicationWizard(get_schema("stage-approval"), client, identity)
        wizard.update(valid_values("stage-approval"))
        wizard.set_value("dateOfBirth", date(1990, 5, 14))
        wizard.set_value("docCO", FileReference(name="cofo.pdf", size=20480, media_type="application/pdf"))

        positions = [wizard.advance().position for _ in range(3)]
        assert positions == [2, 3, 3]
        assert wizard.ready_to_submit

        result = await wizard.submit()

    assert result.success, result.error
    assert wizard.application_id == result.applicationId

    record = await repository.get_by_id(result.applicationId)
    assert record.type == "Stage Approval Application"
    assert record.applicantName == "Amina Bello"
    assert record.userId == APPLICANT["id"]
    assert record.data["dateOfBirth"] == "1990-05-14"
    assert record.data["docCO"] == {"name": "cofo.pdf", "size": 20480, "mediaType": "application/pdf"}


@pytest.mark.asyncio
async def test_wizard_blocks_on_invalid_step(api):
    async with http_client(api) as client:
        wizard = ApplicationWizard(get_schema("stage-approval"), client, IdentityProvider(client, token="test-token"))

        result = wizard.advance()

    assert not result.advanced
    assert wizard.position == 1
    assert wizard.errors["firstName"] == "First name is required"


@pytest.mark.asyncio
async def test_submit_before_last_step(api, repository):
    async with http_client(api) as client:
        wizard = ApplicationWizard(get_schema("din-application"), client, IdentityProvider(client, token="test-token"))

        result = await wizard.submit()

    assert not result.success
    assert result.error == NOT_READY_MESSAGE
    assert await repository.query() == []


@pytest.mark.asyncio
async def test_submit_while_signed_out(api, repository):
    sign_out()

    async with http_client(api) as client:
        identity = IdentityProvider(client)
        wizard = ApplicationWizard(get_schema("din-application"), client, identity)
        wizard.update(valid_values("din-application"))
        assert wizard.advance().ready_to_submit

        result = await wizard.submit()

    assert not result.success
    assert result.error == SIGNED_OUT_MESSAGE
    assert await repository.query() == []


@pytest.mark.asyncio
async def test_identity_subscribers_are_notified(api):
    seen = []

    async with http_client(api) as client:
        identity = IdentityProvider(client, token="test-token")
        unsubscribe = identity.subscribe(seen.append)

        actor = await identity.wait()
        unsubscribe()
        identity.set_token(None)
        await identity.resolve()

    assert actor.id == APPLICANT["id"]
    assert actor.display_name == "Amina Bello"
    assert [item.id if item else None for item in seen] == ["u1"]
    assert identity.current is None


@pytest.mark.asyncio
async def test_wizard_reports_refused_submission(api, repository):
    # The session changed accounts after the wizard resolved its actor
    app.dependency_overrides[get_optional_user] = lambda: OTHER_APPLICANT

    async with http_client(api) as client:
        wizard = ApplicationWizard(get_schema("din-application"), client, IdentityProvider(client, token="test-token"))
        wizard.update(valid_values("din-application"))
        wizard.advance()

        result = await wizard.submit()

    assert not result.success
    assert result.reason.value == "forbidden"
    assert result.error == "You can only submit applications for your own account"
    assert wizard.application_id is None
    assert await repository.query() == []
