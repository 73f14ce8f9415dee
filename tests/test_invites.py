import base64

import pytest

from carpool_console.core.exceptions import ForbiddenException, ValidationException
from carpool_console.models.role import EnterpriseRole
from carpool_console.schemas.invite_schemas import BatchInviteRequest, InviteLinkRequest, InviteRequest
from carpool_console.services.invite_service import InviteService, is_valid_email, parse_emails


class TestParseEmails:
    def test_split_trim_and_validate(self):
        valid, invalid = parse_emails("alice@acme.com\n  bob@acme.com \n\nnot-an-email\ncarol@acme")

        assert valid == ["alice@acme.com", "bob@acme.com"]
        assert invalid == ["not-an-email", "carol@acme"]

    def test_commas_semicolons_and_duplicates(self):
        valid, invalid = parse_emails("a@x.io, b@x.io; a@x.io")
        assert valid == ["a@x.io", "b@x.io"]
        assert invalid == []

    def test_list_input(self):
        valid, _ = parse_emails([" a@x.io ", ""])
        assert valid == ["a@x.io"]

    @pytest.mark.parametrize("email", ["a b@x.io", "@x.io", "a@", "a@@x.io"])
    def test_invalid(self, email):
        assert not is_valid_email(email)


class TestBatchInvite:
    async def test_more_than_limit_rejected_before_any_call(self, api_client, platform, admin_context):
        emails = [f"user{i}@acme.com" for i in range(51)]

        with pytest.raises(ValidationException, match="50"):
            await InviteService(api_client, admin_context).batch_invite(BatchInviteRequest(emails=emails))

        assert platform.calls == []

    async def test_invalid_addresses_filtered_before_limit(self, api_client, platform, admin_context):
        emails = [f"user{i}@acme.com" for i in range(50)] + ["broken", "also@broken"]

        summary = await InviteService(api_client, admin_context).batch_invite(BatchInviteRequest(emails=emails))

        assert summary.total == 50
        assert summary.succeeded == 50
        assert summary.invalid == ["broken", "also@broken"]
        assert len(platform.paths("POST")) == 50

    async def test_nothing_valid(self, api_client, platform, admin_context):
        with pytest.raises(ValidationException):
            await InviteService(api_client, admin_context).batch_invite(BatchInviteRequest(emails="nope\nstill-nope"))
        assert platform.calls == []

    async def test_failures_counted_and_batch_continues(self, api_client, platform, owner_context):
        request = BatchInviteRequest(
            emails="a@acme.com\ntaken@acme.com\nb@acme.com",
            role=EnterpriseRole.ADMIN,
            department_id="d-eng",
        )

        summary = await InviteService(api_client, owner_context).batch_invite(request)

        assert (summary.succeeded, summary.failed) == (2, 1)
        assert summary.failures[0].email == "taken@acme.com"
        assert summary.failures[0].error == "User is already a member"
        assert summary.message == "批量邀请完成：成功 2 个，失败 1 个"
        assert [invite["email"] for invite in platform.invites] == ["a@acme.com", "b@acme.com"]
        assert platform.invites[0]["role"] == "admin"
        assert platform.invites[0]["departmentId"] == "d-eng"

    async def test_summary_without_failures(self, api_client, admin_context):
        summary = await InviteService(api_client, admin_context).batch_invite(BatchInviteRequest(emails=["a@acme.com"]))
        assert summary.message == "批量邀请完成：成功 1 个"

    async def test_member_cannot_invite(self, api_client, platform, member_context):
        with pytest.raises(ForbiddenException):
            await InviteService(api_client, member_context).batch_invite(BatchInviteRequest(emails=["a@acme.com"]))
        assert platform.calls == []


class TestSingleInviteAndLinks:
    async def test_invite_one(self, api_client, platform, admin_context):
        await InviteService(api_client, admin_context).invite(InviteRequest(email=" new@acme.com "))

        assert platform.invites == [{"email": "new@acme.com", "role": "member"}]

    async def test_invite_malformed(self, api_client, platform, admin_context):
        with pytest.raises(ValidationException):
            await InviteService(api_client, admin_context).invite(InviteRequest(email="new-at-acme"))
        assert platform.calls == []

    async def test_invite_link_defaults(self, api_client, platform, admin_context):
        link = await InviteService(api_client, admin_context).create_invite_link(InviteLinkRequest())

        assert link.url == "https://carpool.test/invite/link-1"
        assert link.qr_code.startswith("data:image/png;base64,")
        assert base64.b64decode(link.qr_code.split(",", 1)[1]).startswith(b"\x89PNG")
        sent = platform.invite_links[0]
        assert sent["maxUses"] == 10
        assert sent["expiresInDays"] == 7
        assert sent["name"].startswith("邀请链接-")

    def test_invite_link_bounds(self):
        with pytest.raises(ValueError):
            InviteLinkRequest(max_uses=101)
        with pytest.raises(ValueError):
            InviteLinkRequest(expires_in_days=31)


class TestInviteRoutes:
    def test_batch(self, client, auth_headers):
        response = client.post(
            "/api/console/enterprises/ent-1/invites/batch",
            json={"emails": "x@acme.com\ny@acme.com\nbad"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["succeeded"] == 2
        assert data["invalid"] == ["bad"]

    def test_batch_over_limit(self, client, platform, auth_headers):
        emails = "\n".join(f"u{i}@acme.com" for i in range(60))
        response = client.post(
            "/api/console/enterprises/ent-1/invites/batch",
            json={"emails": emails},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert platform.invites == []

    def test_single_invite_conflict(self, client, auth_headers):
        response = client.post(
            "/api/console/enterprises/ent-1/invites",
            json={"email": "taken@acme.com"},
            headers=auth_headers,
        )
        assert response.status_code == 409

    def test_invite_link(self, client, auth_headers):
        response = client.post(
            "/api/console/enterprises/ent-1/invite-links",
            json={"role": "member", "maxUses": 3},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["url"] == "https://carpool.test/invite/link-1"
        assert data["qrCode"].startswith("data:image/png;base64,")
