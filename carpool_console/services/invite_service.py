import base64
import io
import logging
import re
from datetime import datetime

import qrcode

from carpool_console.api_client import PlatformApiClient
from carpool_console.config import settings
from carpool_console.core.exceptions import ApiRequestError, ForbiddenException, ValidationException
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.invite_repository import InviteRepository
from carpool_console.schemas.invite_schemas import (
    BatchInviteRequest,
    InviteFailure,
    InviteLinkRequest,
    InviteLinkResponse,
    InviteRequest,
    InviteSummary,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_SEPARATORS = re.compile(r"[\n,;]+")


def qr_code_data_url(text: str) -> str:
    """Render ``text`` as a PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(version=1, box_size=10, border=2)
    qr.add_data(text)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode()}"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def parse_emails(raw: list[str] | str) -> tuple[list[str], list[str]]:
    """
    Split raw input into valid and invalid addresses.

    Blank entries are ignored and duplicates kept once, in input order.

    Returns:
        (valid, invalid)
    """
    items = EMAIL_SEPARATORS.split(raw) if isinstance(raw, str) else raw
    valid: list[str] = []
    invalid: list[str] = []
    for item in items:
        email = item.strip()
        if not email or email in valid or email in invalid:
            continue
        (valid if is_valid_email(email) else invalid).append(email)
    return valid, invalid


class InviteService:
    """Member invitations for one enterprise"""

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext):
        self.context = context
        self.invite_repo = InviteRepository(client, context.enterprise_id)

    def _check_can_invite(self) -> None:
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can invite members")

    async def invite(self, invite_request: InviteRequest) -> dict | None:
        """
        Invite one user by email (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
            ValidationException: If the email is malformed
        """
        self._check_can_invite()
        email = invite_request.email.strip()
        if not is_valid_email(email):
            raise ValidationException(f"Invalid email address: {email}")

        payload = invite_request.model_copy(update={"email": email}).to_payload()
        result = await self.invite_repo.send_invite(payload)
        logger.info(f"Invited {email} to {self.context.enterprise_id} as {invite_request.role.value}")
        return result

    async def batch_invite(self, batch_request: BatchInviteRequest) -> InviteSummary:
        """
        Invite several users, one request each, in order.

        Malformed addresses are dropped first; the limit applies to what
        remains and is checked before anything is sent. A failed invite is
        counted and the batch carries on; nothing is rolled back.

        Raises:
            ForbiddenException: If user lacks admin permissions
            ValidationException: If no valid address remains or too many do
        """
        self._check_can_invite()
        valid, invalid = parse_emails(batch_request.emails)
        if not valid:
            raise ValidationException("请输入至少一个有效的邮箱地址")
        if len(valid) > settings.BATCH_INVITE_LIMIT:
            raise ValidationException(f"一次最多邀请{settings.BATCH_INVITE_LIMIT}个用户")

        failures: list[InviteFailure] = []
        for email in valid:
            invite_request = InviteRequest(
                email=email,
                role=batch_request.role,
                department_id=batch_request.department_id,
                message=batch_request.message,
            )
            try:
                await self.invite_repo.send_invite(invite_request.to_payload())
            except ApiRequestError as e:
                logger.warning(f"Invite for {email} failed: {e.message}")
                failures.append(InviteFailure(email=email, error=e.message))

        succeeded = len(valid) - len(failures)
        message = f"批量邀请完成：成功 {succeeded} 个"
        if failures:
            message += f"，失败 {len(failures)} 个"
        logger.info(f"Batch invite for {self.context.enterprise_id}: {succeeded}/{len(valid)} sent")

        return InviteSummary(
            total=len(valid),
            succeeded=succeeded,
            failed=len(failures),
            invalid=invalid,
            failures=failures,
            message=message,
        )

    async def create_invite_link(self, link_request: InviteLinkRequest) -> InviteLinkResponse:
        """
        Create a shareable invite link with its QR code (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
            ApiRequestError: If the platform returns no link
        """
        self._check_can_invite()
        payload = link_request.to_payload()
        payload.setdefault("name", f"邀请链接-{datetime.now():%Y-%m-%d %H:%M:%S}")

        data = await self.invite_repo.create_invite_link(payload)
        if not data or not data.get("url"):
            raise ApiRequestError("生成邀请链接失败")
        return InviteLinkResponse(url=data["url"], qr_code=qr_code_data_url(data["url"]))
