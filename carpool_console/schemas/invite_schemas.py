from pydantic import Field

from carpool_console.models.base import ApiModel
from carpool_console.models.role import EnterpriseRole


class InviteRequest(ApiModel):
    """Invite one user by email (ADMIN or OWNER)"""

    email: str = Field(..., min_length=3)
    role: EnterpriseRole = EnterpriseRole.MEMBER
    department_id: str | None = None
    message: str | None = None


class BatchInviteRequest(ApiModel):
    """
    Invite many users at once.

    ``emails`` may be a list or one string with an address per line
    (commas and semicolons also separate). Malformed entries are dropped
    before the size limit is checked.
    """

    emails: list[str] | str
    role: EnterpriseRole = EnterpriseRole.MEMBER
    department_id: str | None = None
    message: str | None = None


class InviteFailure(ApiModel):
    email: str
    error: str


class InviteSummary(ApiModel):
    total: int
    succeeded: int
    failed: int
    invalid: list[str] = Field(default_factory=list)
    failures: list[InviteFailure] = Field(default_factory=list)
    message: str


class InviteLinkRequest(ApiModel):
    name: str | None = None
    role: EnterpriseRole = EnterpriseRole.MEMBER
    department_id: str | None = None
    max_uses: int = Field(10, ge=1, le=100)
    expires_in_days: int = Field(7, ge=1, le=30)


class InviteLinkResponse(ApiModel):
    url: str
    qr_code: str | None = None
