from carpool_console.api_client import PlatformApiClient
from carpool_console.models.permission import PermissionCatalog, UserPermission


class PermissionRepository:
    """Repository for enterprise roles and per-user role bindings"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str):
        self.client = client
        self.path = f"/api/enterprises/{enterprise_id}"

    async def get_catalog(self) -> PermissionCatalog:
        data = await self.client.get(f"{self.path}/permissions")
        return PermissionCatalog.model_validate(data or {})

    async def get_user_roles(self, user_id: str) -> list[UserPermission]:
        data = await self.client.get(f"{self.path}/users/{user_id}/roles")
        return [UserPermission.model_validate(item) for item in (data or {}).get("effectiveRoles", [])]

    async def assign_role(self, user_id: str, payload: dict) -> None:
        await self.client.post(f"{self.path}/users/{user_id}/roles", json=payload)

    async def revoke_role(
        self,
        user_id: str,
        role_id: str,
        department_id: str | None = None,
        group_id: str | None = None,
    ) -> None:
        await self.client.delete(
            f"{self.path}/users/{user_id}/roles",
            params={"roleId": role_id, "departmentId": department_id, "groupId": group_id},
        )
