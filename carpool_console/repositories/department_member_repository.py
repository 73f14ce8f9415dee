from carpool_console.api_client import PlatformApiClient
from carpool_console.models.department_member import DepartmentMember, EnterpriseUser


class DepartmentMemberRepository:
    """Repository for the members of one department"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str, department_id: str):
        self.client = client
        self.enterprise_path = f"/api/enterprises/{enterprise_id}"
        self.path = f"{self.enterprise_path}/departments/{department_id}/members"
        self.department_id = department_id

    async def get_all(self) -> list[DepartmentMember]:
        data = await self.client.get(self.path)
        members = data.get("members", []) if isinstance(data, dict) else data or []
        return [DepartmentMember.model_validate(item) for item in members]

    async def get_available_users(self, search: str | None = None) -> list[EnterpriseUser]:
        """Enterprise users who are not yet members of this department"""
        data = await self.client.get(
            f"{self.enterprise_path}/users",
            params={"not_in_department": self.department_id, "search": search or None},
        )
        users = data.get("users", []) if isinstance(data, dict) else data or []
        return [EnterpriseUser.model_validate(item) for item in users]

    async def add(self, payload: dict) -> DepartmentMember | None:
        data = await self.client.post(self.path, json=payload)
        return DepartmentMember.model_validate(data) if data else None

    async def update(self, member_id: str, payload: dict) -> None:
        await self.client.put(f"{self.path}/{member_id}", json=payload)

    async def remove(self, member_id: str) -> None:
        await self.client.delete(f"{self.path}/{member_id}")
