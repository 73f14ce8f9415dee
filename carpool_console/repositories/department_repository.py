from carpool_console.api_client import PlatformApiClient
from carpool_console.models.department import Department, DepartmentTree


class DepartmentRepository:
    """Repository for an enterprise's departments"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str):
        self.client = client
        self.path = f"/api/enterprises/{enterprise_id}/departments"

    async def get_tree(self) -> DepartmentTree:
        """Get root departments with children nested, plus the total count"""
        data = await self.client.get(self.path)
        return DepartmentTree.model_validate(data)

    async def create(self, payload: dict) -> Department | None:
        data = await self.client.post(self.path, json=payload)
        return Department.model_validate(data) if data else None

    async def update(self, department_id: str, payload: dict) -> Department | None:
        data = await self.client.put(self.path, json=payload, params={"departmentId": department_id})
        return Department.model_validate(data) if data else None

    async def delete(self, department_id: str) -> None:
        await self.client.delete(self.path, params={"departmentId": department_id})
