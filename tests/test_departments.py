import pytest

from carpool_console.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from carpool_console.models.department import DepartmentTree
from carpool_console.schemas.department_schemas import DepartmentCreate, DepartmentUpdate
from carpool_console.services.department_service import DepartmentManager, flatten, parent_options
from tests.fake_platform import ENTERPRISES, FakePlatform

DEPARTMENTS_PATH = "/api/enterprises/ent-1/departments"


@pytest.fixture
def tree():
    platform = FakePlatform()
    return DepartmentTree.model_validate({
        "enterprise": ENTERPRISES["ent-1"],
        "departments": platform.department_tree("ent-1"),
        "totalCount": 4,
    })


class TestTree:
    def test_flatten_parents_first(self, tree):
        assert [d.id for d in flatten(tree.departments)] == ["d-eng", "d-backend", "d-api", "d-sales"]

    def test_counts_lifted(self, tree):
        engineering = tree.departments[0]
        assert engineering.child_count == 1
        assert engineering.children[0].group_count == 1
        assert engineering.descendant_ids() == {"d-backend", "d-api"}

    @pytest.mark.parametrize(
        "editing_id, excluded",
        [
            ("d-eng", {"d-eng", "d-backend", "d-api"}),
            ("d-backend", {"d-backend", "d-api"}),
            ("d-api", {"d-api"}),
            ("d-sales", {"d-sales"}),
        ],
    )
    def test_parent_options_exclude_self_and_descendants(self, tree, editing_id, excluded):
        option_ids = {option.id for option in parent_options(tree.departments, editing_id)}
        assert option_ids.isdisjoint(excluded)
        assert option_ids | excluded == {"d-eng", "d-backend", "d-api", "d-sales"}

    def test_new_department_may_go_anywhere(self, tree):
        options = parent_options(tree.departments)
        assert [(o.id, o.depth) for o in options] == [("d-eng", 0), ("d-backend", 1), ("d-api", 2), ("d-sales", 0)]


class TestDepartmentManager:
    async def test_create_refetches(self, api_client, platform, admin_context):
        manager = DepartmentManager(api_client, admin_context)

        tree = await manager.create(DepartmentCreate(name="Research", parent_id="d-eng"))

        assert platform.calls == [("POST", DEPARTMENTS_PATH), ("GET", DEPARTMENTS_PATH)]
        assert tree.total_count == 5
        engineering = tree.departments[0]
        assert "Research" in [child.name for child in engineering.children]

    async def test_member_cannot_create(self, api_client, platform, member_context):
        manager = DepartmentManager(api_client, member_context)

        with pytest.raises(ForbiddenException):
            await manager.create(DepartmentCreate(name="Research"))

        assert platform.calls == []

    async def test_update_rejects_cycle_before_put(self, api_client, platform, owner_context):
        manager = DepartmentManager(api_client, owner_context)

        with pytest.raises(ValidationException):
            await manager.update("d-eng", DepartmentUpdate(parent_id="d-api"))

        assert "PUT" not in [method for method, _ in platform.calls]

    async def test_update_rejects_self_parent(self, api_client, platform, owner_context):
        manager = DepartmentManager(api_client, owner_context)
        await manager.load()

        with pytest.raises(ValidationException):
            await manager.update("d-sales", DepartmentUpdate(parent_id="d-sales"))

        assert platform.paths("PUT") == []

    async def test_update_moves_department(self, api_client, platform, owner_context):
        manager = DepartmentManager(api_client, owner_context)

        tree = await manager.update("d-api", DepartmentUpdate(parent_id="d-sales"))

        assert platform.paths("PUT") == [DEPARTMENTS_PATH]
        sales = next(d for d in tree.departments if d.id == "d-sales")
        assert [child.id for child in sales.children] == ["d-api"]

    async def test_update_to_root_sends_null_parent(self, api_client, platform, owner_context):
        manager = DepartmentManager(api_client, owner_context)

        tree = await manager.update("d-backend", DepartmentUpdate(parent_id=None))

        assert {d.id for d in tree.departments} == {"d-eng", "d-backend", "d-sales"}

    async def test_delete_refetches(self, api_client, platform, admin_context):
        manager = DepartmentManager(api_client, admin_context)

        tree = await manager.delete("d-sales")

        assert platform.calls[-1] == ("GET", DEPARTMENTS_PATH)
        assert [d.id for d in tree.departments] == ["d-eng"]

    async def test_parent_options_unknown_department(self, api_client, member_context):
        manager = DepartmentManager(api_client, member_context)

        with pytest.raises(NotFoundException):
            await manager.parent_options("d-missing")

    async def test_page_actions_by_role(self, api_client, member_context, admin_context):
        member_page = DepartmentManager(api_client, member_context).page()
        admin_page = DepartmentManager(api_client, admin_context).page()

        assert member_page.actions == []
        assert [a.key for a in admin_page.actions] == ["create_department", "edit_department", "delete_department"]


class TestDepartmentRoutes:
    def test_list(self, client, auth_headers):
        response = client.get("/api/console/enterprises/ent-1/departments", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["totalCount"] == 4
        assert data["departments"][0]["children"][0]["name"] == "Backend"
        assert len(data["actions"]) == 3

    def test_create_as_member_forbidden(self, client, platform, auth_headers):
        response = client.post(
            "/api/console/enterprises/ent-2/departments",
            json={"name": "Ops"},
            headers=auth_headers,
        )

        assert response.status_code == 403
        assert ("POST", "/api/enterprises/ent-2/departments") not in platform.calls

    def test_create_validation(self, client, auth_headers):
        response = client.post("/api/console/enterprises/ent-1/departments", json={"name": ""}, headers=auth_headers)
        assert response.status_code == 422

    def test_cycle_rejected(self, client, auth_headers):
        response = client.put(
            "/api/console/enterprises/ent-1/departments/d-eng",
            json={"parentId": "d-backend"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_parent_options(self, client, auth_headers):
        response = client.get(
            "/api/console/enterprises/ent-1/departments/d-backend/parent-options",
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == ["d-eng", "d-sales"]
