import pytest

from carpool_console.core.exceptions import ForbiddenException
from carpool_console.models.account_pool import LoadBalanceStrategy, PoolType
from carpool_console.schemas.account_pool_schemas import AccountPoolCreate, AccountPoolUpdate
from carpool_console.services.account_pool_service import AccountPoolManager

POOLS_PATH = "/api/enterprises/ent-1/account-pools"


class TestAccountPoolManager:
    async def test_load_parses_bindings(self, api_client, member_context):
        manager = AccountPoolManager(api_client, member_context)

        pools = await manager.load()

        primary = pools[0]
        assert primary.pool_type is PoolType.SHARED
        assert primary.account_binding_count == 3
        assert primary.group_bindings[0].group.name == "Backend Carpool"
        assert primary.service_types() == ["claude", "gemini"]

    async def test_create_sends_defaults(self, api_client, platform, admin_context):
        manager = AccountPoolManager(api_client, admin_context)

        pools = await manager.create(AccountPoolCreate(name="Night shift"))

        created = platform.pools["ent-1"][-1]
        assert created["poolType"] == "shared"
        assert created["loadBalanceStrategy"] == "round_robin"
        assert created["maxLoadPerAccount"] == 80
        assert created["priority"] == 1
        assert created["accountIds"] == []
        assert platform.calls == [("POST", POOLS_PATH), ("GET", POOLS_PATH)]
        assert len(pools) == 3

    async def test_update_sends_only_changed_fields(self, api_client, platform, owner_context):
        manager = AccountPoolManager(api_client, owner_context)

        pools = await manager.update(
            "pool-2", AccountPoolUpdate(load_balance_strategy=LoadBalanceStrategy.LEAST_CONNECTIONS)
        )

        assert platform.paths("PUT") == [f"{POOLS_PATH}/pool-2"]
        assert pools[1].load_balance_strategy is LoadBalanceStrategy.LEAST_CONNECTIONS
        assert pools[1].max_load_per_account == 60

    async def test_delete(self, api_client, platform, admin_context):
        manager = AccountPoolManager(api_client, admin_context)

        pools = await manager.delete("pool-1")

        assert [pool.id for pool in pools] == ["pool-2"]

    @pytest.mark.parametrize("operation", ["create", "update", "delete"])
    async def test_member_refused_before_any_call(self, api_client, platform, member_context, operation):
        manager = AccountPoolManager(api_client, member_context)
        calls = {
            "create": lambda: manager.create(AccountPoolCreate(name="x")),
            "update": lambda: manager.update("pool-1", AccountPoolUpdate(priority=2)),
            "delete": lambda: manager.delete("pool-1"),
        }

        with pytest.raises(ForbiddenException):
            await calls[operation]()

        assert platform.calls == []


def test_pool_create_bounds():
    with pytest.raises(ValueError):
        AccountPoolCreate(name="x", max_load_per_account=101)
    with pytest.raises(ValueError):
        AccountPoolCreate(name="x", priority=0)


class TestAccountPoolRoutes:
    def test_list_includes_service_types(self, client, auth_headers):
        response = client.get("/api/console/enterprises/ent-1/account-pools", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["serviceTypes"] == {"pool-1": ["claude", "gemini"], "pool-2": ["gemini"]}
        assert data["pools"][0]["accountBindings"][0]["account"]["serviceType"] == "claude"
        assert [a["key"] for a in data["actions"]] == ["create_pool", "edit_pool", "delete_pool"]

    def test_create(self, client, auth_headers):
        response = client.post(
            "/api/console/enterprises/ent-1/account-pools",
            json={"name": "Burst", "poolType": "dedicated", "maxLoadPerAccount": 50},
            headers=auth_headers,
        )

        assert response.status_code == 201
        burst = response.json()["pools"][-1]
        assert burst["poolType"] == "dedicated"
        assert burst["maxLoadPerAccount"] == 50
