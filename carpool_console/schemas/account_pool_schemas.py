from pydantic import Field

from carpool_console.models.account_pool import AccountPool, LoadBalanceStrategy, PoolType
from carpool_console.models.base import ApiModel
from carpool_console.schemas.common_schemas import PageAction


class AccountPoolCreate(ApiModel):
    """Create account pool (ADMIN or OWNER)"""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    pool_type: PoolType = PoolType.SHARED
    load_balance_strategy: LoadBalanceStrategy = LoadBalanceStrategy.ROUND_ROBIN
    max_load_per_account: int = Field(80, ge=1, le=100)
    priority: int = Field(1, ge=1)
    account_ids: list[str] = Field(default_factory=list)


class AccountPoolUpdate(ApiModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    pool_type: PoolType | None = None
    load_balance_strategy: LoadBalanceStrategy | None = None
    max_load_per_account: int | None = Field(None, ge=1, le=100)
    priority: int | None = Field(None, ge=1)
    is_active: bool | None = None
    account_ids: list[str] | None = None


class AccountPoolPage(ApiModel):
    pools: list[AccountPool] = Field(default_factory=list)
    # pool id -> distinct service types of its bound accounts
    service_types: dict[str, list[str]] = Field(default_factory=dict)
    actions: list[PageAction] = Field(default_factory=list)
