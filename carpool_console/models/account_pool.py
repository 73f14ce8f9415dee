from enum import Enum as PyEnum
from typing import Any
from pydantic import Field, model_validator

from carpool_console.models.base import ApiModel, TimestampMixin, lift_counts


class PoolType(str, PyEnum):
    """Account pool sharing mode"""

    SHARED = "shared"
    DEDICATED = "dedicated"


class LoadBalanceStrategy(str, PyEnum):
    """How the platform spreads requests over a pool's accounts"""

    ROUND_ROBIN = "round_robin"
    LEAST_CONNECTIONS = "least_connections"
    WEIGHTED = "weighted"


class BoundAccount(ApiModel):
    id: str
    name: str
    service_type: str
    status: str = "active"
    is_enabled: bool = True


class AccountBinding(ApiModel):
    """Join record between a pool and an AI account."""

    id: str
    weight: float = 1
    max_load_percentage: float = 100
    is_active: bool = True
    account: BoundAccount


class BoundGroup(ApiModel):
    id: str
    name: str


class GroupBinding(ApiModel):
    """Join record between a pool and a carpool group."""

    id: str
    binding_type: str = "shared"
    priority: int = 1
    group: BoundGroup


class AccountPool(TimestampMixin):
    """
    Named collection of AI accounts with a load-balancing policy.

    The balancing itself happens on the platform; the console only edits
    the policy and shows the bindings.
    """

    id: str
    name: str
    description: str | None = None
    pool_type: PoolType = PoolType.SHARED
    load_balance_strategy: LoadBalanceStrategy = LoadBalanceStrategy.ROUND_ROBIN
    max_load_per_account: int = 80
    priority: int = 1
    is_active: bool = True
    account_bindings: list[AccountBinding] = Field(default_factory=list)
    group_bindings: list[GroupBinding] = Field(default_factory=list)
    account_binding_count: int = 0
    group_binding_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _lift_counts(cls, data: Any) -> Any:
        return lift_counts(
            data,
            {"accountBindings": "accountBindingCount", "groupBindings": "groupBindingCount"},
        )

    def service_types(self) -> list[str]:
        """Distinct service types of the bound accounts, in binding order."""
        return list(dict.fromkeys(binding.account.service_type for binding in self.account_bindings))
