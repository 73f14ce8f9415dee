"""Alert and model-health monitors with periodic background refresh."""

import asyncio
import logging
from typing import AsyncIterator

from carpool_console.api_client import PlatformApiClient
from carpool_console.config import settings
from carpool_console.core.exceptions import ForbiddenException, ValidationException
from carpool_console.core.refresher import PeriodicRefresher
from carpool_console.models.alert import AlertSummary
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.models.model_health import ModelHealth, ModelStatus
from carpool_console.repositories.monitoring_repository import AlertRepository, ModelHealthRepository
from carpool_console.schemas.monitoring_schemas import AlertPage, ModelPage
from carpool_console.services.page_actions import actions_for

logger = logging.getLogger(__name__)


class Monitor:
    """
    Base for monitors that refetch on a timer.

    Subclasses implement ``fetch()``; ``start()``/``stop()`` drive it in
    the background and ``snapshots()`` yields each fresh result.
    """

    interval: float = 30.0
    name: str = "monitor"

    def __init__(self):
        self.refresher = PeriodicRefresher(self._refresh, self.interval, name=self.name)
        self._listeners: list[asyncio.Queue] = []

    async def fetch(self):
        raise NotImplementedError

    async def _refresh(self) -> None:
        snapshot = await self.fetch()
        for queue in self._listeners:
            queue.put_nowait(snapshot)

    def start(self) -> None:
        self.refresher.start()

    async def stop(self) -> None:
        await self.refresher.stop()

    async def snapshots(self, max_events: int | None = None) -> AsyncIterator:
        """
        Yield a snapshot after every successful refresh.

        Starts the refresher if needed and stops it when the consumer goes
        away or ``max_events`` snapshots were delivered.
        """
        queue: asyncio.Queue = asyncio.Queue()
        self._listeners.append(queue)
        self.start()
        delivered = 0
        try:
            while max_events is None or delivered < max_events:
                yield await queue.get()
                delivered += 1
        finally:
            self._listeners.remove(queue)
            if not self._listeners:
                await self.stop()


class AlertMonitor(Monitor):
    """Alert summary of one enterprise"""

    name = "alerts"

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext, interval: float | None = None):
        self.interval = interval or settings.ALERT_REFRESH_SECONDS
        self.context = context
        self.alert_repo = AlertRepository(client, context.enterprise_id)
        self.summary = AlertSummary()
        super().__init__()

    async def fetch(self) -> AlertSummary:
        self.summary = await self.alert_repo.get_summary()
        return self.summary

    def page(self) -> AlertPage:
        return AlertPage(
            summary=self.summary,
            refresh_seconds=self.interval,
            actions=actions_for(self.context, "refresh"),
        )


class ModelHealthMonitor(Monitor):
    """Model health and active model of one carpool group"""

    name = "model-health"

    def __init__(
        self,
        client: PlatformApiClient,
        context: EnterpriseContext,
        group_id: str,
        interval: float | None = None,
    ):
        self.interval = interval or settings.MODEL_HEALTH_REFRESH_SECONDS
        self.context = context
        self.group_id = group_id
        self.model_repo = ModelHealthRepository(client, group_id)
        self.models: list[ModelHealth] = []
        self.status = ModelStatus()
        super().__init__()

    async def fetch(self) -> ModelPage:
        self.models, self.status = await asyncio.gather(
            self.model_repo.get_health(),
            self.model_repo.get_status(),
        )
        return self.page()

    def page(self) -> ModelPage:
        return ModelPage(
            group_id=self.group_id,
            models=self.models,
            status=self.status,
            refresh_seconds=self.interval,
            actions=actions_for(self.context, "refresh", "switch_model"),
        )

    async def switch_model(self, target_model: str, reason: str = "manual") -> ModelPage:
        """
        Make ``target_model`` the group's active model (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
            ValidationException: If the model is not one the group offers
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can switch models")

        if self.status.available_models and target_model not in self.status.available_models:
            raise ValidationException(f"Model {target_model} is not available for this group")

        await self.model_repo.switch_model(target_model, reason)
        logger.info(f"Group {self.group_id} switched to {target_model} ({reason}) by {self.context.user_id}")
        self.status = await self.model_repo.get_status()
        return self.page()
