"""Service orchestrator owning virtual service lifecycle and health polling.

Lifecycle:
1. `orchestrator_start` builds one fixture store, constructs every virtual
   service over it, wires the shared dispatcher and schedules health polling.
2. Health polls dispatch `GET <base>/health` through the same dispatcher as
   regular traffic; unhealthy services are logged, never restarted.
3. `orchestrator_shutdown` cancels polling and releases all services.
"""

from __future__ import annotations

import asyncio
import contextlib
import random
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from loguru import logger

from mortgage_sim.domain import (
    HEALTH_STATUS_ERROR,
    HEALTH_STATUS_HEALTHY,
    HEALTH_STATUS_UNHEALTHY,
    HealthRecord,
    ServiceRegistryEntry,
)
from mortgage_sim.fixtures import FixtureStore
from mortgage_sim.routing import LatencySimulator, RequestDispatcher, SleepCallable
from mortgage_sim.services import VIRTUAL_SERVICE_CLASSES, BaseVirtualService

from .errors import OrchestratorNotStartedError, UnknownServiceError
from .interfaces import OrchestratorConfig, ServiceOrchestratorPort


class ServiceOrchestrator(ServiceOrchestratorPort):
    """Lifecycle owner for the six virtual services and their shared store."""

    def __init__(
        self,
        config: OrchestratorConfig | None = None,
        sleep: SleepCallable | None = None,
        clock: Callable[[], datetime] | None = None,
        random_unit_interval_provider: Callable[[], float] | None = None,
        service_classes: Sequence[type[BaseVirtualService]] = VIRTUAL_SERVICE_CLASSES,
    ):
        """Initialize orchestrator dependencies without constructing services.

        Args:
            config: Optional orchestration configuration.
            sleep: Optional awaitable sleep used for simulated handler latency.
            clock: Optional UTC clock shared by store and services.
            random_unit_interval_provider: Optional provider returning values in [0.0, 1.0).
            service_classes: Virtual service classes constructed on start, in poll order.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when configuration values are invalid.
        """

        self._config = config or OrchestratorConfig()
        if self._config.health_poll_interval_seconds <= 0:
            raise ValueError("health_poll_interval_seconds must be > 0")
        if self._config.latency_scale < 0:
            raise ValueError("latency_scale must be >= 0")
        if service_classes is None:
            raise ValueError("service_classes must not be None")

        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        if random_unit_interval_provider is None:
            random_unit_interval_provider = random.Random(self._config.random_seed).random
        self._random_unit_interval_provider = random_unit_interval_provider
        self._service_classes = tuple(service_classes)

        self._store: FixtureStore | None = None
        self._dispatcher: RequestDispatcher | None = None
        self._entries: dict[str, ServiceRegistryEntry] = {}
        self._poll_task: asyncio.Task[None] | None = None
        self._started_at_utc: datetime | None = None
        self._last_health: list[HealthRecord] = []
        self._poll_count = 0

    @property
    def orchestrator_dispatcher(self) -> RequestDispatcher:
        if self._dispatcher is None:
            raise OrchestratorNotStartedError("orchestrator is not started")
        return self._dispatcher

    @property
    def orchestrator_store(self) -> FixtureStore:
        if self._store is None:
            raise OrchestratorNotStartedError("orchestrator is not started")
        return self._store

    def orchestrator_is_running(self) -> bool:
        return self._dispatcher is not None

    async def orchestrator_start(self) -> None:
        """Construct all services over one store and schedule health polling.

        Starting an already running orchestrator is a no-op.

        Returns:
            None: Services and polling task are created as side effects.

        Raises:
            DuplicateServiceError: Raised when two service classes share a base path.
        """

        if self.orchestrator_is_running():
            logger.debug("orchestrator already running; start ignored")
            return

        store = FixtureStore(clock=self._clock)
        latency = LatencySimulator(scale=self._config.latency_scale, sleep=self._sleep)

        entries: dict[str, ServiceRegistryEntry] = {}
        for service_class in self._service_classes:
            service = service_class(
                store=store,
                latency=latency,
                version=self._config.service_version,
                random_unit_interval_provider=self._random_unit_interval_provider,
                clock=self._clock,
            )
            entries[service.name] = ServiceRegistryEntry(
                name=service.name,
                service=service,
                constructed_at_utc=self._clock(),
            )

        self._dispatcher = RequestDispatcher(entry.service for entry in entries.values())
        self._store = store
        self._entries = entries
        self._started_at_utc = self._clock()
        self._last_health = []
        self._poll_count = 0
        self._poll_task = asyncio.create_task(self._orchestrator_poll_loop())

        logger.info(
            "virtual services started count={} names={} latency_scale={}",
            len(entries),
            ",".join(entries),
            self._config.latency_scale,
        )

    async def orchestrator_shutdown(self) -> None:
        """Cancel health polling and release all services.

        Shutting down a stopped orchestrator is a no-op.
        """

        poll_task = self._poll_task
        self._poll_task = None
        if poll_task is not None:
            poll_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await poll_task

        if not self.orchestrator_is_running():
            return

        released_count = len(self._entries)
        self._entries = {}
        self._dispatcher = None
        self._store = None
        self._started_at_utc = None
        logger.info("virtual services stopped count={}", released_count)

    async def orchestrator_poll_health(self) -> list[HealthRecord]:
        """Poll every service health route once through the dispatcher.

        Returns:
            list[HealthRecord]: One record per service in construction order.

        Raises:
            OrchestratorNotStartedError: Raised before start or after shutdown.
        """

        dispatcher = self.orchestrator_dispatcher
        health_records: list[HealthRecord] = []
        for entry in list(self._entries.values()):
            health_records.append(await self._orchestrator_poll_service(dispatcher, entry))

        self._last_health = health_records
        self._poll_count += 1

        unhealthy_names = [record.service_name for record in health_records if not record.health_is_healthy()]
        if unhealthy_names:
            logger.warning("unhealthy virtual services: {}", ", ".join(unhealthy_names))
        return health_records

    def orchestrator_last_health(self) -> list[HealthRecord]:
        return list(self._last_health)

    def orchestrator_get_status(self) -> dict[str, str]:
        return {name: "running" for name in self._entries}

    def orchestrator_reset_all(self) -> None:
        """Restore the shared store to seed fixtures and reset service state.

        Raises:
            OrchestratorNotStartedError: Raised before start or after shutdown.
        """

        store = self.orchestrator_store
        store.fixture_reset()
        for entry in self._entries.values():
            entry.service.service_reset()
        logger.info("virtual service fixtures reset to seed data")

    def orchestrator_get_service(self, name: str) -> BaseVirtualService:
        """Return one registered service by name.

        Args:
            name: Registry name such as `auth` or `loan`.

        Returns:
            BaseVirtualService: Constructed service instance.

        Raises:
            UnknownServiceError: Raised when no service is registered under name.
        """

        entry = self._entries.get(name)
        if entry is None:
            raise UnknownServiceError(name)
        return entry.service

    def orchestrator_list_services(self) -> list[str]:
        return list(self._entries)

    def orchestrator_get_endpoints(self) -> dict[str, list[dict[str, str]]]:
        return {
            name: [
                {"method": binding.method, "pattern": binding.pattern}
                for binding in entry.service.registry.registry_bindings()
            ]
            for name, entry in self._entries.items()
        }

    def orchestrator_get_metrics(self) -> dict[str, Any]:
        """Return runtime metrics for the gateway system routes.

        Returns:
            dict[str, Any]: Service and route counts, uptime, version and poll summary.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        uptime_seconds = 0.0
        if self._started_at_utc is not None:
            uptime_seconds = max(0.0, (self._clock() - self._started_at_utc).total_seconds())

        return {
            "serviceCount": len(self._entries),
            "routeCount": sum(len(entry.service.registry.registry_bindings()) for entry in self._entries.values()),
            "uptimeSeconds": round(uptime_seconds, 3),
            "version": self._config.service_version,
            "latencyScale": self._config.latency_scale,
            "healthPolls": self._poll_count,
            "healthyServices": sum(1 for record in self._last_health if record.health_is_healthy()),
        }

    async def _orchestrator_poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._config.health_poll_interval_seconds)
            try:
                await self.orchestrator_poll_health()
            except Exception:
                logger.exception("health poll cycle failed; polling continues")

    async def _orchestrator_poll_service(
        self,
        dispatcher: RequestDispatcher,
        entry: ServiceRegistryEntry,
    ) -> HealthRecord:
        checked_at_utc = self._clock()
        try:
            result = await dispatcher.dispatcher_dispatch("GET", f"{entry.service.base_path}/health")
        except Exception:
            logger.exception("health poll failed service={}", entry.name)
            return HealthRecord(service_name=entry.name, status=HEALTH_STATUS_ERROR, checked_at_utc=checked_at_utc)

        payload = result.envelope.get("data")
        if not isinstance(payload, dict):
            payload = {}
        status = HEALTH_STATUS_UNHEALTHY
        if result.status_code == 200 and payload.get("status") == HEALTH_STATUS_HEALTHY:
            status = HEALTH_STATUS_HEALTHY

        logger.debug("health poll service={} status={} http_status={}", entry.name, status, result.status_code)
        return HealthRecord(
            service_name=entry.name,
            status=status,
            checked_at_utc=checked_at_utc,
            dependencies=dict(payload.get("dependencies") or {}),
            metrics=dict(payload.get("metrics") or {}),
        )
