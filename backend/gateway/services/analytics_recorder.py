"""Analytics Recorder — best-effort, detached emission of per-request telemetry.

Invariants:
    - record() never raises; sink and serialization failures are logged and dropped
    - schedule() returns immediately; the write runs on the task supervisor
    - No retries: a lost record stays lost
"""

import logging

from gateway.core.analytics_event import AnalyticsEvent
from gateway.core.repository_protocols import AnalyticsSink
from gateway.infrastructure.task_supervisor import TaskSupervisor

logger = logging.getLogger(__name__)


class AnalyticsRecorder:
    def __init__(self, sink: AnalyticsSink, supervisor: TaskSupervisor):
        self._sink = sink
        self._supervisor = supervisor

    async def record(self, event: AnalyticsEvent) -> None:
        try:
            await self._sink.write(event.to_record())
        except Exception as e:
            logger.warning(
                f"Analytics write dropped: {e}",
                extra={"request_id": event.request_id, "service": "analytics"},
            )

    def schedule(self, event: AnalyticsEvent) -> None:
        """Fire and forget. Must be called after the response is finalized."""
        self._supervisor.submit(
            self.record(event), name=f"analytics-{event.request_id}",
        )
