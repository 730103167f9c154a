"""Request State — per-request metadata and the pipeline stage machine.

Invariants:
    - Stages only move forward in pipeline order
    - RESPONDED may follow any stage, so a rejection ends the walk early
    - Advancing to the current stage again is a no-op
"""

from dataclasses import dataclass, field

from gateway.core.domain_types import RequestStage

_ORDER = list(RequestStage)


@dataclass(frozen=True)
class RequestMeta:
    request_id: str
    client_ip: str
    country: str
    user_agent: str


@dataclass
class StageTracker:
    stage: RequestStage = RequestStage.RECEIVED
    history: list[RequestStage] = field(
        default_factory=lambda: [RequestStage.RECEIVED],
    )

    def advance(self, stage: RequestStage) -> None:
        if stage == self.stage:
            return
        if stage != RequestStage.RESPONDED and _ORDER.index(stage) < _ORDER.index(self.stage):
            raise ValueError(f"cannot move from {self.stage.value} back to {stage.value}")
        self.stage = stage
        self.history.append(stage)
