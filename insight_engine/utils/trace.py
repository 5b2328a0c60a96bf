"""Request tracing"""

import time
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List

from pydantic import BaseModel, Field


class StepLog(BaseModel):
    """One executed analysis step"""
    step: str
    detail: str = ""
    latency_ms: float = 0
    timestamp: datetime = Field(default_factory=datetime.now)


class TraceContext:
    """Collects the steps of one analysis request"""

    def __init__(self):
        self.trace_id: str = str(uuid.uuid4())
        self.steps: List[StepLog] = []
        self.start_time = datetime.now()

    def add_step(self, step: str, detail: str = "", latency_ms: float = 0) -> None:
        self.steps.append(StepLog(step=step, detail=detail, latency_ms=round(latency_ms, 2)))

    @contextmanager
    def timed(self, step: str) -> Iterator[Dict[str, str]]:
        """Time a block; the block may set ``info["detail"]``."""
        info = {"detail": ""}
        start = time.perf_counter()
        try:
            yield info
        finally:
            self.add_step(step, info["detail"], (time.perf_counter() - start) * 1000)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trace_id": self.trace_id,
            "steps": [
                {
                    "step": s.step,
                    "detail": s.detail,
                    "latency_ms": s.latency_ms,
                    "timestamp": s.timestamp.isoformat()
                }
                for s in self.steps
            ],
            "total_steps": len(self.steps),
            "duration_ms": round((datetime.now() - self.start_time).total_seconds() * 1000, 2)
        }
