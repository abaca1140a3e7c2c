import threading
import time
import uuid
from dataclasses import dataclass, replace
from typing import Dict, Optional

PROCESSING = "processing"
COMPLETE = "complete"
FAILED = "failed"


class JobStateError(RuntimeError):
    """Raised when a job is finished twice or was never created."""


@dataclass(frozen=True)
class Job:
    id: str
    status: str = PROCESSING
    result: Optional[str] = None
    created_at: float = 0.0
    finished_at: Optional[float] = None


class JobRegistry:
    """
    Process-wide map of generation jobs.

    Records are only reachable through create / complete / fail / get.
    Each job leaves `processing` at most once. Nothing is ever evicted.
    """

    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()

    def create(self) -> str:
        with self._lock:
            job_id = str(uuid.uuid4())
            while job_id in self._jobs:
                job_id = str(uuid.uuid4())
            self._jobs[job_id] = Job(id=job_id, created_at=time.time())
        return job_id

    def complete(self, job_id: str, text: str) -> None:
        self._finish(job_id, COMPLETE, text)

    def fail(self, job_id: str, message: str) -> None:
        self._finish(job_id, FAILED, message)

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def _finish(self, job_id: str, status: str, result: str) -> None:
        if result is None:
            raise JobStateError(f"job {job_id} cannot finish without a result")
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobStateError(f"unknown job {job_id}")
            if job.status != PROCESSING:
                raise JobStateError(f"job {job_id} is already {job.status}")
            self._jobs[job_id] = replace(
                job, status=status, result=result, finished_at=time.time()
            )


_registry = JobRegistry()


def get_registry() -> JobRegistry:
    return _registry
