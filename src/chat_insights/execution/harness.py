"""Run parsing and filtering off the calling thread.

One live worker per operation kind. Every request gets a token; a result
whose token is no longer the latest for its kind is reported as stale and
must not be applied. When no background facility is available the harness
runs the same work synchronously on the calling thread.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import BrokenExecutor, Executor, ProcessPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence

from chat_insights.config import PipelineConfig
from chat_insights.exceptions import (
    BackgroundExecutionError,
    ExecutionError,
    StaleResultError,
    WorkerCacheMissError,
)
from chat_insights.execution import tasks
from chat_insights.filters.engine import apply_filters
from chat_insights.filters.models import FilterCriteria
from chat_insights.transcript.ignore_lists import IgnoreListLookup
from chat_insights.transcript.models import Message

logger = logging.getLogger(__name__)

ExecutorFactory = Callable[[], Executor]


class OperationKind(str, Enum):
    PARSE = "parse"
    FILTER = "filter"


class OperationState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class OutcomeStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    STALE = "stale"


@dataclass
class Outcome:
    """Explicit result of one harness request."""

    kind: OperationKind
    token: int
    status: OutcomeStatus
    value: Any = None
    error: Exception | None = None
    version: int | None = None  # message-set generation a filter ran against
    background: bool = True

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.COMPLETED

    @property
    def stale(self) -> bool:
        return self.status == OutcomeStatus.STALE

    def unwrap(self) -> Any:
        """Return the value, or raise the failure / StaleResultError."""
        if self.status == OutcomeStatus.STALE:
            raise StaleResultError(
                f"{self.kind.value} request {self.token} was superseded"
            )
        if self.status == OutcomeStatus.FAILED:
            raise self.error or ExecutionError(f"{self.kind.value} request failed")
        return self.value


def _process_pool() -> Executor:
    return ProcessPoolExecutor(max_workers=1)


class ExecutionHarness:
    """Asynchronous, supersedable parse/filter execution.

    Args:
        config: Timeout and background toggle.
        executor_factory: Builds the single-worker executor for one kind.
            Defaults to a one-process ProcessPoolExecutor.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        executor_factory: ExecutorFactory | None = None,
    ):
        self.config = config or PipelineConfig()
        self._factory = executor_factory or _process_pool
        self.background_available = self.config.use_background
        self._executors: dict[OperationKind, Executor] = {}
        self._tokens = {kind: 0 for kind in OperationKind}
        self._states = {kind: OperationState.IDLE for kind in OperationKind}
        self._primed_version: int | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def state(self, kind: OperationKind) -> OperationState:
        return self._states[kind]

    def latest_token(self, kind: OperationKind) -> int:
        return self._tokens[kind]

    async def parse(
        self,
        raw_text: str,
        file_name: str = "",
        ignore_lists: IgnoreListLookup | None = None,
    ) -> Outcome:
        """Parse a transcript and build metadata in the background.

        The completed value is a ``(ParsedTranscript, ChatMetadata)`` tuple.
        """
        kind = OperationKind.PARSE
        token = self._issue(kind)
        executor = self._executor(kind)
        if executor is None:
            return self._run_sync(
                kind, token, tasks.parse_task,
                raw_text, file_name, ignore_lists, self.config,
            )
        try:
            value = await self._execute(
                kind, executor, tasks.parse_task,
                raw_text, file_name, ignore_lists, self.config,
            )
        except BackgroundExecutionError as e:
            return self._settle(kind, token, error=e)
        return self._settle(kind, token, value=value)

    async def filter(
        self,
        messages: Sequence[Message],
        criteria: FilterCriteria,
        version: int,
    ) -> Outcome:
        """Filter message set ``version`` in the background.

        The message set is shipped to the worker only when it does not hold
        ``version`` yet; later requests send just the criteria.
        """
        kind = OperationKind.FILTER
        token = self._issue(kind)
        executor = self._executor(kind)
        if executor is None:
            return self._run_sync(
                kind, token, apply_filters, messages, criteria, version=version
            )
        try:
            if self._primed_version == version:
                try:
                    value = await self._execute(
                        kind, executor, tasks.filter_task, version, criteria
                    )
                except WorkerCacheMissError:
                    logger.debug(f"Filter worker lost message set {version}, resending")
                    self._primed_version = None
                    value = await self._execute(
                        kind, executor, tasks.filter_task, version, criteria, list(messages)
                    )
            else:
                value = await self._execute(
                    kind, executor, tasks.filter_task, version, criteria, list(messages)
                )
            self._primed_version = version
        except BackgroundExecutionError as e:
            return self._settle(kind, token, error=e, version=version)
        return self._settle(kind, token, value=value, version=version)

    def parse_sync(
        self,
        raw_text: str,
        file_name: str = "",
        ignore_lists: IgnoreListLookup | None = None,
    ) -> Outcome:
        """Parse on the calling thread; fallback after a background failure."""
        kind = OperationKind.PARSE
        return self._run_sync(
            kind, self._issue(kind), tasks.parse_task,
            raw_text, file_name, ignore_lists, self.config,
        )

    def filter_sync(
        self,
        messages: Sequence[Message],
        criteria: FilterCriteria,
        version: int,
    ) -> Outcome:
        """Filter on the calling thread; fallback after a background failure."""
        kind = OperationKind.FILTER
        return self._run_sync(
            kind, self._issue(kind), apply_filters, messages, criteria, version=version
        )

    def close(self) -> None:
        """Shut down all worker handles."""
        for kind in list(self._executors):
            self._discard(kind, wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _issue(self, kind: OperationKind) -> int:
        self._tokens[kind] += 1
        self._states[kind] = OperationState.RUNNING
        return self._tokens[kind]

    def _executor(self, kind: OperationKind) -> Executor | None:
        if not self.background_available:
            return None
        executor = self._executors.get(kind)
        if executor is None:
            try:
                executor = self._factory()
            except (NotImplementedError, OSError, ImportError) as e:
                logger.warning(
                    f"Background execution unavailable ({e}); running synchronously"
                )
                self.background_available = False
                return None
            self._executors[kind] = executor
        return executor

    def _discard(
        self, kind: OperationKind, wait: bool = False, terminate: bool = False
    ) -> None:
        executor = self._executors.pop(kind, None)
        if executor is not None:
            # ProcessPoolExecutor keeps its workers here; shutdown() clears it
            processes = list((getattr(executor, "_processes", None) or {}).values())
            executor.shutdown(wait=wait, cancel_futures=True)
            if terminate:
                for process in processes:
                    logger.debug(f"Terminating hung {kind.value} worker {process.pid}")
                    process.terminate()
        if kind == OperationKind.FILTER:
            self._primed_version = None

    async def _execute(
        self,
        kind: OperationKind,
        executor: Executor,
        fn: Callable[..., Any],
        *args: Any,
    ) -> Any:
        """Run ``fn`` in the worker; every failure becomes BackgroundExecutionError."""
        try:
            future = executor.submit(fn, *args)
        except (BrokenExecutor, RuntimeError) as e:
            self._discard(kind)
            raise BackgroundExecutionError(
                f"{kind.value} worker unreachable: {e}", kind=kind.value
            ) from e

        try:
            return await asyncio.wait_for(
                asyncio.wrap_future(future), timeout=self.config.task_timeout
            )
        except WorkerCacheMissError:
            raise
        except asyncio.TimeoutError as e:
            logger.warning(
                f"{kind.value} worker timed out after {self.config.task_timeout}s"
            )
            self._discard(kind, terminate=True)
            raise BackgroundExecutionError(
                f"{kind.value} timed out after {self.config.task_timeout}s",
                kind=kind.value,
            ) from e
        except BrokenExecutor as e:
            logger.warning(f"{kind.value} worker died: {e}")
            self._discard(kind)
            raise BackgroundExecutionError(
                f"{kind.value} worker died: {e}", kind=kind.value
            ) from e
        except Exception as e:
            logger.warning(f"{kind.value} failed in background: {e}")
            raise BackgroundExecutionError(
                f"{kind.value} failed in background: {e}", kind=kind.value
            ) from e

    def _run_sync(
        self,
        kind: OperationKind,
        token: int,
        fn: Callable[..., Any],
        *args: Any,
        version: int | None = None,
    ) -> Outcome:
        try:
            value = fn(*args)
        except Exception as e:
            logger.warning(f"{kind.value} failed: {e}")
            error = ExecutionError(f"{kind.value} failed: {e}")
            error.__cause__ = e
            return self._settle(kind, token, error=error, version=version, background=False)
        return self._settle(kind, token, value=value, version=version, background=False)

    def _settle(
        self,
        kind: OperationKind,
        token: int,
        value: Any = None,
        error: Exception | None = None,
        version: int | None = None,
        background: bool = True,
    ) -> Outcome:
        if token != self._tokens[kind]:
            logger.debug(
                f"Discarding stale {kind.value} result {token} "
                f"(latest {self._tokens[kind]})"
            )
            return Outcome(
                kind=kind, token=token, status=OutcomeStatus.STALE,
                version=version, background=background,
            )

        if error is not None:
            self._states[kind] = OperationState.FAILED
            return Outcome(
                kind=kind, token=token, status=OutcomeStatus.FAILED,
                error=error, version=version, background=background,
            )

        self._states[kind] = OperationState.COMPLETED
        return Outcome(
            kind=kind, token=token, status=OutcomeStatus.COMPLETED,
            value=value, version=version, background=background,
        )
