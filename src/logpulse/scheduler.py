"""Multi-file scheduler: one FileTask per log file on a bounded thread pool"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from logpulse import prometheus as prom
from logpulse.errors import LineParseError
from logpulse.parser import parse_line
from logpulse.registry import AnalyzerRegistry


logger = logging.getLogger(__name__)


DEFAULT_CANCEL_GRACE_SECONDS = 5.0


@dataclass
class FileTaskResult:
    """Outcome of processing a single file"""

    path: str
    lines_read: int = 0
    records_parsed: int = 0
    lines_skipped: int = 0
    error: str | None = None  # I/O failure reason, if any
    cancelled: bool = False  # Stopped early because the run hit its deadline

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class FileTask:
    """Reads one log file and fans every parsed record out to the registry"""

    path: str
    registry: AnalyzerRegistry
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def run(self) -> FileTaskResult:
        """Process the file start to finish.

        Never raises for bad input: unparseable lines are skipped with a
        warning and I/O errors are logged and recorded on the result.
        """
        result = FileTaskResult(path=self.path)
        skipped_by_reason: dict[str, int] = {}
        thread_id = threading.current_thread().name
        logger.debug(f'[TASK {thread_id}] Processing {self.path}')

        try:
            with open(self.path, encoding='utf-8', errors='replace') as f:
                for line_number, line in enumerate(f, start=1):
                    if self.cancel_event.is_set():
                        result.cancelled = True
                        logger.warning(f'Stopped processing {self.filename} at line {line_number}: deadline reached')
                        break
                    result.lines_read += 1

                    try:
                        record = parse_line(line)
                    except LineParseError as e:
                        result.lines_skipped += 1
                        skipped_by_reason[e.reason] = skipped_by_reason.get(e.reason, 0) + 1
                        logger.warning(f'Unexpected input in {self.filename}:{line_number}: {e.line!r} ({e.detail})')
                        continue

                    for analyzer in self.registry:
                        analyzer.on_level(record.level)
                        analyzer.on_source(record.source)
                        analyzer.on_record(self.filename, record)
                    result.records_parsed += 1
        except OSError as e:
            result.error = str(e)
            logger.error(f'Error processing file {self.filename}: {e}')
            prom.files_failed_total.inc()
        else:
            prom.files_processed_total.inc()

        prom.lines_parsed_total.inc(result.records_parsed)
        for reason, count in skipped_by_reason.items():
            prom.lines_skipped_total.labels(reason=reason).inc(count)

        logger.debug(
            f'[TASK {thread_id}] {self.filename} done: {result.records_parsed} records, '
            f'{result.lines_skipped} skipped'
        )
        return result


def create_file_tasks(
    paths: list[str], registry: AnalyzerRegistry, cancel_event: threading.Event
) -> list[FileTask]:
    """Create one FileTask per path, all sharing the same cancel event."""
    return [FileTask(path=path, registry=registry, cancel_event=cancel_event) for path in paths]


@dataclass
class ScheduleOutcome:
    """What the scheduler observed once it stopped waiting"""

    results: list[FileTaskResult]
    not_started: list[str]  # Paths whose task was cancelled before it began
    timed_out: bool
    abandoned: list[str] = field(default_factory=list)  # Still running when the cancel grace period ran out


class Scheduler:
    """Runs FileTasks concurrently with a bounded worker pool and a deadline.

    When the deadline passes, queued tasks are cancelled and running tasks are
    asked to stop at their next line. The scheduler then waits up to
    ``cancel_grace_seconds`` for them to return. A task blocked inside a single
    read (hung filesystem, huge line) is reported as abandoned instead of
    holding the run past that bound; it may still add the record it was
    dispatching once the read returns.
    """

    def __init__(
        self,
        max_workers: int,
        max_wait_seconds: float | None = None,
        cancel_grace_seconds: float = DEFAULT_CANCEL_GRACE_SECONDS,
    ):
        """Initialize the scheduler.

        Args:
            max_workers: Number of worker threads.
            max_wait_seconds: How long to wait for all tasks. None waits forever.
            cancel_grace_seconds: How long running tasks get to stop after the deadline.
        """
        self.max_workers = max_workers
        self.max_wait_seconds = max_wait_seconds
        self.cancel_grace_seconds = cancel_grace_seconds
        self.cancel_event: threading.Event | None = None

    def run(self, paths: list[str], registry: AnalyzerRegistry) -> ScheduleOutcome:
        """Process every path and block until done or the deadline (plus grace) passes."""
        self.cancel_event = threading.Event()
        tasks = create_file_tasks(paths, registry, self.cancel_event)
        logger.info(f'[SCHEDULER] Submitting {len(tasks)} file tasks to {self.max_workers} workers')

        results: list[FileTaskResult] = []
        not_started: list[str] = []
        abandoned: list[str] = []

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='FileTask')
        future_to_task = {executor.submit(task.run): task for task in tasks}

        _, pending = wait(future_to_task, timeout=self.max_wait_seconds)
        timed_out = bool(pending)

        if timed_out:
            logger.warning(
                f'[SCHEDULER] {len(pending)} of {len(tasks)} tasks unfinished after '
                f'{self.max_wait_seconds}s, proceeding with partial results'
            )
            prom.schedule_timeouts_total.inc()
            self.cancel_event.set()
            executor.shutdown(wait=False, cancel_futures=True)
            running = [f for f in pending if not f.cancelled()]
            _, stragglers = wait(running, timeout=self.cancel_grace_seconds)
            if stragglers:
                logger.error(
                    f'[SCHEDULER] {len(stragglers)} tasks did not stop within '
                    f'{self.cancel_grace_seconds}s of the deadline, abandoning them'
                )
        else:
            executor.shutdown(wait=True)

        for future, task in future_to_task.items():
            if future.cancelled():
                not_started.append(task.path)
                continue
            if not future.done():
                abandoned.append(task.path)
                continue
            try:
                results.append(future.result())
            except Exception as e:
                logger.error(f'Analysis failed for {task.path}: {e}')
                results.append(FileTaskResult(path=task.path, error=str(e)))

        results.sort(key=lambda r: r.path)
        return ScheduleOutcome(
            results=results, not_started=sorted(not_started), timed_out=timed_out, abandoned=sorted(abandoned)
        )
