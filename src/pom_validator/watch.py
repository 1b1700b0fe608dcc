"""Poll a directory tree and re-validate POMs as they change."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from pom_validator.exceptions import PomNotFoundError
from pom_validator.models import ValidationResult
from pom_validator.pipeline import ValidationService
from pom_validator.profiles import filter_result, filter_results
from pom_validator.scanner import find_pom_files


logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0


class ChangeKind(str, Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


class WatchEvent(BaseModel):
    path: Path
    kind: ChangeKind
    result: ValidationResult | None = None


class Watcher:
    """Blocking poll loop over the POMs under a root directory.

    Each iteration waits up to `interval` seconds, then compares modification
    times with the previous scan; a file whose timestamp did not move is not
    re-validated. `stop()` may be called from another thread or a callback.
    """

    def __init__(
        self,
        root: Path,
        service: ValidationService | None = None,
        *,
        recursive: bool = False,
        interval: float = DEFAULT_INTERVAL,
        on_event: Callable[[WatchEvent], None] | None = None,
    ) -> None:
        self.root = root
        self.service = service or ValidationService()
        self.recursive = recursive
        self.interval = interval
        self.on_event = on_event
        self._mtimes: dict[Path, int] = {}
        self._stop = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def scan(self) -> dict[Path, int]:
        try:
            poms = find_pom_files(self.root, recursive=self.recursive)
        except PomNotFoundError:
            return {}
        mtimes: dict[Path, int] = {}
        for pom in poms:
            try:
                mtimes[pom] = pom.stat().st_mtime_ns
            except FileNotFoundError:
                continue
        return mtimes

    def initial(self) -> dict[Path, ValidationResult]:
        """Validate every POM once and remember their timestamps."""
        self._mtimes = self.scan()
        results = self.service.validate_paths(self._mtimes)
        return filter_results(results, self.service.config.severity)

    def _validate(self, path: Path) -> ValidationResult:
        return filter_result(self.service.validate_pom(path), self.service.config.severity)

    def poll(self) -> list[WatchEvent]:
        """Compare against the previous scan and validate what changed."""
        current = self.scan()
        events: list[WatchEvent] = []
        for path in self._mtimes.keys() - current.keys():
            events.append(WatchEvent(path=path, kind=ChangeKind.DELETED))
        for path, mtime in current.items():
            previous = self._mtimes.get(path)
            if previous is None:
                kind = ChangeKind.CREATED
            elif mtime > previous:
                kind = ChangeKind.MODIFIED
            else:
                continue
            events.append(WatchEvent(path=path, kind=kind, result=self._validate(path)))
        self._mtimes = current

        for event in events:
            logger.debug("POM %s: %s", event.kind.value, event.path)
            if self.on_event is not None:
                self.on_event(event)
        return events

    def loop(self, *, iterations: int | None = None) -> None:
        """Poll until stopped, or for a fixed number of iterations."""
        count = 0
        while not self._stop.wait(self.interval):
            self.poll()
            count += 1
            if iterations is not None and count >= iterations:
                break
