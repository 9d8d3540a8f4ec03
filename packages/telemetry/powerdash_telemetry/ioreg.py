"""Periodic ioreg poller for charger and battery hardware fields."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Callable

from .extract import IOREG_RULES, FieldRule, apply_rules
from .store import SnapshotStore

logger = logging.getLogger(__name__)

POLL_INTERVAL_S = 5.0
IOREG_ARGS = ("-rn", "AppleSmartBattery")


def build_command(binary: str = "ioreg") -> list[str]:
    return [binary, *IOREG_ARGS]


def run_ioreg(command: list[str]) -> str | None:
    """Run ``command`` to completion. Returns stdout, or None if it could not run or failed."""
    try:
        result = subprocess.run(command, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as exc:
        logger.debug("ioreg exited with %s, skipping cycle", exc.returncode)
        return None
    except OSError as exc:
        logger.debug("ioreg could not run: %s", exc)
        return None
    return result.stdout


class IoregPoller:
    """Background loop applying one ioreg dump to the store every ``interval`` seconds.

    A failed invocation skips the whole cycle; whatever the store already holds
    stays as it is until the next successful dump.
    """

    def __init__(
        self,
        store: SnapshotStore,
        command: list[str] | None = None,
        interval: float = POLL_INTERVAL_S,
        rules: tuple[FieldRule, ...] = IOREG_RULES,
        runner: Callable[[list[str]], str | None] = run_ioreg,
    ) -> None:
        self.store = store
        self.command = command or build_command()
        self.interval = interval
        self.rules = rules
        self.cycles = 0
        self.skipped = 0

        self._runner = runner
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def apply(self, text: str) -> dict[str, object]:
        updates = apply_rules(text, self.rules)
        if updates:
            self.store.update(**updates)
        return updates

    def poll_once(self) -> bool:
        self.cycles += 1
        output = self._runner(self.command)
        if output is None:
            self.skipped += 1
            return False
        self.apply(output)
        return True

    def _loop(self) -> None:
        while not self._stop.is_set():
            self.poll_once()
            self._stop.wait(self.interval)

    def start(self) -> threading.Thread:
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="ioreg-poller", daemon=True)
        self._thread.start()
        logger.info("ioreg poller started interval=%.1fs", self.interval, extra={"event": "ioreg_start"})
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
