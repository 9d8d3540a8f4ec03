"""Live dashboard orchestration: samplers, shared store, renderer and terminal state."""

from __future__ import annotations

import logging
import signal
import subprocess
import sys
import threading
from typing import Any, Callable, TextIO

from powerdash_renderer import DashboardRenderer
from powerdash_renderer.ansi import CLEAR_SCREEN, CURSOR_HOME, HIDE_CURSOR, SHOW_CURSOR
from powerdash_telemetry import IoregPoller, PowermetricsSampler, SamplerLaunchError, SnapshotStore
from powerdash_telemetry import ioreg, powermetrics

from .config import AppConfig

logger = logging.getLogger(__name__)


def _raise_interrupt(signum: int, _frame: Any) -> None:
    raise KeyboardInterrupt(f"signal {signum}")


class PowerMonitor:
    """Owns the one snapshot store and hands it to both samplers and the renderer.

    The powermetrics stream drives everything: each sample delimiter triggers an
    inline render, and the end of the stream ends :meth:`run`.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        ioreg_runner: Callable[[list[str]], str | None] = ioreg.run_ioreg,
        start_grace_s: float = 0.15,
    ) -> None:
        self.config = config or AppConfig()
        self.out = out or sys.stdout
        self.err = err or sys.stderr

        self.store = SnapshotStore()
        self.renderer = DashboardRenderer(theme_name=self.config.ui.theme, out=self.out)
        self.sampler = PowermetricsSampler(
            self.store,
            on_frame=self._on_frame,
            command=powermetrics.build_command(self.config.sampler.powermetrics_path, self.config.sampler.use_sudo),
            popen=popen,
            start_grace_s=start_grace_s,
        )
        self.poller = IoregPoller(
            self.store,
            command=ioreg.build_command(self.config.sampler.ioreg_path),
            runner=ioreg_runner,
        )
        self._terminal_dirty = False

    def _on_frame(self) -> None:
        self.renderer.draw(self.store.snapshot())

    def _prepare_terminal(self) -> None:
        self.out.write(HIDE_CURSOR + CURSOR_HOME + CLEAR_SCREEN)
        self.out.flush()
        self._terminal_dirty = True

    def _restore_terminal(self) -> None:
        if not self._terminal_dirty:
            return
        self.out.write(SHOW_CURSOR + "\n")
        self.out.flush()
        self._terminal_dirty = False

    @staticmethod
    def _install_signal_handlers() -> Any:
        if threading.current_thread() is not threading.main_thread():
            return None
        return signal.signal(signal.SIGTERM, _raise_interrupt)

    @staticmethod
    def _restore_signal_handlers(previous: Any) -> None:
        if previous is not None:
            signal.signal(signal.SIGTERM, previous)

    def _run_sampler(self) -> str | None:
        self.poller.start()
        try:
            self.sampler.start()
        except SamplerLaunchError as exc:
            logger.error("%s", exc, extra={"event": "sampler_launch_failed"})
            return str(exc)

        returncode = self.sampler.run()
        if returncode and self.renderer.frames == 0:
            # sudo refusing a password only shows up after the start-up grace period
            message = powermetrics.launch_error_message(self.sampler.stderr_text, returncode)
            logger.error("%s", message, extra={"event": "sampler_launch_failed"})
            return message
        return None

    def run(self) -> int:
        self._prepare_terminal()
        previous = self._install_signal_handlers()
        error: str | None = None
        try:
            error = self._run_sampler()
        except KeyboardInterrupt:
            logger.info("interrupted after %d frames", self.renderer.frames, extra={"event": "interrupted"})
        finally:
            self.sampler.stop()
            self.poller.stop(timeout=1.0)
            self._restore_terminal()
            self._restore_signal_handlers(previous)

        if error:
            print(f"Error: {error}", file=self.err)
            return 1
        return 0
