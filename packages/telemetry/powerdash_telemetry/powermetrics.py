"""Streaming powermetrics sampler feeding the snapshot store."""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from collections import deque
from typing import Callable, Iterable

import psutil

from .extract import POWERMETRICS_RULES, FieldRule, apply_rules
from .models import SamplerStats
from .store import SnapshotStore

logger = logging.getLogger(__name__)

SAMPLE_INTERVAL_MS = 1000
SAMPLE_DELIMITER = "***"
POWERMETRICS_ARGS = ("--samplers", "cpu_power,gpu_power,battery", "-i", str(SAMPLE_INTERVAL_MS), "-f", "text")

_PRIVILEGE_TOKENS = (
    "a password is required",
    "terminal is required",
    "no tty present",
    "not in the sudoers",
    "permission denied",
    "operation not permitted",
    "must be invoked as the superuser",
)


class SamplerLaunchError(RuntimeError):
    pass


def is_sample_delimiter(line: str) -> bool:
    # "**** Processor usage ****" section headers are not sample boundaries
    return line.startswith(SAMPLE_DELIMITER) and not line.startswith(SAMPLE_DELIMITER + "*")


def build_command(binary: str = "powermetrics", use_sudo: bool = True) -> list[str]:
    cmd = [binary, *POWERMETRICS_ARGS]
    if use_sudo:
        cmd.insert(0, "sudo")
    return cmd


def launch_error_message(stderr_text: str = "", returncode: int | None = None) -> str:
    lower = stderr_text.lower()
    if "powermetrics" in lower and ("command not found" in lower or "no such file" in lower):
        message = "Failed to start powermetrics: the binary was not found. powerdash requires macOS."
    elif any(token in lower for token in _PRIVILEGE_TOKENS):
        message = "Failed to start powermetrics: elevated privileges are required (need sudo)."
    else:
        message = "Failed to start powermetrics."
        if returncode is not None:
            message = f"{message} Exit code: {returncode}."
    if stderr_text:
        message = f"{message} Details: {stderr_text}"
    return message


def terminate_process_tree(pid: int, timeout: float = 2.0) -> None:
    """Terminate ``pid`` and its descendants, killing whatever survives ``timeout``."""
    try:
        parent = psutil.Process(pid)
    except psutil.NoSuchProcess:
        return
    try:
        procs = [parent, *parent.children(recursive=True)]
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        procs = [parent]

    for proc in procs:
        try:
            proc.terminate()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass

    _gone, alive = psutil.wait_procs(procs, timeout=timeout)
    for proc in alive:
        try:
            proc.kill()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass


class PowermetricsSampler:
    """Reads powermetrics text output and signals a frame at every sample delimiter."""

    def __init__(
        self,
        store: SnapshotStore,
        on_frame: Callable[[], None],
        command: list[str] | None = None,
        rules: tuple[FieldRule, ...] = POWERMETRICS_RULES,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
        start_grace_s: float = 0.15,
    ) -> None:
        self.store = store
        self.on_frame = on_frame
        self.command = command or build_command()
        self.rules = rules
        self.stats = SamplerStats()

        self._popen = popen
        self._start_grace_s = start_grace_s
        self._process: subprocess.Popen | None = None
        self._stderr_tail: deque[str] = deque(maxlen=20)
        self._stderr_thread: threading.Thread | None = None

    @property
    def process(self) -> subprocess.Popen | None:
        return self._process

    @property
    def stderr_text(self) -> str:
        return "\n".join(self._stderr_tail)

    def start(self) -> subprocess.Popen:
        logger.info("launching sampler: %s", " ".join(self.command), extra={"event": "sampler_launch"})
        try:
            process = self._popen(
                self.command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except FileNotFoundError as exc:
            raise SamplerLaunchError(launch_error_message(f"{exc.filename or self.command[0]}: no such file")) from exc
        except PermissionError as exc:
            raise SamplerLaunchError(launch_error_message("permission denied")) from exc
        except OSError as exc:
            raise SamplerLaunchError(f"Failed to start powermetrics: {exc}") from exc

        try:
            if self._start_grace_s > 0:
                time.sleep(self._start_grace_s)
            exited = process.poll() is not None
        except BaseException:
            # not yet owned by the sampler, so stop() would miss it
            terminate_process_tree(process.pid)
            raise
        if exited:
            stderr_text = self._read_stderr(process)
            raise SamplerLaunchError(launch_error_message(stderr_text, process.returncode))

        self._process = process
        self._stderr_thread = threading.Thread(target=self._drain_stderr, name="powermetrics-stderr", daemon=True)
        self._stderr_thread.start()
        return process

    @staticmethod
    def _read_stderr(process: subprocess.Popen) -> str:
        try:
            _, stderr_data = process.communicate(timeout=0.2)
        except (subprocess.TimeoutExpired, OSError, ValueError):
            return ""
        return (stderr_data or "").strip()

    def _drain_stderr(self) -> None:
        stream = self._process.stderr if self._process else None
        if stream is None:
            return
        for raw in stream:
            text = raw.rstrip()
            if text:
                self._stderr_tail.append(text)
                logger.warning("powermetrics: %s", text, extra={"event": "sampler_stderr"})

    def feed_line(self, line: str) -> bool:
        """Apply one output line. Returns True when the line is a frame boundary."""
        self.stats.lines += 1
        updates = apply_rules(line, self.rules)
        if updates:
            self.store.update(**updates)
            self.stats.record(updates)

        if is_sample_delimiter(line):
            self.stats.frames += 1
            self.on_frame()
            return True
        return False

    def consume(self, lines: Iterable[str]) -> int:
        frames = 0
        for raw in lines:
            if self.feed_line(raw.rstrip("\r\n")):
                frames += 1
        return frames

    def run(self) -> int:
        """Consume the live process output until EOF and return its exit code."""
        if self._process is None or self._process.stdout is None:
            raise RuntimeError("sampler not started")
        self.consume(self._process.stdout)
        returncode = self._process.wait()
        if self._stderr_thread is not None:
            self._stderr_thread.join(timeout=0.5)
        logger.info(
            "sampler stream closed rc=%s frames=%d lines=%d",
            returncode,
            self.stats.frames,
            self.stats.lines,
            extra={"event": "sampler_eof"},
        )
        return returncode

    def stop(self, timeout: float = 2.0) -> None:
        process = self._process
        if process is None or process.poll() is not None:
            return
        logger.info("stopping sampler pid=%d", process.pid, extra={"event": "sampler_stop"})
        terminate_process_tree(process.pid, timeout=timeout)
