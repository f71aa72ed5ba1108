"""Encoder process supervision"""
import subprocess

import psutil
from loguru import logger

from .config import DEFAULT_ENCODER, OUTPUT_ARGS
from .errors import SpawnError


def build_command(url, preset, encoder=DEFAULT_ENCODER):
    """Full argv: encoder, whitespace-split preset, output container, url."""
    return [encoder] + preset.split() + OUTPUT_ARGS + [url]


class ProcessSupervisor:
    """Owns at most one encoder process.

    The child is killed outright, never asked to stop: there is no drain
    path. With ``detach`` on (the default) the child gets its own session
    and process group, so it keeps streaming if this program exits without
    calling ``stop()``.
    """

    def __init__(self, encoder=DEFAULT_ENCODER, detach=True, reap_timeout=None):
        self.encoder = encoder
        self.detach = detach
        self.reap_timeout = reap_timeout
        self._proc = None
        self.command = None

    @property
    def running(self):
        return self._proc is not None

    @property
    def pid(self):
        return self._proc.pid if self._proc is not None else None

    def start(self, url, preset):
        """Replace any running child with a new encoder for url/preset.

        Returns the new psutil.Popen handle. Raises SpawnError if the encoder
        could not be executed, in which case nothing is running.
        """
        if self._proc is not None:
            logger.info("Replacing running encoder", operation="start_stream",
                        status="replacing", pid=self._proc.pid)
            self._kill_and_reap()

        command = build_command(url, preset, self.encoder)
        try:
            proc = psutil.Popen(
                command,
                stdin=subprocess.DEVNULL,
                start_new_session=self.detach,
            )
        except (OSError, ValueError) as e:
            # ValueError: argv with an embedded NUL byte
            logger.error("Encoder spawn failed", operation="start_stream", status="failed",
                         command=command, error=str(e))
            raise SpawnError(command, getattr(e, "strerror", None) or str(e)) from e

        self._proc = proc
        self.command = command
        logger.info("Encoder started", operation="start_stream", status="success",
                    pid=proc.pid, url=url, detached=self.detach)
        return proc

    def stop(self):
        """Kill and reap the running child. No-op when idle."""
        if self._proc is None:
            return
        logger.info("Stopping encoder", operation="stop_stream", status="started", pid=self._proc.pid)
        self._kill_and_reap()

    def _kill_and_reap(self):
        proc = self._proc
        self._proc = None
        self.command = None
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            logger.warning("Kill denied", operation="reap", status="failed", pid=proc.pid, error=str(e))

        # Exit status is discarded; failures here are best-effort only
        try:
            proc.wait(timeout=self.reap_timeout)
        except psutil.TimeoutExpired:
            logger.warning("Encoder did not exit after kill, releasing handle",
                           operation="reap", status="timeout", pid=proc.pid,
                           timeout=self.reap_timeout)
        except (psutil.NoSuchProcess, ChildProcessError) as e:
            logger.warning("Reap failed", operation="reap", status="failed", pid=proc.pid, error=str(e))
        else:
            logger.debug("Encoder reaped", operation="reap", status="success", pid=proc.pid)
