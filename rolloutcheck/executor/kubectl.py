"""kubectl-backed executor.

Runs kubectl as an asyncio subprocess. Failures surface as
:class:`KubectlError` whose message is what kubectl printed, or
``signal: <name>`` when the process died from a signal. A probe that
outlives its deadline is killed and reported as ``signal: killed``, the same
text a killed kubectl produces, so the rollout classifier treats both alike.
"""

from __future__ import annotations

import asyncio
import contextlib
import signal
from rolloutcheck.errors import KubectlError
from rolloutcheck.executor.base import RolloutExecutor
from rolloutcheck.models.resources import RolloutProbe
from rolloutcheck.observability.logging import get_logger

_logger = get_logger("executor.kubectl")

_SIGNAL_NAMES = {
    signal.SIGKILL: "killed",
    signal.SIGINT: "interrupt",
    signal.SIGTERM: "terminated",
}


def _signal_text(signum: int) -> str:
    try:
        sig = signal.Signals(signum)
    except ValueError:
        return f"signal: {signum}"
    name = _SIGNAL_NAMES.get(sig) or (signal.strsignal(sig) or sig.name).lower()
    return f"signal: {name}"


def _kill(proc: asyncio.subprocess.Process) -> None:
    with contextlib.suppress(ProcessLookupError):
        proc.kill()


class KubectlExecutor(RolloutExecutor):
    """Executes kubectl commands.

    Args:
        binary: kubectl executable name or path.
    """

    def __init__(self, binary: str = "kubectl") -> None:
        self._binary = binary

    def command(self, kube_context: str, *args: str) -> list[str]:
        cmd = [self._binary]
        if kube_context:
            cmd += ["--context", kube_context]
        return [*cmd, *args]

    async def rollout_status(self, probe: RolloutProbe) -> str:
        cmd = self.command(
            probe.kube_context,
            "rollout",
            "status",
            str(probe.resource_type),
            probe.name,
            "--namespace",
            probe.namespace,
            f"--watch={str(probe.watch).lower()}",
        )
        return await self.run(cmd, timeout=probe.deadline.total_seconds() or None)

    async def run(self, cmd: list[str], timeout: float | None = None) -> str:
        """Run *cmd* and return its stdout.

        Raises:
            KubectlError -- the binary is missing, exited non-zero, was killed,
                            or ran past *timeout* seconds.
        """
        _logger.debug("kubectl_run", args=cmd, timeout=timeout)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise KubectlError(f"could not run {cmd[0]}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
        except TimeoutError:
            _kill(proc)
            await proc.wait()
            _logger.warning("kubectl_timeout", args=cmd, timeout=timeout)
            raise KubectlError(_signal_text(signal.SIGKILL), returncode=-signal.SIGKILL) from None
        except asyncio.CancelledError:
            _kill(proc)
            await proc.wait()
            raise

        output = stdout.decode("utf-8", errors="replace")
        returncode = proc.returncode
        if returncode is None or returncode == 0:
            return output
        if returncode < 0:
            raise KubectlError(_signal_text(-returncode), returncode=returncode)
        message = stderr.decode("utf-8", errors="replace").strip() or output.strip()
        raise KubectlError(message or f"exit status {returncode}", returncode=returncode)
