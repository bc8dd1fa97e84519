"""
Command runner - runs short-lived install and probe commands.

Handles:
- Resolving the executable on PATH
- Capturing stdout/stderr and the exit status
- Killing commands that exceed their timeout or are cancelled
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Raised when a checked command cannot be spawned or exits non-zero."""

    def __init__(self, message: str, result: Optional["CommandResult"] = None):
        super().__init__(message)
        self.result = result


@dataclass
class CommandResult:
    """Outcome of a finished command."""
    cmd: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Best error text: stderr, falling back to stdout."""
        return self.stderr.strip() or self.stdout.strip()


class CommandRunner:
    """
    Runs a command to completion and captures its output.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout

    async def run(
        self,
        cmd: str,
        args: Sequence[str] = (),
        cwd: Optional[str] = None,
        check: bool = False,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Run a command.

        Args:
            cmd: Executable name or path
            args: Command-line arguments
            cwd: Working directory
            check: Raise CommandError on spawn failure or non-zero exit
            timeout: Seconds before the command is killed

        Returns:
            CommandResult with exit code and captured output
        """
        executable = shutil.which(cmd) or cmd
        argv = [executable, *args]
        timeout = timeout if timeout is not None else self._timeout

        logger.debug(f"Running: {' '.join([cmd, *args])} (cwd={cwd})")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            if check:
                raise CommandError(f"Failed to run {cmd}: {e}") from e
            logger.debug(f"Failed to spawn {cmd}: {e}")
            return CommandResult(cmd=argv, exit_code=-1, stderr=str(e))

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._kill(process)
            result = CommandResult(
                cmd=argv,
                exit_code=-1,
                stderr=f"{cmd} timed out after {timeout}s",
            )
            if check:
                raise CommandError(result.stderr, result)
            return result
        except BaseException:
            # Cancelled callers must not leave the child running
            await self._kill(process)
            raise

        result = CommandResult(
            cmd=argv,
            exit_code=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

        if check and not result.ok:
            raise CommandError(
                f"{cmd} exited with code {result.exit_code}: {result.output}",
                result,
            )
        return result

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()


# Singleton
_runner: Optional[CommandRunner] = None


def get_command_runner() -> CommandRunner:
    """Get the singleton CommandRunner."""
    global _runner
    if _runner is None:
        _runner = CommandRunner()
    return _runner
