"""Execution of git subcommands within a repository root."""

from collections.abc import Sequence
from pathlib import Path

import git
import structlog

from .base import CommandFailure

logger = structlog.get_logger(__name__)


class CommandRunner:
    """Runs git subcommands in a fixed working directory.

    Every call spawns one git process. A non-zero exit status raises
    :class:`CommandFailure` unless the caller lists it in ``allow_status``.
    """

    def __init__(self, working_dir: str | Path, executable: str = "git") -> None:
        self.working_dir = str(working_dir)
        self.executable = executable
        self.invocations = 0
        self._git = git.Git(self.working_dir)

    def run(
        self,
        arguments: Sequence[str],
        *,
        strip: bool = True,
        allow_status: Sequence[int] = (),
    ) -> str:
        """Run ``git <arguments>`` and return its stdout.

        Args:
            arguments: Arguments following the git executable
            strip: Remove trailing line breaks from the output
            allow_status: Non-zero exit codes that are expected for this call

        Returns:
            Captured stdout, decoded with surrogate escapes for undecodable bytes

        Raises:
            CommandFailure: If git cannot be started or exits unexpectedly
        """
        command = [self.executable, *arguments]
        self.invocations += 1
        logger.debug("git_exec", cwd=self.working_dir, command=" ".join(command))

        try:
            status, stdout, stderr = self._git.execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                strip_newline_in_stdout=False,
            )
        except git.GitCommandNotFound as e:
            raise CommandFailure(command, self.working_dir, None, str(e)) from e

        if status != 0 and status not in allow_status:
            logger.debug("git_exec_failed", command=" ".join(command), status=status)
            raise CommandFailure(command, self.working_dir, status, stderr)

        if strip:
            return stdout.rstrip("\r\n")
        return stdout
