"""Execution of external CLI commands."""
from __future__ import annotations

import asyncio
import logging
import os
import shutil
from collections.abc import Mapping
from collections.abc import Sequence

from bwbridge.errors.types import CLIError
from bwbridge.models import BridgeContext

logger = logging.getLogger(__name__)

# Environment variable the bw CLI reads its session key from
SESSION_ENV_VAR = "BW_SESSION"


class CommandRunner:
    """Run a CLI executable with the current session injected."""

    def __init__(
        self,
        context: BridgeContext,
        command: str = "bw",
        extra_path: Sequence[str] = (),
    ) -> None:
        self.context = context
        self.command = command
        self.extra_path = list(extra_path)

    def build_env(self, env: Mapping[str, str] | None = None) -> dict[str, str]:
        """Build the child environment: inherited, extended PATH, overlay, session."""
        child_env = dict(os.environ)
        if self.extra_path:
            parts = [p for p in child_env.get("PATH", "").split(os.pathsep) if p]
            parts.extend(p for p in self.extra_path if p not in parts)
            child_env["PATH"] = os.pathsep.join(parts)
        if env:
            child_env.update(env)
        if token := self.context.session.token:
            child_env[SESSION_ENV_VAR] = token
        return child_env

    def resolve(self, env: Mapping[str, str] | None = None) -> str | None:
        """Locate the executable on the child PATH.

        Also finds wrapper scripts such as npm's `bw.cmd` on Windows.
        """
        path = (env if env is not None else self.build_env()).get("PATH")
        return shutil.which(self.command, path=path)

    def is_available(self) -> bool:
        """Check if the executable can be found."""
        return self.resolve() is not None

    async def run(self, *args: str, env: Mapping[str, str] | None = None) -> str:
        """Run the command and return its trimmed stdout.

        Raises:
            CLIError: The process could not be started or exited non-zero.
        """
        display = " ".join([self.command, *args])
        logger.debug("Running %s", display)

        child_env = self.build_env(env)
        executable = self.resolve(child_env) or self.command

        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=child_env,
            )
            stdout, stderr = await process.communicate()
        except FileNotFoundError as e:
            raise CLIError(
                f"{self.command} not found in PATH", command=display
            ) from e
        except OSError as e:
            raise CLIError(f"Failed to run {display}: {e}", command=display) from e

        out = stdout.decode(errors="replace").strip() if stdout else ""
        err = stderr.decode(errors="replace").strip() if stderr else ""

        if process.returncode != 0:
            logger.debug("%s exited with %s", display, process.returncode)
            message = err or out or f"{display} exited with code {process.returncode}"
            raise CLIError(
                message,
                exit_code=process.returncode,
                stderr=err,
                command=display,
            )

        return out
