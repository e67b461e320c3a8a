"""Typed wrapper over the Bitwarden CLI commands bwbridge uses."""
from __future__ import annotations

from enum import StrEnum

import msgspec

from bwbridge.core.runner import CommandRunner
from bwbridge.errors.types import CLIError
from bwbridge.models import RawRecord

PASSWORD_ENV_VAR = "BW_PASSWORD"
CLIENT_ID_ENV_VAR = "BW_CLIENTID"
CLIENT_SECRET_ENV_VAR = "BW_CLIENTSECRET"


class VaultStatus(StrEnum):
    """Vault states reported by `bw status`."""

    UNLOCKED = "unlocked"
    LOCKED = "locked"
    UNAUTHENTICATED = "unauthenticated"


class StatusResponse(msgspec.Struct):
    status: VaultStatus


class BitwardenCLI:
    """One method per bw command; output is parsed where it is JSON."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    async def status(self) -> VaultStatus:
        output = await self.runner.run("status")
        try:
            return msgspec.json.decode(output, type=StatusResponse).status
        except msgspec.DecodeError as e:
            raise CLIError(f"Unexpected bw status output: {e}", command="bw status") from e

    async def logout(self) -> None:
        await self.runner.run("logout")

    async def config_server(self, url: str) -> None:
        await self.runner.run("config", "server", url)

    async def login_apikey(self, client_id: str, client_secret: str) -> None:
        """Log in with an API key passed through the environment."""
        await self.runner.run(
            "login",
            "--apikey",
            env={
                CLIENT_ID_ENV_VAR: client_id,
                CLIENT_SECRET_ENV_VAR: client_secret,
            },
        )

    async def unlock(self, master_password: str) -> str:
        """Unlock the vault and return the raw session key.

        The password goes through the environment so it never shows up in
        the process list.
        """
        return await self.runner.run(
            "unlock",
            "--passwordenv",
            PASSWORD_ENV_VAR,
            "--raw",
            env={PASSWORD_ENV_VAR: master_password},
        )

    async def sync(self) -> None:
        await self.runner.run("sync")

    async def list_items(self) -> list[RawRecord]:
        output = await self.runner.run("list", "items")
        try:
            return msgspec.json.decode(output, type=list[RawRecord])
        except msgspec.DecodeError as e:
            raise CLIError(
                f"Unexpected bw list output: {e}", command="bw list items"
            ) from e
