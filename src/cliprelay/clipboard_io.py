"""OS clipboard I/O through the platform's clipboard tools.

This module provides the ClipboardAccess interface the relay depends on and
CommandClipboard, an implementation that runs the native clipboard commands
(pbpaste/pbcopy, PowerShell, wl-clipboard or xclip) as subprocesses.

The module handles:
- Choosing read and write commands for the current platform
- Reading clipboard text with timeout handling
- Writing clipboard text through stdin, never through a shell string
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from cliprelay.errors import ConfigError

logger = logging.getLogger(__name__)

# Timeout in seconds for one clipboard command, so that a hung clipboard
# tool cannot stall the poll loop
CLIPBOARD_TIMEOUT: float = 2.0


class ClipboardAccessError(Exception):
    """Reading or writing the OS clipboard failed."""

    pass


class ClipboardAccess(Protocol):
    """Asynchronous text clipboard."""

    async def read(self) -> str:
        """Return the current clipboard text.

        Raises:
            ClipboardAccessError: If the clipboard cannot be read.
        """
        ...

    async def write(self, text: str) -> None:
        """Replace the clipboard text.

        Raises:
            ClipboardAccessError: If the clipboard cannot be written.
        """
        ...


@dataclass(frozen=True)
class ClipboardCommands:
    """Argument vectors for the clipboard read and write commands."""

    read: Sequence[str]
    write: Sequence[str]


MACOS_COMMANDS = ClipboardCommands(read=("pbpaste",), write=("pbcopy",))
WINDOWS_COMMANDS = ClipboardCommands(
    read=(
        "powershell",
        "-NoProfile",
        "-Command",
        "[Console]::OutputEncoding = [Text.Encoding]::UTF8; Get-Clipboard -Raw",
    ),
    write=(
        "powershell",
        "-NoProfile",
        "-Command",
        "[Console]::InputEncoding = [Text.Encoding]::UTF8; "
        "Set-Clipboard -Value ([Console]::In.ReadToEnd())",
    ),
)
WAYLAND_COMMANDS = ClipboardCommands(read=("wl-paste", "--no-newline"), write=("wl-copy",))
X11_COMMANDS = ClipboardCommands(
    read=("xclip", "-selection", "clipboard", "-o"),
    write=("xclip", "-selection", "clipboard", "-i"),
)


def select_clipboard_commands(
    platform: str | None = None, environ: Mapping[str, str] | None = None
) -> ClipboardCommands:
    """Pick clipboard commands for a platform.

    Args:
        platform: Value in the style of sys.platform; defaults to the
            running interpreter's.
        environ: Environment used to detect Wayland; defaults to os.environ.

    Returns:
        The read/write commands for that platform.

    Raises:
        ConfigError: If the platform has no supported clipboard tool.
    """
    platform = sys.platform if platform is None else platform
    environ = os.environ if environ is None else environ
    if platform == "darwin":
        return MACOS_COMMANDS
    if platform.startswith("win"):
        return WINDOWS_COMMANDS
    if platform.startswith(("linux", "freebsd", "openbsd")):
        if environ.get("WAYLAND_DISPLAY"):
            return WAYLAND_COMMANDS
        return X11_COMMANDS
    raise ConfigError(f"Unsupported platform for clipboard access: {platform}")


class CommandClipboard:
    """ClipboardAccess backed by external clipboard commands."""

    def __init__(self, commands: ClipboardCommands, timeout: float = CLIPBOARD_TIMEOUT) -> None:
        self.commands = commands
        self.timeout = timeout

    @classmethod
    def for_platform(cls) -> CommandClipboard:
        """Build a clipboard using the running platform's tools."""
        return cls(select_clipboard_commands())

    async def read(self) -> str:
        stdout = await self._run(self.commands.read, None)
        return stdout.decode("utf-8", errors="replace")

    async def write(self, text: str) -> None:
        await self._run(self.commands.write, text.encode("utf-8"))

    async def _run(self, argv: Sequence[str], stdin_data: bytes | None) -> bytes:
        """Run one clipboard command and return its stdout.

        Args:
            argv: Program and arguments; no shell is involved.
            stdin_data: Bytes to feed on stdin, or None for no input.

        Returns:
            The command's standard output.

        Raises:
            ClipboardAccessError: On a missing tool, timeout or non-zero exit.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ClipboardAccessError(f"Cannot run {argv[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(stdin_data), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise ClipboardAccessError(
                f"{argv[0]} timed out after {self.timeout} seconds"
            ) from e

        if proc.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise ClipboardAccessError(
                f"{argv[0]} exited with status {proc.returncode}: {message}"
            )
        logger.debug("%s returned %d bytes", argv[0], len(stdout))
        return stdout
