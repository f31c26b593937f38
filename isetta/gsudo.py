"""Elevated execution of Windows commands from WSL through a gsudo binary."""

from __future__ import annotations

import os
import posixpath
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .helper import IsettaError, retry
from .simplelogger import logger

GSUDO_FILE_NAME = "gsudo-isetta.exe"
_CACHE_ACTIVE_MARKER = "Available for this process: True"


def is_cache_active(status_output: str) -> bool:
    """Return True if ``gsudo status`` reports an active credential cache for this process."""
    logger.debug("Looking for search string '%s' in output", _CACHE_ACTIVE_MARKER)
    return _CACHE_ACTIVE_MARKER in status_output


def windows_temp_dir() -> str:
    """Return the Windows temp directory as a Windows path."""
    try:
        proc = subprocess.run(
            ["cmd.exe", "/c", "echo %TEMP%"],
            cwd="/mnt/c/",
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as err:
        raise IsettaError(f"failed to determine Windows temp dir, error was: {err}") from err
    if proc.returncode != 0:
        raise IsettaError(f"failed to determine Windows temp dir. Output was: {proc.stdout}")
    return proc.stdout.rstrip("\r\n")


def windows_path_to_wsl(path: str) -> str:
    """Translate a Windows path into the corresponding WSL path."""
    try:
        proc = subprocess.run(["wslpath", "-u", path], stdout=subprocess.PIPE, text=True, errors="replace")
    except OSError as err:
        raise IsettaError(f"failed to translate path {path}, error was: {err}") from err
    if proc.returncode != 0:
        raise IsettaError(f"failed to translate path {path}, exit status {proc.returncode}")
    return proc.stdout.strip("\n\r")


@dataclass
class Gsudo:
    """Copies gsudo to the Windows temp dir and runs commands elevated with it.

    ``binary_path`` names the gsudo executable to copy; when unset it is looked
    up on PATH as ``gsudo.exe``. Usable as a context manager.
    """

    binary_path: str | None = None
    windows_temp_dir_path: str = ""
    windows_temp_dir_wsl_path: str = ""
    gsudo_wsl_path: str = ""
    gsudo_windows_path: str = ""

    def init(self) -> None:
        """Set up paths, copy the binary and check that it runs."""
        self._setup_paths()
        self._copy_binary()
        self._preflight_check()

    def __enter__(self) -> Gsudo:
        self.init()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def _setup_paths(self) -> None:
        self.windows_temp_dir_path = windows_temp_dir()
        self.windows_temp_dir_wsl_path = windows_path_to_wsl(self.windows_temp_dir_path)
        self.gsudo_wsl_path = posixpath.join(self.windows_temp_dir_wsl_path, GSUDO_FILE_NAME)
        logger.debug("gsudo WSL path: %s", self.gsudo_wsl_path)
        self.gsudo_windows_path = f"{self.windows_temp_dir_path}\\{GSUDO_FILE_NAME}"
        logger.debug("gsudo Windows path: %s", self.gsudo_windows_path)

    def _binary(self) -> bytes:
        source = self.binary_path or shutil.which("gsudo.exe")
        if not source:
            raise IsettaError("gsudo binary not found: set binary_path or put gsudo.exe on PATH")
        try:
            return Path(source).read_bytes()
        except OSError as err:
            raise IsettaError(f"unable to read gsudo binary {source}, error was: {err}") from err

    def _copy_binary(self) -> None:
        logger.debug("Making gsudo available at %s", self.gsudo_wsl_path)
        data = self._binary()
        target = Path(self.gsudo_wsl_path)

        def write() -> bool:
            try:
                target.write_bytes(data)
                os.chmod(target, 0o775)
            except OSError:
                return False
            return True

        retry("Writing gsudo binary", 10, 1.0, write)

    def _preflight_check(self) -> None:
        command = [self.gsudo_wsl_path, "--help"]
        command_text = " ".join(command)
        logger.debug("Preflight check. Executing command '%s'", command_text)
        try:
            proc = subprocess.run(
                command, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True, errors="replace"
            )
        except OSError as err:
            raise IsettaError(f"Preflight check failed. Failed to run: {command_text}, error was: {err}") from err
        if proc.returncode != 0:
            raise IsettaError(f"Preflight check failed. Failed to run: {command_text}, output was: {proc.stdout}")
        logger.debug("Preflight check was successful")

    def cleanup(self) -> None:
        """Reset the credential cache and remove the copied binary."""
        try:
            logger.debug("Resetting cache")
            self.run("--reset-timestamp")
        finally:
            logger.debug("Removing gsudo binary from %s", self.gsudo_wsl_path)
            try:
                os.remove(self.gsudo_wsl_path)
            except OSError:
                pass

    def run_elevated(self, command: str, check_error: bool = True) -> str:
        """Run a Windows command elevated and return its combined output."""
        self._try_activate_cache()
        return self.run(command, check_error)

    def _try_activate_cache(self) -> None:
        logger.debug("Trying activate gsudo cache")
        if is_cache_active(self.run("status")):
            logger.debug("Credential cache is active. Won't start a new session.")
            return
        logger.debug("Credential cache not active, starting it (will prompt for admin credentials)")
        self.run("cache on --pid 0 --duration 00:00:30")
        retry("Credential cache started", 10, 0.25, lambda: is_cache_active(self.run("status")))

    def run(self, command: str, check_error: bool = True) -> str:
        """Run gsudo with ``command`` through cmd.exe inside the Windows temp dir.

        Raises IsettaError on failure unless ``check_error`` is false.
        """
        full_command = ["cmd.exe", "/c", f"{self.gsudo_windows_path} {command}"]
        logger.debug("Executing command '%s'", " ".join(full_command))
        try:
            proc = subprocess.run(
                full_command,
                cwd=self.windows_temp_dir_wsl_path or None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
            out = proc.stdout or ""
            failure = f"exit status {proc.returncode}" if proc.returncode != 0 else None
        except OSError as err:
            out, failure = "", str(err)

        if check_error and failure is not None:
            raise IsettaError(f"Error running: {full_command}, error was: {failure}, output was: {out}")
        logger.debug("Output was: %s", out)
        return out