"""
Runs the external download utility (wget by default) for a single file.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from pennsieve_fetch.exceptions import DownloadError


@dataclass(frozen=True)
class DownloadResult:
    """Captured output of a successful download invocation."""

    target_name: str
    returncode: int
    stdout: str
    stderr: str


class ExternalDownloader:
    """
    Fetches a URL into a named file by running a wget-compatible executable.

    The executable is invoked as ``<executable> -v -O <target_name> <url>``
    with the working directory set to `working_dir`.
    """

    def __init__(self, executable: str = "wget", working_dir: Path | None = None):
        self.executable = executable
        self.working_dir = working_dir

    def build_command(self, target_name: str, url: str) -> list[str]:
        return [self.executable, "-v", "-O", target_name, url]

    async def download(self, url: str, target_name: str) -> DownloadResult:
        """
        Runs the utility to completion and captures both output streams.

        Raises:
            DownloadError: If the utility cannot be launched or exits non-zero.
        """
        command = self.build_command(target_name, url)
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                cwd=self.working_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: NUL byte in the URL or target name
            raise DownloadError(
                f"Could not launch '{self.executable}': {e}", stderr=str(e)
            ) from e

        out, err = await proc.communicate()
        stdout = out.decode("utf-8", errors="replace")
        stderr = err.decode("utf-8", errors="replace")

        if proc.returncode != 0:
            raise DownloadError(
                f"'{self.executable}' exited with status {proc.returncode}",
                returncode=proc.returncode,
                stdout=stdout,
                stderr=stderr,
            )
        return DownloadResult(target_name, proc.returncode, stdout, stderr)
