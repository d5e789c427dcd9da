"""
Drives the external downloader over every entry of a manifest.
"""

import time
from typing import Protocol

from pennsieve_fetch.download.downloader import DownloadResult
from pennsieve_fetch.exceptions import DownloadError
from pennsieve_fetch.models.integration import Manifest
from pennsieve_fetch.models.stats import RunStats
from pennsieve_fetch.utils.naming import extract_sub_identifier
from pennsieve_fetch.utils.structured_logger import DownloadLogger


class FileDownloader(Protocol):
    async def download(self, url: str, target_name: str) -> DownloadResult: ...


class DownloadManager:
    """Downloads manifest entries one at a time, in manifest order."""

    def __init__(self, downloader: FileDownloader, download_logger: DownloadLogger):
        self.downloader = downloader
        self.download_log = download_logger

    async def download_all(self, manifest: Manifest) -> RunStats:
        """
        Fetches every entry of the manifest.

        A failed entry is logged and counted; the remaining entries are still
        processed.
        """
        stats = RunStats()
        for entry in manifest.data:
            target_name = extract_sub_identifier(entry.file_name)
            self.download_log.file_started(entry.node_id, entry.file_name, target_name)
            start_time = time.monotonic()

            try:
                result = await self.downloader.download(entry.url, target_name)
            except DownloadError as e:
                self.download_log.file_output(target_name, e.stdout, e.stderr)
                self.download_log.file_failed(
                    target_name, str(e), e.stderr, returncode=e.returncode
                )
                stats.record_failure(target_name)
                continue

            self.download_log.file_output(target_name, result.stdout, result.stderr)
            self.download_log.file_completed(
                target_name, time.monotonic() - start_time
            )
            stats.record_success()

        stats.finish()
        return stats
