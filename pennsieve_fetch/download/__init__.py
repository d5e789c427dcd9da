"""
Download Layer.

This package wraps the external download utility that fetches each file.
"""

from .downloader import DownloadResult, ExternalDownloader

__all__ = ["DownloadResult", "ExternalDownloader"]
