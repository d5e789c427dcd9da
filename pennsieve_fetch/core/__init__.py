"""
Core application engine for orchestrating a run.

The `IntegrationRunner` resolves the integration and its manifest, then
delegates the per-file work to the `DownloadManager`.
"""

from .download_manager import DownloadManager
from .runner import IntegrationRunner

__all__ = ["DownloadManager", "IntegrationRunner"]
