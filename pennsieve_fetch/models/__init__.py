"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application: the run configuration, the Pennsieve
integration and manifest documents, and run statistics.
"""

from .config import RunConfig, load_config
from .integration import Integration, Manifest, ManifestEntry, PackageList
from .stats import RunStats

__all__ = [
    "Integration",
    "Manifest",
    "ManifestEntry",
    "PackageList",
    "RunConfig",
    "RunStats",
    "load_config",
]
