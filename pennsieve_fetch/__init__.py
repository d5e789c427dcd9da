"""
pennsieve-fetch: stages the files of a Pennsieve integration into a local
input directory for a workflow step.
"""

__version__ = "0.1.0"
