"""
Utility helpers: filename derivation, formatting and structured logging.
"""
