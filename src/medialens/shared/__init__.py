"""MediaLens Shared Module.

This package contains shared constants, error handling, logging helpers and
collaborator protocols used across MediaLens.
"""

__all__ = ["constants", "errors", "logging", "protocols"]
