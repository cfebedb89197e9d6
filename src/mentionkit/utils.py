"""
Utility functions for the mentionkit package.
"""

import os


def get_project_root() -> str:
    """
    Get the project root directory (parent of src/mentionkit).

    Returns:
        Absolute path to the project root directory
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def env_flag(value: str | None, default: bool = False) -> bool:
    """Interpret an environment variable value as a boolean flag."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}
