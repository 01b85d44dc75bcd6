"""
Request dependencies shared by the API endpoints.
"""
import os
from pathlib import Path

from ..config.paths import OutputPaths


def get_output_paths() -> OutputPaths:
    """Artifact locations, from OUTPUT_DIR / OUTPUT_STEM."""
    return OutputPaths(
        root=Path(os.getenv("OUTPUT_DIR") or "public"),
        stem=os.getenv("OUTPUT_STEM") or "postal-codes",
    )


def get_code_property() -> str:
    return os.getenv("CODE_PROPERTY") or "code"
