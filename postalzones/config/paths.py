"""
Output file layout for a postal geometry run.

All artifacts live side by side in one directory so the map client can fetch
them as static files:

    <stem>.geojson[.gz]            converted raw postal source
    <stem>.clipped.geojson[.gz]    clipped / gap-filled polygons
    <stem>.dissolved.geojson[.gz]  one feature per code
    <stem>.labels.geojson[.gz]     one label point per code
    <stem>.report.json             run report
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

ARTIFACTS = ("clipped", "dissolved", "labels")


def gz_path(path: Path) -> Path:
    return path.with_name(path.name + ".gz")


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    stem: str = "postal-codes"

    def source(self) -> Path:
        return self.root / f"{self.stem}.geojson"

    def artifact(self, name: str) -> Path:
        if name not in ARTIFACTS:
            raise KeyError(f"Unknown artifact: {name}")
        return self.root / f"{self.stem}.{name}.geojson"

    def clipped(self) -> Path:
        return self.artifact("clipped")

    def dissolved(self) -> Path:
        return self.artifact("dissolved")

    def labels(self) -> Path:
        return self.artifact("labels")

    def report(self) -> Path:
        return self.root / f"{self.stem}.report.json"

    def ensure(self) -> "OutputPaths":
        self.root.mkdir(parents=True, exist_ok=True)
        return self

    def existing(self, path: Path) -> Optional[Path]:
        """Prefer the gzip sibling, then the plain file; None if neither exists."""
        for candidate in (gz_path(path), path):
            if candidate.is_file():
                return candidate
        return None

    def as_dict(self) -> Dict[str, str]:
        paths = {name: str(self.artifact(name)) for name in ARTIFACTS}
        paths["source"] = str(self.source())
        paths["report"] = str(self.report())
        return paths
