"""
Central configuration for a postal geometry run.

Settings are read once at the entry point (environment and/or command line)
and passed explicitly into the pipeline; no stage reads the environment.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigurationError


class ClipMode(str, Enum):
    """
    How postal polygons are trimmed and gap-filled before dissolving.

    - COAST: clip to the land mask, then fill gaps against the clipped coverage
    - BORDER: clip to the border mask, no gap fill
    - GAPFILL_BORDER: no clipping, fill gaps between raw polygons and the border
    - NONE: pass the postal polygons through untouched
    """

    COAST = "coast"
    BORDER = "border"
    GAPFILL_BORDER = "gapfill-border"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> "ClipMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"Unknown clip mode '{value}' (expected one of: {allowed})")


def parse_gap_area(value: Any) -> float:
    """Parse a maximum gap area in square meters; empty means unbounded."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return math.inf
    try:
        area = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"GAP_AREA_MAX must be a number, got '{value}'")
    if math.isnan(area) or area < 0:
        raise ConfigurationError(f"GAP_AREA_MAX must be a non-negative number, got '{value}'")
    return area


def _parse_int(value: Optional[str], name: str, default: int) -> int:
    if value is None or not str(value).strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'")


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if value is None or not str(value).strip():
        return None
    return Path(value)


@dataclass(frozen=True)
class PipelineSettings:
    postal_path: Optional[Path] = None
    mask_path: Optional[Path] = None
    border_mask_path: Optional[Path] = None
    mode: ClipMode = ClipMode.COAST
    gap_area_max: float = math.inf
    output_dir: Path = field(default_factory=lambda: Path("public"))
    output_stem: str = "postal-codes"
    code_property: str = "code"
    progress_every: int = 100

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelineSettings":
        """
        Build settings from environment variables.

        Recognized: POSTAL_PATH, MASK_PATH, BORDER_MASK_PATH, CLIP_MODE,
        GAP_AREA_MAX, OUTPUT_DIR, OUTPUT_STEM, CODE_PROPERTY, PROGRESS_EVERY.
        """
        env = os.environ if environ is None else environ
        output_dir = _optional_path(env.get("OUTPUT_DIR")) or Path("public")
        return cls(
            postal_path=_optional_path(env.get("POSTAL_PATH")),
            mask_path=_optional_path(env.get("MASK_PATH")),
            border_mask_path=_optional_path(env.get("BORDER_MASK_PATH")),
            mode=ClipMode.parse(env.get("CLIP_MODE") or ClipMode.COAST.value),
            gap_area_max=parse_gap_area(env.get("GAP_AREA_MAX")),
            output_dir=output_dir,
            output_stem=env.get("OUTPUT_STEM") or "postal-codes",
            code_property=env.get("CODE_PROPERTY") or "code",
            progress_every=_parse_int(env.get("PROGRESS_EVERY"), "PROGRESS_EVERY", 100),
        )

    def with_overrides(self, overrides: Dict[str, Any]) -> "PipelineSettings":
        """Return a copy with every non-None override applied."""
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key in ("postal_path", "mask_path", "border_mask_path", "output_dir"):
                value = Path(value)
            elif key == "mode":
                value = ClipMode.parse(value)
            elif key == "gap_area_max":
                value = parse_gap_area(value)
            changes[key] = value
        return replace(self, **changes)

    def resolve_mask_path(self) -> Optional[Path]:
        """Pick the mask file the configured mode clips or gap-fills against."""
        if self.mode is ClipMode.NONE:
            return None
        if self.mode is ClipMode.COAST:
            return self.mask_path
        return self.border_mask_path or self.mask_path

    def validate(self) -> "PipelineSettings":
        if self.mode is not ClipMode.NONE and self.resolve_mask_path() is None:
            if self.mode is ClipMode.COAST:
                hint = "Provide MASK_PATH for coast clipping"
            else:
                hint = f"Provide BORDER_MASK_PATH (or MASK_PATH) for CLIP_MODE={self.mode.value}"
            raise ConfigurationError(f"Missing mask path. {hint} or set CLIP_MODE=none.")
        if self.progress_every <= 0:
            raise ConfigurationError("progress_every must be positive")
        if not self.code_property:
            raise ConfigurationError("code_property must not be empty")
        return self

    def describe(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "postal_path": str(self.postal_path) if self.postal_path else None,
            "mask_path": str(self.resolve_mask_path()) if self.resolve_mask_path() else None,
            "gap_area_max": None if math.isinf(self.gap_area_max) else self.gap_area_max,
            "output_dir": str(self.output_dir),
            "code_property": self.code_property,
        }
