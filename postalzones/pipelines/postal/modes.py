"""
Stage plans per clip mode.

Each ClipMode maps to the ordered stages that run before dissolve and label
extraction, which always run.
"""
from enum import Enum
from typing import Dict, Tuple

from ...config.settings import ClipMode


class Stage(str, Enum):
    LOAD_MASK = "load_mask"
    UNIFY_MASK = "unify_mask"
    CLIP = "clip"
    FIND_GAPS = "find_gaps"
    ASSIGN_GAPS = "assign_gaps"


STAGE_PLANS: Dict[ClipMode, Tuple[Stage, ...]] = {
    ClipMode.COAST: (Stage.LOAD_MASK, Stage.UNIFY_MASK, Stage.CLIP, Stage.FIND_GAPS, Stage.ASSIGN_GAPS),
    ClipMode.BORDER: (Stage.LOAD_MASK, Stage.UNIFY_MASK, Stage.CLIP),
    ClipMode.GAPFILL_BORDER: (Stage.LOAD_MASK, Stage.UNIFY_MASK, Stage.FIND_GAPS, Stage.ASSIGN_GAPS),
    ClipMode.NONE: (),
}

_unplanned = set(ClipMode) - set(STAGE_PLANS)
if _unplanned:
    raise RuntimeError(f"Clip modes without a stage plan: {sorted(m.value for m in _unplanned)}")


def stages_for(mode: ClipMode) -> Tuple[Stage, ...]:
    return STAGE_PLANS[ClipMode.parse(mode)]


def needs_mask(mode: ClipMode) -> bool:
    return Stage.LOAD_MASK in stages_for(mode)
