"""
Dissolve by postal code

Groups features by code and unions each group with the same ordered fold as
the mask unifier. Groups appear in first-seen code order.
"""
import logging
from typing import Dict, List, Optional, Sequence

from .models import DissolvedFeature, PostalFeature
from .outcomes import RunReport, SkipReason
from .unifier import fold_union

logger = logging.getLogger(__name__)

STAGE = "dissolve"


def group_by_code(
    features: Sequence[PostalFeature],
    report: Optional[RunReport] = None,
) -> Dict[str, List[PostalFeature]]:
    grouped: Dict[str, List[PostalFeature]] = {}
    for feature in features:
        if not feature.code:
            if report is not None:
                report.record_skip(STAGE, SkipReason.MISSING_CODE, index=feature.index)
            continue
        grouped.setdefault(feature.code, []).append(feature)
    return grouped


def dissolve_by_code(
    features: Sequence[PostalFeature],
    report: Optional[RunReport] = None,
) -> List[DissolvedFeature]:
    dissolved: List[DissolvedFeature] = []
    for code, group in group_by_code(features, report).items():
        merged = fold_union(
            [f.geometry for f in group],
            report=report,
            stage=STAGE,
            codes=[code] * len(group),
        )
        if merged is None or merged.is_empty:
            continue
        dissolved.append(DissolvedFeature(code=code, geometry=merged))

    logger.info(f"🫧 Dissolved {len(features)} features into {len(dissolved)} codes")
    if report is not None:
        report.set_count("dissolved_features", len(dissolved))
    return dissolved
