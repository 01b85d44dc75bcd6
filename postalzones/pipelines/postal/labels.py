"""
Label points: one centroid per dissolved postal zone.
"""
import logging
from typing import List, Optional, Sequence

from .geometry_ops import safe_centroid
from .models import DissolvedFeature, LabelPoint
from .outcomes import RunReport

logger = logging.getLogger(__name__)

STAGE = "labels"


def build_label_points(
    dissolved: Sequence[DissolvedFeature],
    report: Optional[RunReport] = None,
) -> List[LabelPoint]:
    labels: List[LabelPoint] = []
    for position, feature in enumerate(dissolved):
        result = safe_centroid(feature.geometry)
        if not result.ok:
            logger.warning(f"⚠️ No label for {feature.code}: {result.detail}")
            if report is not None:
                report.record_result(STAGE, result, index=position, code=feature.code)
            continue
        labels.append(LabelPoint(code=feature.code, point=result.geometry))

    logger.info(f"🏷️ Built {len(labels)} label points")
    if report is not None:
        report.set_count("label_points", len(labels))
    return labels
