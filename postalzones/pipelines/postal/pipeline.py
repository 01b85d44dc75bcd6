"""
Postal Boundary Pipeline
Clips, gap-fills, dissolves and labels postal zone polygons
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from shapely.geometry.base import BaseGeometry

from ...config.paths import OutputPaths
from ...config.settings import ClipMode, PipelineSettings
from ...errors import ConfigurationError, MaskBuildError
from ...utils.file_handler import read_geojson, write_geojson_pair, write_json
from ..calculators import GeodesicAreaCalculator
from .clipper import clip_features
from .converter import load_postal_collection, parse_postal_features
from .dissolver import dissolve_by_code
from .gaps import assign_gaps, build_gaps
from .labels import build_label_points
from .mask_loader import mask_geometries, normalize_mask
from .models import DissolvedFeature, GapPolygon, LabelPoint, PostalFeature, feature_collection
from .modes import Stage, needs_mask, stages_for
from .outcomes import RunReport
from .unifier import fold_union

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """GeoJSON documents produced by one run, plus its report."""

    output: Dict[str, Any]
    dissolved: Dict[str, Any]
    labels: Dict[str, Any]
    report: RunReport


@dataclass
class _RunState:
    collection: Dict[str, Any]
    features: List[PostalFeature]
    mask_document: Optional[Dict[str, Any]] = None
    mask_parts: List[BaseGeometry] = field(default_factory=list)
    mask: Optional[BaseGeometry] = None
    gaps: List[GapPolygon] = field(default_factory=list)
    additions: List[PostalFeature] = field(default_factory=list)


class PostalBoundaryPipeline:
    """
    One-shot batch pipeline over an in-memory postal FeatureCollection

    The clip mode selects which stages run (see modes.STAGE_PLANS); dissolve
    and label extraction always follow.
    """

    def __init__(self, settings: PipelineSettings):
        self.settings = settings
        self.area_calculator = GeodesicAreaCalculator.spherical()
        self._handlers: Dict[Stage, Callable[[_RunState, RunReport], None]] = {
            Stage.LOAD_MASK: self._load_mask,
            Stage.UNIFY_MASK: self._unify_mask,
            Stage.CLIP: self._clip,
            Stage.FIND_GAPS: self._find_gaps,
            Stage.ASSIGN_GAPS: self._assign_gaps,
        }

    def run(
        self,
        postal_collection: Dict[str, Any],
        mask_document: Optional[Dict[str, Any]] = None,
    ) -> PipelineResult:
        """
        Run the configured stages

        Args:
            postal_collection: Postal FeatureCollection
            mask_document: Parsed mask (bare geometry, Feature or
                FeatureCollection); required unless mode is "none"

        Returns:
            PipelineResult with the three output collections
        """
        mode = self.settings.mode
        code_property = self.settings.code_property
        report = RunReport(mode=mode.value)
        report.set_count("input_features", len(postal_collection.get("features") or []))

        stages = stages_for(mode)
        if needs_mask(mode) and mask_document is None:
            raise ConfigurationError(f"CLIP_MODE={mode.value} requires a mask document")

        state = _RunState(
            collection=postal_collection,
            features=parse_postal_features(postal_collection, code_property, report),
            mask_document=mask_document,
        )

        if mode is ClipMode.NONE:
            logger.info("⏩ Skipping clipping (CLIP_MODE=none). Using original postal polygons.")

        for stage in stages:
            logger.info(f"▶️ Stage {stage.value}")
            self._handlers[stage](state, report)

        if mode is ClipMode.NONE:
            output = postal_collection
        else:
            output = feature_collection(
                [f.to_geojson() for f in state.features + state.additions]
            )
        report.set_count("output_features", len(output.get("features") or []))

        dissolved = dissolve_by_code(state.features + state.additions, report)
        labels = build_label_points(dissolved, report)

        return PipelineResult(
            output=output,
            dissolved=self._dissolved_collection(dissolved),
            labels=self._labels_collection(labels),
            report=report,
        )

    def run_from_settings(self) -> PipelineResult:
        """Load inputs named in the settings, run, and write every artifact."""
        settings = self.settings.validate()
        if settings.postal_path is None:
            raise ConfigurationError("Missing postal source path (POSTAL_PATH)")

        logger.info(f"⚙️ Run configuration: {settings.describe()}")
        postal_collection = load_postal_collection(settings.postal_path, settings.code_property)

        mask_document = None
        mask_path = settings.resolve_mask_path()
        if mask_path is not None:
            mask_document = read_geojson(mask_path)

        result = self.run(postal_collection, mask_document)
        self.write_outputs(result, OutputPaths(settings.output_dir, settings.output_stem))
        return result

    def write_outputs(self, result: PipelineResult, paths: OutputPaths) -> None:
        paths.ensure()
        write_geojson_pair(result.output, paths.clipped())

        logger.info("🫧 Writing dissolved polygons...")
        write_geojson_pair(result.dissolved, paths.dissolved())

        logger.info("🏷️ Writing label points...")
        write_geojson_pair(result.labels, paths.labels())

        report_data = result.report.to_dict()
        report_data["settings"] = self.settings.describe()
        write_json(report_data, paths.report())
        logger.info(f"📋 Run report: {result.report.skip_count()} skipped items -> {paths.report()}")

    # ----- stages -----

    def _load_mask(self, state: _RunState, report: RunReport) -> None:
        features = normalize_mask(state.mask_document)
        state.mask_parts = mask_geometries(features, report)
        logger.info(f"🗺️ Mask has {len(features)} features ({len(state.mask_parts)} usable)")

    def _unify_mask(self, state: _RunState, report: RunReport) -> None:
        state.mask = fold_union(state.mask_parts, report=report, stage="mask_union")
        if state.mask is None:
            raise MaskBuildError("Failed to build mask geometry")

    def _clip(self, state: _RunState, report: RunReport) -> None:
        logger.info(f"✂️ Clipping postal polygons ({self.settings.mode.value})...")
        state.features = clip_features(
            state.features,
            state.mask,
            report=report,
            progress_every=self.settings.progress_every,
        )

    def _find_gaps(self, state: _RunState, report: RunReport) -> None:
        logger.info("🔎 Finding gaps...")
        covered = fold_union(
            [f.geometry for f in state.features],
            report=report,
            stage="coverage_union",
            codes=[f.code for f in state.features],
        )
        state.gaps = build_gaps(state.mask, covered, report, self.area_calculator)

    def _assign_gaps(self, state: _RunState, report: RunReport) -> None:
        state.additions = assign_gaps(
            state.features,
            state.gaps,
            gap_area_max=self.settings.gap_area_max,
            report=report,
        )

    # ----- serialization -----

    def _dissolved_collection(self, dissolved: List[DissolvedFeature]) -> Dict[str, Any]:
        return feature_collection([d.to_geojson(self.settings.code_property) for d in dissolved])

    def _labels_collection(self, labels: List[LabelPoint]) -> Dict[str, Any]:
        return feature_collection([label.to_geojson(self.settings.code_property) for label in labels])
