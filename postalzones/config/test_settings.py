import math
from pathlib import Path

import pytest

from ..errors import ConfigurationError
from .paths import OutputPaths
from .settings import ClipMode, PipelineSettings, parse_gap_area


def test_from_env_defaults() -> None:
    settings = PipelineSettings.from_env({})
    assert settings.mode is ClipMode.COAST
    assert math.isinf(settings.gap_area_max)
    assert settings.output_dir == Path("public")
    assert settings.code_property == "code"


def test_from_env_reads_every_field() -> None:
    settings = PipelineSettings.from_env({
        "POSTAL_PATH": "in/postal.geojson",
        "MASK_PATH": "in/land.geojson",
        "BORDER_MASK_PATH": "in/border.geojson",
        "CLIP_MODE": "gapfill-border",
        "GAP_AREA_MAX": "2500000",
        "OUTPUT_DIR": "out",
        "CODE_PROPERTY": "postnummer",
    })
    assert settings.mode is ClipMode.GAPFILL_BORDER
    assert settings.gap_area_max == 2_500_000.0
    assert settings.resolve_mask_path() == Path("in/border.geojson")
    assert settings.code_property == "postnummer"


def test_mask_path_resolution_per_mode() -> None:
    settings = PipelineSettings(mask_path=Path("land.geojson"))
    assert settings.resolve_mask_path() == Path("land.geojson")
    assert settings.with_overrides({"mode": "border"}).resolve_mask_path() == Path("land.geojson")
    assert settings.with_overrides({"mode": "none"}).resolve_mask_path() is None

    coast_only_border = PipelineSettings(border_mask_path=Path("border.geojson"))
    with pytest.raises(ConfigurationError):
        coast_only_border.validate()


def test_validate_requires_mask_unless_none() -> None:
    with pytest.raises(ConfigurationError):
        PipelineSettings(mode=ClipMode.BORDER).validate()
    PipelineSettings(mode=ClipMode.NONE).validate()


def test_invalid_mode_and_gap_area() -> None:
    with pytest.raises(ConfigurationError):
        ClipMode.parse("coastline")
    with pytest.raises(ConfigurationError):
        parse_gap_area("lots")
    with pytest.raises(ConfigurationError):
        parse_gap_area("-1")
    assert math.isinf(parse_gap_area(""))
    assert parse_gap_area("Infinity") == math.inf


def test_overrides_skip_none_values() -> None:
    settings = PipelineSettings(mask_path=Path("a.geojson")).with_overrides(
        {"mask_path": None, "output_dir": "dist", "gap_area_max": "10"}
    )
    assert settings.mask_path == Path("a.geojson")
    assert settings.output_dir == Path("dist")
    assert settings.gap_area_max == 10.0


def test_output_paths_layout() -> None:
    paths = OutputPaths(Path("public"))
    assert paths.clipped() == Path("public/postal-codes.clipped.geojson")
    assert paths.dissolved() == Path("public/postal-codes.dissolved.geojson")
    assert paths.labels() == Path("public/postal-codes.labels.geojson")
    assert paths.source() == Path("public/postal-codes.geojson")
    with pytest.raises(KeyError):
        paths.artifact("raw")
