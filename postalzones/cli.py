"""
Command-line entry point

    postalzones build   --mode coast --mask land.geojson --postal postal-codes.geojson
    postalzones convert --input postal-codes.json --output public/postal-codes.geojson
    postalzones serve   --port 8000

Environment variables (and a .env file) provide defaults for every build
option; command-line flags win.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config.settings import ClipMode, PipelineSettings
from .errors import PostalPipelineError
from .pipelines.postal.converter import convert_raw_postal
from .pipelines.postal.pipeline import PostalBoundaryPipeline
from .services.logging_service import init_logging
from .utils.file_handler import read_geojson, write_geojson_pair

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postalzones",
        description="Prepare postal zone boundaries for display and lookup.",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--no-log-file", action="store_true", help="Log to the console only")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Clip, gap-fill, dissolve and label postal polygons")
    build.add_argument("--postal", dest="postal_path", help="Postal FeatureCollection (or raw mapping)")
    build.add_argument("--mask", dest="mask_path", help="Land mask (coast mode)")
    build.add_argument("--border-mask", dest="border_mask_path", help="Border mask (border modes)")
    build.add_argument("--mode", choices=[m.value for m in ClipMode], help="Clip mode")
    build.add_argument("--gap-area-max", dest="gap_area_max", help="Maximum gap area in square meters")
    build.add_argument("--output-dir", dest="output_dir", help="Directory for output files")
    build.add_argument("--output-stem", dest="output_stem", help="Output file name prefix")
    build.add_argument("--code-property", dest="code_property", help="Feature property holding the code")
    build.add_argument("--progress-every", dest="progress_every", type=int, help="Clip progress interval")

    convert = sub.add_parser("convert", help="Convert a raw code -> geojson mapping to a FeatureCollection")
    convert.add_argument("--input", required=True, help="Raw postal JSON")
    convert.add_argument("--output", required=True, help="Output .geojson path (a .gz copy is written too)")
    convert.add_argument("--code-property", default="code")

    serve = sub.add_parser("serve", help="Serve output artifacts over HTTP")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def _run_build(args: argparse.Namespace) -> int:
    overrides = {
        key: getattr(args, key)
        for key in (
            "postal_path", "mask_path", "border_mask_path", "mode", "gap_area_max",
            "output_dir", "output_stem", "code_property", "progress_every",
        )
    }
    settings = PipelineSettings.from_env().with_overrides(overrides)
    if settings.postal_path is None:
        settings = settings.with_overrides({"postal_path": settings.output_dir / f"{settings.output_stem}.geojson"})

    result = PostalBoundaryPipeline(settings).run_from_settings()
    summary = result.report.summary_frame()
    if not summary.empty:
        logger.info("📋 Skipped items by stage:\n" + summary.to_string(index=False))
    logger.info(
        f"✅ Done: {len(result.output['features'])} output features, "
        f"{len(result.dissolved['features'])} dissolved, {len(result.labels['features'])} labels"
    )
    return 0


def _run_convert(args: argparse.Namespace) -> int:
    raw = read_geojson(args.input)
    collection = convert_raw_postal(raw, args.code_property)
    write_geojson_pair(collection, Path(args.output))
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("postalzones.main:app", host=args.host, port=args.port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    init_logging(level=args.log_level, log_to_file=not args.no_log_file)

    commands = {
        "build": _run_build,
        "convert": _run_convert,
        "serve": _run_serve,
    }
    try:
        return commands[args.command](args)
    except PostalPipelineError as e:
        logger.error(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
