"""
File Handling Utilities
GeoJSON read/write, each output written once plain and once gzip-compressed
"""
import gzip
import json
import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from ..config.paths import gz_path
from ..errors import InputDataError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def serialize_geojson(data: Dict[str, Any]) -> bytes:
    """Compact UTF-8 JSON, the exact bytes written to both output files."""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def read_geojson(path: PathLike) -> Dict[str, Any]:
    """
    Read and parse a GeoJSON (or plain JSON) document

    Args:
        path: File to read; a ".gz" suffix is decompressed transparently

    Returns:
        Parsed document
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise InputDataError(f"Input file not found: {file_path}")

    try:
        if file_path.suffix == ".gz":
            raw = gzip.decompress(file_path.read_bytes())
        else:
            raw = file_path.read_bytes()
        return json.loads(raw.decode("utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InputDataError(f"Could not parse {file_path}: {e}") from e


def read_geojson_gz(path: PathLike) -> Dict[str, Any]:
    """Decompress and parse a gzip output file."""
    return json.loads(gzip.decompress(Path(path).read_bytes()).decode("utf-8"))


def write_geojson_pair(data: Dict[str, Any], path: PathLike) -> Tuple[Path, Path]:
    """
    Write data to path and to path + ".gz"

    Returns:
        (plain_path, gzip_path)
    """
    plain_path = Path(path)
    plain_path.parent.mkdir(parents=True, exist_ok=True)
    payload = serialize_geojson(data)

    plain_path.write_bytes(payload)
    compressed_path = gz_path(plain_path)
    # mtime=0 keeps the compressed bytes reproducible between runs
    compressed_path.write_bytes(gzip.compress(payload, mtime=0))

    count = len(data.get("features", [])) if isinstance(data, dict) else 0
    logger.info(f"💾 Wrote {count} features to {plain_path}")
    logger.info(f"🗜️ Wrote gzip to {compressed_path}")
    return plain_path, compressed_path


def write_json(data: Dict[str, Any], path: PathLike) -> Path:
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return file_path
