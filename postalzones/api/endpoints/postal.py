"""
Postal Artifact Endpoints
Serve the files produced by a pipeline run; nothing here recomputes geometry
"""
import logging
from pathlib import Path
from typing import List, Optional, Set

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from ...config.paths import ARTIFACTS, OutputPaths
from ...errors import InputDataError
from ...utils.file_handler import read_geojson
from ...utils.codes import normalize_code
from ...utils.response_models import ArtifactInfo, ArtifactsResponse, CodesResponse, LookupResponse
from ..dependencies import get_code_property, get_output_paths

logger = logging.getLogger(__name__)
router = APIRouter()

GEOJSON_MEDIA_TYPE = "application/geo+json"


def _candidates(name: str, paths: OutputPaths) -> List[Path]:
    """Lookup order for an artifact; clipped falls back to the raw source."""
    ordered = [paths.artifact(name)]
    if name == "clipped":
        ordered.append(paths.source())
    return ordered


def resolve_artifact(name: str, paths: OutputPaths) -> Optional[Path]:
    for path in _candidates(name, paths):
        found = paths.existing(path)
        if found is not None:
            return found
    return None


def _load_codes(paths: OutputPaths, code_property: str) -> Set[str]:
    found = resolve_artifact("dissolved", paths)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dissolved artifact not built yet")

    try:
        data = read_geojson(found)
    except InputDataError as e:
        logger.error(f"❌ Could not read {found}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return {
        str(feature.get("properties", {}).get(code_property))
        for feature in data.get("features", [])
        if feature.get("properties", {}).get(code_property)
    }


@router.get("", response_model=ArtifactsResponse)
async def list_artifacts(paths: OutputPaths = Depends(get_output_paths)):
    """List the artifacts and whether each is available."""
    artifacts = []
    for name in ARTIFACTS:
        found = resolve_artifact(name, paths)
        artifacts.append(ArtifactInfo(
            name=name,
            path=str(found) if found else None,
            available=found is not None,
            size_bytes=found.stat().st_size if found else None,
        ))
    return ArtifactsResponse(status="success", artifacts=artifacts)


@router.get("/codes", response_model=CodesResponse)
async def list_codes(
    paths: OutputPaths = Depends(get_output_paths),
    code_property: str = Depends(get_code_property),
):
    """Sorted distinct postal codes in the dissolved artifact."""
    codes = sorted(_load_codes(paths, code_property))
    return CodesResponse(status="success", count=len(codes), codes=codes)


@router.get("/lookup", response_model=LookupResponse)
async def lookup_code(
    code: str,
    paths: OutputPaths = Depends(get_output_paths),
    code_property: str = Depends(get_code_property),
):
    """Normalize a user-entered code and report whether a zone exists for it."""
    normalized = normalize_code(code)
    if normalized is None:
        return LookupResponse(status="error", error=f"Not a 4-digit postal code: '{code}'", query=code)

    codes = _load_codes(paths, code_property)
    return LookupResponse(status="success", query=code, code=normalized, exists=normalized in codes)


@router.get("/report")
async def get_report(paths: OutputPaths = Depends(get_output_paths)):
    """The run report written by the last build."""
    report_path = paths.report()
    if not report_path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No run report found")
    try:
        return read_geojson(report_path)
    except InputDataError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{artifact}")
async def get_artifact(artifact: str, paths: OutputPaths = Depends(get_output_paths)):
    """
    Serve one artifact: clipped, dissolved or labels

    The gzip copy is sent with Content-Encoding: gzip when it exists.
    """
    if artifact not in ARTIFACTS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown artifact '{artifact}' (expected one of: {', '.join(ARTIFACTS)})",
        )

    found = resolve_artifact(artifact, paths)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Artifact '{artifact}' not available")

    logger.debug(f"📤 Serving {artifact} from {found}")
    headers = {"Content-Encoding": "gzip"} if found.suffix == ".gz" else None
    return FileResponse(str(found), media_type=GEOJSON_MEDIA_TYPE, headers=headers)
