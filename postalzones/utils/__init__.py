"""
Utility modules for the postal zone backend.
"""

from .codes import normalize_code, pad_code
from .file_handler import read_geojson, read_geojson_gz, serialize_geojson, write_geojson_pair, write_json

__all__ = [
    'normalize_code',
    'pad_code',
    'read_geojson',
    'read_geojson_gz',
    'serialize_geojson',
    'write_geojson_pair',
    'write_json',
]
