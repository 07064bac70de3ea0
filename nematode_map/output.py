"""
Where the map artifacts are written.

Every artifact of a run lands under ``OUTPUT_DIR`` with a fixed filename, so
a second run replaces the first.
"""

import os

OUTPUT_DIR = "output"

PRESENCE_GEOJSON_FILENAME = "presence.geojson"
MARKERS_GEOJSON_FILENAME = "markers.geojson"
PRESENCE_INDEX_FILENAME = "presence_index.json"
HTML_FILENAME = "output.html"


def ensure_output_dir() -> None:
    os.makedirs(OUTPUT_DIR, exist_ok=True)


def get_output_path(filename: str) -> str:
    """
    Path of an artifact inside ``OUTPUT_DIR``, creating the directory first.

    Args:
        filename: Bare artifact filename, e.g. ``PRESENCE_INDEX_FILENAME``

    Returns:
        ``OUTPUT_DIR`` joined with the filename
    """
    ensure_output_dir()
    return os.path.join(OUTPUT_DIR, filename)


def normalize_path(path: str) -> str:
    """
    Place a bare filename under ``OUTPUT_DIR``.

    Paths that already name a directory are returned unchanged.
    """
    if not path.startswith(f"{OUTPUT_DIR}/") and not os.path.dirname(path):
        return os.path.join(OUTPUT_DIR, path)
    return path


def get_presence_geojson_path() -> str:
    return get_output_path(PRESENCE_GEOJSON_FILENAME)


def get_markers_geojson_path() -> str:
    return get_output_path(MARKERS_GEOJSON_FILENAME)


def get_presence_index_path() -> str:
    return get_output_path(PRESENCE_INDEX_FILENAME)


def get_html_path() -> str:
    """The folium map page."""
    return get_output_path(HTML_FILENAME)


def prepare_file_path(path: str) -> str:
    """Create the parent directory of ``path`` if it has one, and return ``path``."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return path
