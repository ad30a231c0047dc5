# moustachio/core/sources.py
"""
Reads templates and data files for the command line.
"""
import json
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
import toml

from moustachio.config.settings import DataFormat
from moustachio.exceptions import DataLoadError
from moustachio.util import strip_utf8_bom

log = structlog.get_logger(__name__)

STDIN_MARKER = "-"


def read_text_source(source: str, encoding: str = "utf-8") -> str:
    """Reads a file path, or stdin when ``source`` is '-'."""
    if source == STDIN_MARKER:
        log.debug("reading_from_stdin")
        raw = sys.stdin.buffer.read() if hasattr(sys.stdin, "buffer") else sys.stdin.read().encode(encoding)
    else:
        try:
            raw = Path(source).read_bytes()
        except OSError as e:
            raise DataLoadError(f"could not read '{source}': {e}") from e
    try:
        return strip_utf8_bom(raw).decode(encoding)
    except UnicodeDecodeError as e:
        raise DataLoadError(f"'{source}' is not valid {encoding}: {e}") from e


def load_data(source: Optional[str], data_format: Optional[DataFormat] = None) -> Any:
    """Loads the root value for a render from a JSON or TOML source."""
    if source is None:
        return {}
    if data_format is None:
        data_format = DataFormat.JSON if source == STDIN_MARKER else DataFormat.from_path(Path(source))
    text = read_text_source(source)
    log.debug("decoding_data_source", source=source, format=data_format.value)
    try:
        if data_format is DataFormat.TOML:
            return toml.loads(text)
        return json.loads(text) if text.strip() else {}
    except (json.JSONDecodeError, toml.TomlDecodeError) as e:
        raise DataLoadError(f"could not decode {data_format.value} data from '{source}': {e}") from e
