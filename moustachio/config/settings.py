from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
import structlog

from moustachio.exceptions import ConfigError

log = structlog.get_logger(__name__)

DEFAULT_RECURSION_LIMIT = 64
DEFAULT_PARTIAL_EXTENSION = ".mustache"

class DataFormat(Enum):
    # formats accepted for data files given on the command line.
    JSON = "json"
    TOML = "toml"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["DataFormat"]:
        if not s:
            return None
        try:
            return cls(s.lower().lstrip("."))
        except ValueError:
            log.warning("invalid_data_format_string", input_string=s)
            return None

    @classmethod
    def from_path(cls, path: Optional[Path]) -> "DataFormat":
        # guesses the format from a file suffix, json when unknown.
        if path is not None:
            guessed = cls.from_string(path.suffix) if path.suffix else None
            if guessed:
                return guessed
        return cls.JSON

@dataclass
class RenderConfig:
    # holds all configuration parameters for a single render.
    recursion_limit: int = DEFAULT_RECURSION_LIMIT
    partial_dirs: List[Path] = field(default_factory=list)
    partial_extension: str = DEFAULT_PARTIAL_EXTENSION
    data_format: Optional[DataFormat] = None
    output_file: Optional[Path] = None
    user_vars: Dict[str, Any] = field(default_factory=dict)
    show_tree: bool = False

    def __post_init__(self):
        # validates values that may come from config files as loose types.
        if isinstance(self.recursion_limit, bool) or not isinstance(self.recursion_limit, int):
            raise ConfigError(f"recursion_limit must be an integer, got {self.recursion_limit!r}")
        if self.recursion_limit < 1:
            raise ConfigError(f"recursion_limit must be at least 1, got {self.recursion_limit}")
        self.partial_dirs = [Path(p) for p in self.partial_dirs]
        if isinstance(self.output_file, str):
            self.output_file = Path(self.output_file) if self.output_file else None
        if isinstance(self.data_format, str):
            self.data_format = DataFormat.from_string(self.data_format)
