from .config import ToggleConfig, apply_overrides, configure_logging, parse_overrides
from .flags import FlagsToggleMap, Overrides, overrides
from .fractional import bucket, fractional
from .json_map import load_path, parse_json
from .metrics import Metrics
from .mutable import MutableToggleMap
from .observed import ObservedToggleMap, checksum
from .prom_export import PromExporter
from .standard import mutable, registered_libraries, standard_toggle_map
from .toggle import Toggle, UndefinedToggleError
from .toggle_map import ImmutableToggleMap, NullToggleMap, OrElseToggleMap, ToggleMap, of
from .types import Metadata, is_valid_fraction, is_valid_id, validate_id

__all__ = [
    "Toggle",
    "UndefinedToggleError",
    "Metadata",
    "is_valid_fraction",
    "is_valid_id",
    "validate_id",
    "bucket",
    "fractional",
    "ToggleMap",
    "ImmutableToggleMap",
    "NullToggleMap",
    "OrElseToggleMap",
    "of",
    "MutableToggleMap",
    "Overrides",
    "overrides",
    "FlagsToggleMap",
    "ObservedToggleMap",
    "checksum",
    "Metrics",
    "PromExporter",
    "parse_json",
    "load_path",
    "ToggleConfig",
    "apply_overrides",
    "configure_logging",
    "parse_overrides",
    "mutable",
    "registered_libraries",
    "standard_toggle_map",
]
