"""
Normalizer component - Parsed import rows to canonical loads.
"""

from ._impl import (
    FIELD_CHAINS,
    ImporterConfig,
    fallback_title,
    normalize_row,
    normalize_status,
    parse_date,
    resolve,
    to_number,
)
from .component import run, run_import, run_normalize
from .models import (
    FieldChain,
    ImportOutput,
    ImportRowError,
    ImportRowsInput,
    NormalizeOutput,
    NormalizeRowInput,
)
from .ports import LoadWriterPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_import",
    "run_normalize",
    # Input models
    "ImportRowsInput",
    "NormalizeRowInput",
    # Output models
    "ImportOutput",
    "ImportRowError",
    "NormalizeOutput",
    # Ports
    "LoadWriterPort",
    "TimePort",
    # Functional core
    "FIELD_CHAINS",
    "FieldChain",
    "ImporterConfig",
    "fallback_title",
    "normalize_row",
    "normalize_status",
    "parse_date",
    "resolve",
    "to_number",
]
