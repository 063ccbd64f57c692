"""
VEO Harvester

A control-file driven tool for harvesting metadata from VERS V2 Encapsulated
Objects (VEOs) and reporting it as XML, JSON, CSV or TSV.
"""

__version__ = "1.0.0"

# Import core models and interfaces for easy access
from .models import (
    OutputFormat,
    FieldSpec,
    FieldSpecList,
    FieldHarvest,
    HarvestRecord,
    HarvestConfig,
    ProcessingResult
)

from .interfaces import (
    ElementConsumerInterface,
    DocumentParserInterface,
    RecordCodecInterface,
    ConfigurationManagerInterface,
    BatchProcessorInterface
)

from .exceptions import (
    HarvestError,
    ConfigurationError,
    DocumentError,
    OutputError
)

from .harvesting import Collector, TreeCollector, HarvestNode, HarvestTree

__all__ = [
    # Core models
    "OutputFormat",
    "FieldSpec",
    "FieldSpecList",
    "FieldHarvest",
    "HarvestRecord",
    "HarvestConfig",
    "ProcessingResult",

    # Harvesting
    "Collector",
    "TreeCollector",
    "HarvestNode",
    "HarvestTree",

    # Interfaces
    "ElementConsumerInterface",
    "DocumentParserInterface",
    "RecordCodecInterface",
    "ConfigurationManagerInterface",
    "BatchProcessorInterface",

    # Exceptions
    "HarvestError",
    "ConfigurationError",
    "DocumentError",
    "OutputError"
]
