"""
Centralized configuration management for the VEO Harvester system.

This module provides the ConfigManager class that serves as the single source of truth
for run configuration: environment variable handling, control file loading and the
assembly of a HarvestConfig from settings and command line overrides.
"""

import os
import logging

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .field_spec_loader import load_field_spec_list
from .processing_defaults import ProcessingDefaults
from ..exceptions import ConfigurationError
from ..interfaces import ConfigurationManagerInterface
from ..models import FieldSpecList, HarvestConfig, OutputFormat


@dataclass
class HarvestSettings:
    """Harvesting settings with environment variable support."""
    control_file: Optional[str] = None
    output_dir: str = "."
    output_format: Optional[str] = None
    log_level: str = ProcessingDefaults.LOG_LEVEL
    file_extensions: Tuple[str, ...] = ProcessingDefaults.FILE_EXTENSIONS

    @classmethod
    def from_environment(cls) -> 'HarvestSettings':
        """Create harvest settings from environment variables."""
        extensions = os.environ.get('VEO_HARVESTER_FILE_EXTENSIONS')
        if extensions:
            file_extensions = tuple(ext.strip() for ext in extensions.split(',') if ext.strip())
        else:
            file_extensions = cls.file_extensions

        return cls(
            control_file=os.environ.get('VEO_HARVESTER_CONTROL_FILE', cls.control_file),
            output_dir=os.environ.get('VEO_HARVESTER_OUTPUT_DIR', cls.output_dir),
            output_format=os.environ.get('VEO_HARVESTER_OUTPUT_FORMAT', cls.output_format),
            log_level=os.environ.get('VEO_HARVESTER_LOG_LEVEL', cls.log_level).upper(),
            file_extensions=file_extensions
        )


class ConfigManager(ConfigurationManagerInterface):
    """
    Centralized configuration manager serving as single source of truth.

    This class consolidates:
    - Environment variable handling
    - Control file loading (cached per path)
    - Run configuration assembly
    """

    def __init__(self, settings: Optional[HarvestSettings] = None):
        """
        Initialize the centralized configuration manager.

        Args:
            settings: Explicit settings. If None, settings are read from the environment.
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings or HarvestSettings.from_environment()

        # Cache for loaded control files
        self._field_spec_cache: Dict[str, FieldSpecList] = {}

        self.logger.debug(f"ConfigManager initialized with settings: {self.settings}")

    def load_field_specs(self, control_file: Optional[Union[str, Path]] = None) -> FieldSpecList:
        """
        Load the field list from a control file, with caching.

        Args:
            control_file: Path to the control file. If None, uses VEO_HARVESTER_CONTROL_FILE.

        Returns:
            Loaded field list

        Raises:
            ConfigurationError: If no control file is configured or it is invalid
        """
        if control_file is None:
            control_file = self.settings.control_file
        if control_file is None:
            raise ConfigurationError("No control file specified")

        cache_key = str(Path(control_file).resolve())
        if cache_key in self._field_spec_cache:
            self.logger.debug(f"Returning cached field list for {control_file}")
            return self._field_spec_cache[cache_key]

        field_specs = load_field_spec_list(control_file)
        self._field_spec_cache[cache_key] = field_specs
        return field_specs

    def get_harvest_config(self,
                           output_format: Optional[Union[str, OutputFormat]] = None,
                           output_dir: Optional[Union[str, Path]] = None,
                           output_file: Optional[Union[str, Path]] = None,
                           to_stdout: bool = False,
                           nested: bool = False,
                           chatty: bool = False) -> HarvestConfig:
        """
        Build the run configuration, letting explicit arguments override environment settings.

        The output format falls back to the environment setting and then to the
        extension of output_file.

        Raises:
            ConfigurationError: If no output format can be determined or the combination is invalid
        """
        fmt = output_format or self.settings.output_format
        if fmt is None and output_file is not None:
            fmt = OutputFormat.from_file_name(str(output_file))
            if fmt is not None:
                self.logger.info(f"Output type is {fmt.name} (set from output file name)")
        if fmt is None:
            raise ConfigurationError(
                "No output type (XML, JSON, CSV or TSV) defined and cannot be inferred from output file")
        if isinstance(fmt, str):
            fmt = OutputFormat.from_name(fmt)

        return HarvestConfig(
            output_format=fmt,
            output_dir=Path(output_dir) if output_dir is not None else Path(self.settings.output_dir),
            output_file=Path(output_file) if output_file is not None else None,
            to_stdout=to_stdout,
            nested=nested,
            chatty=chatty,
            file_extensions=self.settings.file_extensions
        )

    def get_configuration_summary(self) -> Dict[str, object]:
        """Summary of the active settings for logging."""
        return {
            'control_file': self.settings.control_file,
            'output_dir': self.settings.output_dir,
            'output_format': self.settings.output_format,
            'log_level': self.settings.log_level,
            'file_extensions': list(self.settings.file_extensions),
            'cached_control_files': len(self._field_spec_cache)
        }


# Global configuration manager instance
_global_config_manager: Optional[ConfigManager] = None


def get_config_manager(settings: Optional[HarvestSettings] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        settings: Explicit settings. Only used on first call.

    Returns:
        Global ConfigManager instance
    """
    global _global_config_manager

    if _global_config_manager is None:
        _global_config_manager = ConfigManager(settings)

    return _global_config_manager


def reset_config_manager() -> None:
    """Reset the global configuration manager instance."""
    global _global_config_manager
    _global_config_manager = None
