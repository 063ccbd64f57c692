"""
Custom exceptions for the VEO Harvester system.

This module defines specific exception types for the error conditions that
can occur while reading the control file, harvesting a document and writing
the harvested records.
"""


class HarvestError(Exception):
    """Base exception for all harvesting related errors."""

    def __init__(self, message: str, source: str = None):
        """
        Initialize harvest error.

        Args:
            message: Error description
            source: Optional name of the file (control file, VEO or output) involved
        """
        super().__init__(message)
        self.source = source


class ConfigurationError(HarvestError):
    """
    Exception raised when the field configuration is invalid or missing.

    Always fatal: the field list cannot be partially valid.
    """

    def __init__(self, message: str, source: str = None, line_number: int = None):
        """
        Initialize configuration error.

        Args:
            message: Error description
            source: Optional control file name
            line_number: Optional 1-based line number of the offending line
        """
        super().__init__(message, source)
        self.line_number = line_number

    def __str__(self) -> str:
        message = super().__str__()
        if self.source and self.line_number:
            return f"{self.source} line {self.line_number}: {message}"
        if self.source:
            return f"{self.source}: {message}"
        return message


class DocumentError(HarvestError):
    """Exception raised when one document cannot be parsed or harvested."""
    pass


class OutputError(HarvestError):
    """Exception raised when writing harvested records fails."""
    pass
