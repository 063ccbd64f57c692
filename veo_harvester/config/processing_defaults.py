"""
Centralized configuration defaults for harvesting operations.

This module defines operational configuration constants used throughout the system.
CLI arguments and VEO_HARVESTER_* environment variables can override these
defaults at runtime.

Single Source of Truth: Change these values once; all modules automatically use updated defaults.
"""


class ProcessingDefaults:
    """
    Centralized operational configuration for VEO harvesting.

    Values that can be overridden at runtime:
    - veo-harvester -cf fields.txt --log-level DEBUG ...
    - VEO_HARVESTER_FILE_EXTENSIONS=.veo,.xml
    """

    # Input discovery
    FILE_EXTENSIONS = (".veo", ".xml")  # Files treated as VEOs when walking directories

    # Output
    OUTPUT_ENCODING = "utf-8"
    REPORT_TAG = "Report"  # Element wrapping one document's record in XML output
    MULTI_VALUE_SEPARATOR = "$$"  # Joins multiple values of one field in CSV/TSV output

    # Control file
    COMMENT_PREFIX = "!"
    FIELD_SEPARATOR = "\t"

    # Short mnemonics usable at the start of a control file path. A mnemonic
    # expands to every canonical prefix listed for it, so one control line can
    # match the same field in plain and in modified (revised) VEOs.
    PATH_PREFIX_ALIASES = (
        ("fileVEO", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:File"),
        ("fileVEO", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:ModifiedVEO/vers:RevisedVEO/vers:SignedObject/vers:ObjectContent/vers:File"),
        ("recordVEO", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:Record"),
        ("recordVEO", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:ModifiedVEO/vers:RevisedVEO/vers:SignedObject/vers:ObjectContent/vers:Record"),
        ("VEOMetadata", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:File/vers:FileMetadata"),
        ("VEOMetadata", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:ModifiedVEO/vers:RevisedVEO/vers:SignedObject/vers:ObjectContent/vers:File/vers:FileMetadata"),
        ("VEOMetadata", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:Record/vers:RecordMetadata"),
        ("VEOMetadata", "vers:VERSEncapsulatedObject/vers:SignedObject/vers:ObjectContent/vers:ModifiedVEO/vers:RevisedVEO/vers:SignedObject/vers:ObjectContent/vers:Record/vers:RecordMetadata"),
    )

    # Logging
    LOG_LEVEL = "WARNING"  # Default logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG)

    @classmethod
    def to_dict(cls) -> dict:
        """
        Export all defaults as a dictionary.

        Returns:
            Dictionary of all ProcessingDefaults class attributes.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if not key.startswith('_') and key.isupper()
        }

    @classmethod
    def log_summary(cls, logger=None):
        """
        Log a summary of all operational defaults.

        Args:
            logger: Optional logger instance. If None, prints to stdout.
        """
        config_dict = cls.to_dict()
        config_dict.pop("PATH_PREFIX_ALIASES", None)
        summary = "\n".join([f"  {key}: {value}" for key, value in sorted(config_dict.items())])
        message = f"Processing Configuration Defaults:\n{summary}"

        if logger:
            logger.info(message)
        else:
            print(message)
