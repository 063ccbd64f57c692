"""Configuration management components."""

from .processing_defaults import ProcessingDefaults

__all__ = ['ProcessingDefaults']
