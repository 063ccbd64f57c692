"""
Parsing module: streaming VEO parser.
"""

from .veo_parser import VEOParser

__all__ = ['VEOParser']
