"""
Processing module: batch harvesting and output sinks.
"""

from .harvest_processor import HarvestProcessor
from .output_sink import OutputSink, open_file_sink, open_stdout_sink

__all__ = [
    'HarvestProcessor',
    'OutputSink',
    'open_file_sink',
    'open_stdout_sink'
]
