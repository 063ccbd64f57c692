"""
Harvesting module: parser adapters and the nested capture model.
"""

from .collector import Collector, TreeCollector
from .harvest_tree import HarvestNode, HarvestTree

__all__ = [
    'Collector',
    'TreeCollector',
    'HarvestNode',
    'HarvestTree'
]
