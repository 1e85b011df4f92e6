"""Section-based local re-optimization."""
from .connections import ConnectionsWithNodes, get_connections_with_nodes
from .section_builder import SectionGraphInput, PortPointSectionBuilder, cut_paths_to_section
from .section_optimizer import SwapMove, SectionScore, SectionOptimizer

__all__ = [
    'ConnectionsWithNodes', 'get_connections_with_nodes',
    'SectionGraphInput', 'PortPointSectionBuilder', 'cut_paths_to_section',
    'SwapMove', 'SectionScore', 'SectionOptimizer'
]
