"""Domain services."""
from .crossing_analyzer import (
    IntraNodeCrossings, perimeter_t, chords_cross, count_chord_crossings,
    get_intra_node_crossings
)
from .failure_model import (
    FailureStrategy, FailureEstimator, CapacityFailureEstimator,
    AreaDensityFailureEstimator, FailureModel
)
from .connectivity import ConnectivityMap, build_off_board_connectivity

__all__ = [
    'IntraNodeCrossings', 'perimeter_t', 'chords_cross', 'count_chord_crossings',
    'get_intra_node_crossings',
    'FailureStrategy', 'FailureEstimator', 'CapacityFailureEstimator',
    'AreaDensityFailureEstimator', 'FailureModel',
    'ConnectivityMap', 'build_off_board_connectivity'
]
