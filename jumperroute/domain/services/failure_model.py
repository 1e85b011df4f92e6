"""Probability-of-failure model for congested nodes."""
import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Mapping, Optional

from ...shared.configuration.settings import FailureModelSettings
from ..models.capacity_mesh import CapacityMeshNode, NodeWithPortPoints
from .crossing_analyzer import get_intra_node_crossings
from ...shared.utils.validation_utils import validate_range

logger = logging.getLogger(__name__)


class FailureStrategy(Enum):
    """Available probability-of-failure formulas."""
    CAPACITY = "capacity"
    AREA_DENSITY = "area_density"


class FailureEstimator(ABC):
    """Abstract base class for probability-of-failure formulas."""
    
    @abstractmethod
    def raw_probability(self, width: float, height: float, num_crossings: int) -> float:
        """Unclamped probability of failure in ``[0, 1]``."""
        pass


class CapacityFailureEstimator(FailureEstimator):
    """Compares the jumpers a node needs with the jumpers that fit in it."""
    
    def __init__(self, crossings_per_jumper: int, cell_width: float, cell_height: float):
        self.crossings_per_jumper = crossings_per_jumper
        self.cell_width = cell_width
        self.cell_height = cell_height
    
    def raw_probability(self, width: float, height: float, num_crossings: int) -> float:
        jumpers_required = math.ceil(num_crossings / self.crossings_per_jumper)
        
        # The 0.1 keeps a node smaller than one cell from dividing by zero
        fit_wide = math.floor(width / self.cell_width) + 0.1
        fit_tall = math.floor(height / self.cell_height) + 0.1
        
        return min(1.0, jumpers_required / (fit_wide * fit_tall))


class AreaDensityFailureEstimator(FailureEstimator):
    """Compares squared crossings with the node area."""
    
    def __init__(self, density: float):
        self.density = density
    
    def raw_probability(self, width: float, height: float, num_crossings: int) -> float:
        capacity = width * height * self.density
        if capacity <= 0:
            return 1.0 if num_crossings > 0 else 0.0
        return min(1.0, num_crossings ** 2 / capacity)


class FailureModel:
    """Converts node crossing counts into clamped failure probabilities."""
    
    def __init__(self, settings: Optional[FailureModelSettings] = None):
        """Initialize failure model.
        
        Args:
            settings: Failure model settings, defaults when None
        """
        self.settings = settings or FailureModelSettings()
        self.strategy = FailureStrategy(self.settings.strategy)
        self.node_max_pf = self.settings.node_max_pf
        validate_range(self.node_max_pf, "node_max_pf", 0.0, 1.0)
        self.estimator = self._create_estimator()
    
    def _create_estimator(self) -> FailureEstimator:
        if self.strategy is FailureStrategy.CAPACITY:
            return CapacityFailureEstimator(
                self.settings.crossings_per_jumper,
                self.settings.jumper_cell_width,
                self.settings.jumper_cell_height
            )
        return AreaDensityFailureEstimator(self.settings.crossing_density)
    
    def probability_of_failure(self, node: CapacityMeshNode, num_same_layer_crossings: int) -> float:
        """Probability that a node cannot be routed.
        
        Args:
            node: Node providing the geometry
            num_same_layer_crossings: Forced same-layer crossings inside it
            
        Returns:
            Probability clamped to ``[0, node_max_pf]``
        """
        pf = self.estimator.raw_probability(node.width, node.height, num_same_layer_crossings)
        return min(max(pf, 0.0), self.node_max_pf)
    
    def node_probability_of_failure(self, node_with_port_points: NodeWithPortPoints,
                                    mesh_node: CapacityMeshNode) -> float:
        """Probability of failure for a node given its current port points."""
        crossings = get_intra_node_crossings(node_with_port_points)
        return self.probability_of_failure(mesh_node, crossings.num_same_layer_crossings)
    
    def compute_section_score(self, nodes_with_port_points: Iterable[NodeWithPortPoints],
                              capacity_mesh_node_map: Mapping[str, CapacityMeshNode]) -> float:
        """Log probability that every node of a section succeeds.
        
        The sum of ``log(1 - Pf)`` over non-target nodes is returned as is;
        converting back to a probability underflows for large sections.
        Higher (closer to zero) is better.
        """
        log_success = 0.0
        
        for node_with_port_points in nodes_with_port_points:
            node = capacity_mesh_node_map.get(node_with_port_points.capacity_mesh_node_id)
            if node is None or node.contains_target:
                continue
            
            pf = self.node_probability_of_failure(node_with_port_points, node)
            log_success += math.log(1 - pf)
        
        return log_success
