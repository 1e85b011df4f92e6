"""Stepped local re-optimization of port point assignment by section."""
import copy
import math
import random
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ...domain.models.capacity_mesh import (
    CapacityMeshEdge, CapacityMeshNode, InputNodeWithPortPoints,
    NodeWithPortPoints, PortPoint
)
from ...domain.models.pathing import ConnectionPathResult
from ...domain.models.section import PortPointSection
from ...domain.services.failure_model import FailureModel
from ...shared.configuration.settings import FailureModelSettings, SectionOptimizerSettings
from ..base.adjacency import AdjacencyIndex
from ..base.solver import BaseSolver
from .section_builder import PortPointSectionBuilder, SectionGraphInput

SCORE_EPSILON = 1e-12


@dataclass(frozen=True)
class SwapMove:
    """Exchange the connections assigned to two real port points."""
    first_port_point_id: str
    second_port_point_id: str


@dataclass(frozen=True)
class SectionScore:
    """Outcome of optimizing one section."""
    center_node_id: str
    node_count: int
    score_before: float
    score_after: float
    accepted_swaps: int
    
    @property
    def improved(self) -> bool:
        return self.score_after > self.score_before + SCORE_EPSILON


class SectionOptimizer(BaseSolver):
    """Improves the section score around the most failure-prone nodes.
    
    Each step takes the next centre node, builds its section and hill-climbs
    over swaps of real port points sharing an internal section edge, keeping a
    swap only if the section score strictly improves.
    """
    
    def __init__(self, capacity_mesh_nodes: Sequence[CapacityMeshNode],
                 capacity_mesh_edges: Sequence[CapacityMeshEdge],
                 input_nodes: Sequence[InputNodeWithPortPoints],
                 node_assigned_port_points: Mapping[str, Sequence[PortPoint]],
                 connection_results: Sequence[ConnectionPathResult],
                 settings: Optional[SectionOptimizerSettings] = None,
                 failure_settings: Optional[FailureModelSettings] = None):
        self.settings = settings or SectionOptimizerSettings()
        super().__init__(max_iterations=self.settings.max_iterations)
        
        self.failure_model = FailureModel(failure_settings)
        self.capacity_mesh_nodes = list(capacity_mesh_nodes)
        self.capacity_mesh_node_map: Dict[str, CapacityMeshNode] = {
            node.capacity_mesh_node_id: node for node in self.capacity_mesh_nodes
        }
        self.node_assigned_port_points: Dict[str, List[PortPoint]] = {
            node_id: list(points) for node_id, points in node_assigned_port_points.items()
        }
        self.connection_results: List[ConnectionPathResult] = copy.deepcopy(list(connection_results))
        
        self.adjacency = AdjacencyIndex(capacity_mesh_edges)
        self.section_builder = PortPointSectionBuilder(
            SectionGraphInput(
                input_nodes=list(input_nodes),
                capacity_mesh_nodes=self.capacity_mesh_nodes,
                capacity_mesh_edges=list(capacity_mesh_edges),
                connection_results=self.connection_results
            ),
            adjacency=self.adjacency
        )
        
        self.section_scores: List[SectionScore] = []
        self.center_node_ids = self._rank_center_nodes()
        self.current_index = 0
        self.log.info(f"Optimizing {len(self.center_node_ids)} sections")
    
    def _node_with_port_points(self, node_id: str) -> NodeWithPortPoints:
        node = self.capacity_mesh_node_map[node_id]
        return NodeWithPortPoints(
            capacity_mesh_node_id=node_id,
            center=node.center,
            width=node.width,
            height=node.height,
            port_points=list(self.node_assigned_port_points.get(node_id, [])),
            available_z=list(node.available_z)
        )
    
    def _rank_center_nodes(self) -> List[str]:
        ranked: List[Tuple[float, str]] = []
        for node in self.capacity_mesh_nodes:
            node_id = node.capacity_mesh_node_id
            if node.contains_target or node_id not in self.node_assigned_port_points:
                continue
            pf = self.failure_model.node_probability_of_failure(
                self._node_with_port_points(node_id), node
            )
            if pf > self.settings.min_pf_to_optimize:
                ranked.append((pf, node_id))
        
        ranked.sort(key=lambda item: (-item[0], item[1]))
        return [node_id for _, node_id in ranked[:self.settings.max_sections]]
    
    def _node_log_success(self, node_id: str,
                          port_points: Optional[Sequence[PortPoint]] = None) -> float:
        node = self.capacity_mesh_node_map.get(node_id)
        if node is None or node.contains_target:
            return 0.0
        node_with_port_points = self._node_with_port_points(node_id)
        if port_points is not None:
            node_with_port_points.port_points = list(port_points)
        pf = self.failure_model.node_probability_of_failure(node_with_port_points, node)
        return math.log(1 - pf)
    
    def compute_section_score(self, section: PortPointSection) -> float:
        """Log success probability of a section under the current assignment."""
        return self.failure_model.compute_section_score(
            [self._node_with_port_points(node_id)
             for node_id in sorted(section.node_ids)
             if node_id in self.capacity_mesh_node_map],
            self.capacity_mesh_node_map
        )
    
    def get_swap_moves(self, section: PortPointSection) -> List[SwapMove]:
        """All swaps of same-layer real port points on a shared internal edge."""
        moves: List[SwapMove] = []
        seen = set()
        
        for edge in section.internal_edges:
            first_id, second_id = edge.node_ids
            second_ids = {
                pp.port_point_id for pp in self.node_assigned_port_points.get(second_id, [])
                if not pp.is_synthetic
            }
            shared = sorted(
                (pp for pp in self.node_assigned_port_points.get(first_id, [])
                 if not pp.is_synthetic and pp.port_point_id in second_ids),
                key=lambda pp: pp.port_point_id
            )
            
            for i, first in enumerate(shared):
                for second in shared[i + 1:]:
                    if first.z != second.z or first.connection_name == second.connection_name:
                        continue
                    key = (first.port_point_id, second.port_point_id)
                    if key in seen:
                        continue
                    seen.add(key)
                    moves.append(SwapMove(*key))
        
        return moves
    
    def _find_port_point(self, port_point_id: str) -> Optional[PortPoint]:
        for points in self.node_assigned_port_points.values():
            for pp in points:
                if pp.port_point_id == port_point_id:
                    return pp
        return None
    
    def _swapped_port_points(self, node_id: str, move: SwapMove,
                             first: PortPoint, second: PortPoint) -> List[PortPoint]:
        swapped = []
        for pp in self.node_assigned_port_points.get(node_id, []):
            if pp.port_point_id == move.first_port_point_id:
                pp = replace(pp, connection_name=second.connection_name,
                             root_connection_name=second.root_connection_name)
            elif pp.port_point_id == move.second_port_point_id:
                pp = replace(pp, connection_name=first.connection_name,
                             root_connection_name=first.root_connection_name)
            swapped.append(pp)
        return swapped
    
    def _nodes_holding(self, move: SwapMove) -> List[str]:
        ids = {move.first_port_point_id, move.second_port_point_id}
        return sorted(
            node_id for node_id, points in self.node_assigned_port_points.items()
            if any(pp.port_point_id in ids for pp in points)
        )
    
    def try_swap(self, move: SwapMove) -> bool:
        """Apply a swap if it strictly improves the affected nodes' score."""
        first = self._find_port_point(move.first_port_point_id)
        second = self._find_port_point(move.second_port_point_id)
        if first is None or second is None or first.connection_name == second.connection_name:
            return False
        
        affected = self._nodes_holding(move)
        proposed = {
            node_id: self._swapped_port_points(node_id, move, first, second)
            for node_id in affected
        }
        
        before = sum(self._node_log_success(node_id) for node_id in affected)
        after = sum(self._node_log_success(node_id, proposed[node_id]) for node_id in affected)
        if after <= before + SCORE_EPSILON:
            return False
        
        self.node_assigned_port_points.update(proposed)
        self._swap_path_candidates(move, first, second)
        return True
    
    def _swap_path_candidates(self, move: SwapMove, first: PortPoint, second: PortPoint):
        targets = {
            first.connection_name: (move.first_port_point_id, second),
            second.connection_name: (move.second_port_point_id, first),
        }
        for result in self.connection_results:
            target = targets.get(result.connection_name)
            if target is None or not result.path:
                continue
            old_id, new_pp = target
            for candidate in result.path:
                if candidate.port_point_id == old_id:
                    candidate.port_point_id = new_pp.port_point_id
                    candidate.point = new_pp.position
                    candidate.z = new_pp.z
    
    def _step(self):
        if self.current_index >= len(self.center_node_ids):
            self.solved = True
            improved = sum(1 for s in self.section_scores if s.improved)
            self.log.info(f"Finished {len(self.section_scores)} sections, {improved} improved")
            return
        
        index = self.current_index
        self.current_index += 1
        center_node_id = self.center_node_ids[index]
        
        section = self.section_builder.create_section(
            center_node_id, self.settings.expansion_degrees
        )
        score_before = self.compute_section_score(section)
        moves = self.get_swap_moves(section)
        
        accepted = 0
        if moves:
            rng = random.Random(self.settings.shuffle_seed + index)
            for _ in range(self.settings.swap_attempts_per_section):
                if self.try_swap(rng.choice(moves)):
                    accepted += 1
        
        score_after = self.compute_section_score(section) if accepted else score_before
        self.section_scores.append(SectionScore(
            center_node_id=center_node_id,
            node_count=len(section.node_ids),
            score_before=score_before,
            score_after=score_after,
            accepted_swaps=accepted
        ))
        self.log.bind(section=center_node_id).debug(
            f"{score_before:.4f} -> {score_after:.4f} "
            f"({accepted} swaps of {len(moves)} candidates)")
    
    def get_nodes_with_port_points(self) -> List[NodeWithPortPoints]:
        """Nodes with their (possibly re-assigned) port points."""
        return [
            self._node_with_port_points(node.capacity_mesh_node_id)
            for node in self.capacity_mesh_nodes
            if node.capacity_mesh_node_id in self.node_assigned_port_points
        ]
