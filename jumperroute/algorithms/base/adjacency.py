"""Read-only adjacency index over capacity mesh edges."""
import logging
from collections import deque
from typing import Dict, Iterable, List, Set, Tuple

from ...domain.models.capacity_mesh import CapacityMeshEdge

logger = logging.getLogger(__name__)


class AdjacencyIndex:
    """Undirected adjacency built once from an edge list.
    
    Node ids are interned into an index arena; neighbour lists keep the order
    in which edges were given so traversals are deterministic.
    """
    
    def __init__(self, edges: Iterable[CapacityMeshEdge]):
        self.node_ids: List[str] = []
        self._index: Dict[str, int] = {}
        neighbors: List[List[int]] = []
        self.edges: Tuple[CapacityMeshEdge, ...] = tuple(edges)
        
        for edge in self.edges:
            first, second = (self._intern(node_id, neighbors) for node_id in edge.node_ids)
            if first == second:
                continue
            if second not in neighbors[first]:
                neighbors[first].append(second)
            if first not in neighbors[second]:
                neighbors[second].append(first)
        
        self._neighbors: Tuple[Tuple[int, ...], ...] = tuple(tuple(n) for n in neighbors)
    
    def _intern(self, node_id: str, neighbors: List[List[int]]) -> int:
        index = self._index.get(node_id)
        if index is None:
            index = len(self.node_ids)
            self._index[node_id] = index
            self.node_ids.append(node_id)
            neighbors.append([])
        return index
    
    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index
    
    def __len__(self) -> int:
        return len(self.node_ids)
    
    def neighbors(self, node_id: str) -> List[str]:
        """Neighbour ids of a node, empty for unknown nodes."""
        index = self._index.get(node_id)
        if index is None:
            return []
        return [self.node_ids[i] for i in self._neighbors[index]]
    
    def bfs_depths(self, start_node_id: str, max_depth: int) -> Dict[str, int]:
        """Hop distance of every node within ``max_depth`` of the start.
        
        The start node is always included, even when it has no edges.
        """
        depths = {start_node_id: 0}
        start = self._index.get(start_node_id)
        if start is None:
            return depths
        
        queue = deque([(start, 0)])
        while queue:
            index, depth = queue.popleft()
            if depth >= max_depth:
                continue
            for neighbor in self._neighbors[index]:
                neighbor_id = self.node_ids[neighbor]
                if neighbor_id not in depths:
                    depths[neighbor_id] = depth + 1
                    queue.append((neighbor, depth + 1))
        
        return depths
    
    def is_connected_subset(self, node_ids: Set[str]) -> bool:
        """Check whether the subgraph induced by ``node_ids`` is connected."""
        if not node_ids:
            return True
        start = next(iter(sorted(node_ids)))
        seen = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in self.neighbors(current):
                if neighbor in node_ids and neighbor not in seen:
                    seen.add(neighbor)
                    queue.append(neighbor)
        return seen == node_ids
