"""Connectivity map grouping ids into nets."""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..models.jumpers import Obstacle

logger = logging.getLogger(__name__)


class ConnectivityMap:
    """Union of id groups into connected nets.
    
    Every group passed to :meth:`add_connections` is merged with any existing
    net sharing one of its ids.
    """
    
    def __init__(self, net_prefix: str = "connectivity_net"):
        self.net_prefix = net_prefix
        self._id_to_net: Dict[str, str] = {}
        self._net_members: Dict[str, List[str]] = {}
        self._next_net_index = 0
    
    def add_connections(self, groups: Iterable[Sequence[str]]) -> None:
        """Add groups of ids that are connected to each other."""
        for group in groups:
            ids = [i for i in group if i]
            if not ids:
                continue
            
            existing_nets: List[str] = []
            for member in ids:
                net = self._id_to_net.get(member)
                if net is not None and net not in existing_nets:
                    existing_nets.append(net)
            
            if existing_nets:
                target = existing_nets[0]
                for other in existing_nets[1:]:
                    for member in self._net_members.pop(other):
                        self._id_to_net[member] = target
                        self._net_members[target].append(member)
            else:
                target = f"{self.net_prefix}{self._next_net_index}"
                self._next_net_index += 1
                self._net_members[target] = []
            
            for member in ids:
                if member not in self._id_to_net:
                    self._id_to_net[member] = target
                    self._net_members[target].append(member)
    
    def get_net_connected_to_id(self, member_id: str) -> Optional[str]:
        """Return the net id containing ``member_id``, or None."""
        return self._id_to_net.get(member_id)
    
    def get_ids_connected_to_net(self, net_id: str) -> List[str]:
        return list(self._net_members.get(net_id, []))
    
    def are_ids_connected(self, first: str, second: str) -> bool:
        net = self._id_to_net.get(first)
        return net is not None and net == self._id_to_net.get(second)
    
    def __len__(self) -> int:
        return len(self._net_members)


def build_off_board_connectivity(obstacles: Iterable[Obstacle]) -> Optional[ConnectivityMap]:
    """Build a connectivity map from obstacles with off-board connections.
    
    Returns:
        ConnectivityMap, or None when no obstacle connects off board
    """
    groups = []
    for index, obstacle in enumerate(obstacles):
        if not obstacle.off_board_connects_to:
            continue
        obstacle_id = obstacle.obstacle_id or f"__obs{index}"
        groups.append([obstacle_id, *obstacle.off_board_connects_to])
    
    if not groups:
        return None
    
    connectivity = ConnectivityMap()
    connectivity.add_connections(groups)
    logger.debug(f"Built off-board connectivity with {len(connectivity)} nets")
    return connectivity
