"""Stepped A* router over the region/port hypergraph."""
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ...domain.services.crossing_analyzer import chords_cross, perimeter_t
from ...shared.exceptions import RoutingError
from ..base.solver import BaseSolver
from .graph import GraphConnection, JPort, JRegion

JUMPER_PENALTY = 0.1  # mm of extra cost per jumper hop
DEFAULT_MAX_ITERATIONS = 100_000

State = Tuple[str, str]  # (port id, id of the region entered through the port)


@dataclass(frozen=True)
class PathStep:
    """A port crossed by a route and the region it was crossed from."""
    port: JPort
    last_region: JRegion
    
    @property
    def next_region(self) -> JRegion:
        return self.port.other_region(self.last_region)


@dataclass
class SolvedRoute:
    """The port sequence of one routed connection."""
    connection: GraphConnection
    path: List[PathStep] = field(default_factory=list)


@dataclass(order=True)
class _OpenEntry:
    f_score: float
    order: int
    g_score: float = field(compare=False)
    state: State = field(compare=False)


class HyperGraphPathSolver(BaseSolver):
    """Routes connections one at a time, one A* expansion per step.
    
    Routes committed earlier constrain later ones: a port carries at most one
    connection, a through-jumper region carries at most one connection, and
    inside any other region a new traversal may not cross (interleave with)
    the traversals already committed there.
    """
    
    def __init__(self, regions: Sequence[JRegion], ports: Sequence[JPort],
                 connections: Sequence[GraphConnection],
                 max_iterations: int = DEFAULT_MAX_ITERATIONS,
                 jumper_penalty: float = JUMPER_PENALTY):
        super().__init__(max_iterations=max_iterations)
        self.regions = list(regions)
        self.ports = list(ports)
        self.connections = list(connections)
        self.jumper_penalty = jumper_penalty
        
        self.region_map: Dict[str, JRegion] = {r.region_id: r for r in self.regions}
        self.port_map: Dict[str, JPort] = {p.port_id: p for p in self.ports}
        
        self.port_owner: Dict[str, str] = {}
        self.through_jumper_owner: Dict[str, str] = {}
        self.region_chords: Dict[str, List[Tuple[float, float]]] = {}
        for connection in self.connections:
            for terminal in (connection.start_region, connection.end_region):
                for port in terminal.ports:
                    self.port_owner[port.port_id] = connection.connection_id
        
        self.solved_routes: List[SolvedRoute] = []
        self.connection_index = 0
        self._open: List[_OpenEntry] = []
        self._came_from: Dict[State, Optional[State]] = {}
        self._g_scores: Dict[State, float] = {}
        self._closed: Set[State] = set()
        self._counter = itertools.count()
        self._search_started = False
    
    @property
    def current_connection(self) -> Optional[GraphConnection]:
        if self.connection_index < len(self.connections):
            return self.connections[self.connection_index]
        return None
    
    def _heuristic(self, port: JPort, goal: JPort) -> float:
        return port.position.distance_to(goal.position)
    
    def _goal_port(self, connection: GraphConnection) -> JPort:
        return connection.end_region.ports[0]
    
    def _start_search(self, connection: GraphConnection):
        self._open = []
        self._came_from = {}
        self._g_scores = {}
        self._closed = set()
        
        goal = self._goal_port(connection)
        for port in connection.start_region.ports:
            state = (port.port_id, port.other_region(connection.start_region).region_id)
            self._g_scores[state] = 0.0
            self._came_from[state] = None
            heapq.heappush(self._open, _OpenEntry(
                self._heuristic(port, goal), next(self._counter), 0.0, state
            ))
        self._search_started = True
    
    def _can_traverse(self, region: JRegion, entry: JPort, exit_port: JPort,
                      connection_id: str) -> bool:
        if region.is_connection_region:
            return False
        
        if region.is_through_jumper:
            owner = self.through_jumper_owner.get(region.region_id)
            return owner is None or owner == connection_id
        
        chords = self.region_chords.get(region.region_id)
        if not chords:
            return True
        chord = self._chord(region, entry, exit_port)
        return not any(chords_cross(chord, other) for other in chords)
    
    @staticmethod
    def _chord(region: JRegion, entry: JPort, exit_port: JPort) -> Tuple[float, float]:
        return (perimeter_t(entry.position.x, entry.position.y, region.bounds),
                perimeter_t(exit_port.position.x, exit_port.position.y, region.bounds))
    
    def _step(self):
        connection = self.current_connection
        if connection is None:
            self.solved = True
            self.log.debug(f"Routed {len(self.solved_routes)} connections")
            return
        
        if not self._search_started:
            self._start_search(connection)
        
        if not self._open:
            raise RoutingError(f"No path found for connection {connection.connection_id}",
                               connection_name=connection.connection_id)
        
        entry = heapq.heappop(self._open)
        state = entry.state
        if state in self._closed:
            return
        self._closed.add(state)
        
        port_id, region_id = state
        if region_id == connection.end_region.region_id:
            self._commit(connection, state)
            return
        
        port = self.port_map[port_id]
        region = self.region_map[region_id]
        goal = self._goal_port(connection)
        
        for next_port in region.ports:
            if next_port is port:
                continue
            owner = self.port_owner.get(next_port.port_id)
            if owner is not None and owner != connection.connection_id:
                continue
            if not self._can_traverse(region, port, next_port, connection.connection_id):
                continue
            
            next_region = next_port.other_region(region)
            next_state = (next_port.port_id, next_region.region_id)
            if next_state in self._closed:
                continue
            
            cost = port.position.distance_to(next_port.position)
            if region.is_through_jumper:
                cost += self.jumper_penalty
            g_score = entry.g_score + cost
            
            if g_score < self._g_scores.get(next_state, float('inf')):
                self._g_scores[next_state] = g_score
                self._came_from[next_state] = state
                heapq.heappush(self._open, _OpenEntry(
                    g_score + self._heuristic(next_port, goal),
                    next(self._counter), g_score, next_state
                ))
    
    def _commit(self, connection: GraphConnection, goal_state: State):
        states: List[State] = []
        state: Optional[State] = goal_state
        while state is not None:
            states.append(state)
            state = self._came_from[state]
        states.reverse()
        
        path: List[PathStep] = []
        for port_id, region_id in states:
            port = self.port_map[port_id]
            path.append(PathStep(port=port, last_region=port.other_region(self.region_map[region_id])))
        
        connection_id = connection.connection_id
        for step in path:
            self.port_owner[step.port.port_id] = connection_id
        for previous, current in zip(path, path[1:]):
            region = current.last_region
            if region.is_through_jumper:
                self.through_jumper_owner[region.region_id] = connection_id
            else:
                self.region_chords.setdefault(region.region_id, []).append(
                    self._chord(region, previous.port, current.port)
                )
        
        self.solved_routes.append(SolvedRoute(connection=connection, path=path))
        self.log.debug(f"Connection {connection_id} routed through {len(path)} ports")
        
        self.connection_index += 1
        self._search_started = False
        if self.current_connection is None:
            self.solved = True
