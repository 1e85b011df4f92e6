"""Explicit stage pipeline for jumper resolution.

Each stage is a named function from the previous stage's frozen output to a
StageResult. Stages never modify their input; the first failure stops the
pipeline and is reported with the failing stage's name.
"""
import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ...algorithms.jumpers.necessity import (
    JumperUsage, classify_jumper_usage, reposition_jumper_port_points
)
from ...algorithms.sections.section_optimizer import SectionOptimizer, SectionScore
from ...domain.models.capacity_mesh import (
    CapacityMeshEdge, CapacityMeshNode, InputNodeWithPortPoints,
    NodeWithPortPoints, PortPoint
)
from ...domain.models.jumpers import Obstacle, PrepatternJumper
from ...domain.models.pathing import ConnectionPathResult
from ...shared.configuration.settings import ApplicationSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageResult:
    """Tagged success/failure outcome of one stage."""
    success: bool
    output: Any = None
    error: Optional[str] = None
    
    @classmethod
    def success_result(cls, output: Any) -> 'StageResult':
        """Create a successful stage result."""
        return cls(success=True, output=output)
    
    @classmethod
    def failure_result(cls, error: str) -> 'StageResult':
        """Create a failed stage result."""
        return cls(success=False, error=error)


@dataclass(frozen=True)
class StageDescriptor:
    """A named pipeline stage."""
    name: str
    run: Callable[[Any], StageResult]


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of running a list of stages."""
    success: bool
    output: Any = None
    error: Optional[str] = None
    failed_stage: Optional[str] = None
    completed_stages: Tuple[str, ...] = ()
    stage_times: Mapping[str, float] = field(default_factory=dict)


def run_stages(stages: Sequence[StageDescriptor], initial: Any) -> PipelineResult:
    """Run stages in order, stopping at the first failure.
    
    Args:
        stages: Stages to run
        initial: Input of the first stage
        
    Returns:
        PipelineResult with the last output, or the failing stage and its error
    """
    current = initial
    completed: List[str] = []
    stage_times: Dict[str, float] = {}
    
    for stage in stages:
        logger.info(f"Running stage {stage.name}")
        start_time = time.perf_counter()
        result = stage.run(current)
        stage_times[stage.name] = time.perf_counter() - start_time
        
        if not result.success:
            logger.warning(f"Stage {stage.name} failed: {result.error}")
            return PipelineResult(
                success=False,
                error=result.error,
                failed_stage=stage.name,
                completed_stages=tuple(completed),
                stage_times=stage_times
            )
        
        completed.append(stage.name)
        current = result.output
    
    return PipelineResult(
        success=True,
        output=current,
        completed_stages=tuple(completed),
        stage_times=stage_times
    )


def _freeze_assignment(assignment: Mapping[str, Sequence[PortPoint]]) -> Mapping[str, Tuple[PortPoint, ...]]:
    return MappingProxyType({node_id: tuple(points) for node_id, points in assignment.items()})


@dataclass(frozen=True)
class JumperResolutionInput:
    """Everything the jumper resolution stages read."""
    capacity_mesh_nodes: Tuple[CapacityMeshNode, ...]
    capacity_mesh_edges: Tuple[CapacityMeshEdge, ...]
    input_nodes: Tuple[InputNodeWithPortPoints, ...]
    node_assigned_port_points: Mapping[str, Tuple[PortPoint, ...]]
    connection_results: Tuple[ConnectionPathResult, ...]
    prepattern_jumpers: Tuple[PrepatternJumper, ...] = ()
    obstacles: Tuple[Obstacle, ...] = ()
    
    @classmethod
    def create(cls, capacity_mesh_nodes, capacity_mesh_edges, input_nodes,
               node_assigned_port_points, connection_results,
               prepattern_jumpers=(), obstacles=()) -> 'JumperResolutionInput':
        return cls(
            capacity_mesh_nodes=tuple(capacity_mesh_nodes),
            capacity_mesh_edges=tuple(capacity_mesh_edges),
            input_nodes=tuple(input_nodes),
            node_assigned_port_points=_freeze_assignment(node_assigned_port_points),
            connection_results=tuple(connection_results),
            prepattern_jumpers=tuple(prepattern_jumpers),
            obstacles=tuple(obstacles)
        )


@dataclass(frozen=True)
class ClassifiedJumpers:
    """Output of jumper classification."""
    source: JumperResolutionInput
    usage: JumperUsage


@dataclass(frozen=True)
class RepositionedPortPoints:
    """Output of port point repositioning."""
    source: JumperResolutionInput
    usage: JumperUsage
    node_assigned_port_points: Mapping[str, Tuple[PortPoint, ...]]


@dataclass(frozen=True)
class JumperResolutionOutput:
    """Final output of the jumper resolution stages."""
    usage: JumperUsage
    nodes_with_port_points: Tuple[NodeWithPortPoints, ...]
    connection_results: Tuple[ConnectionPathResult, ...]
    section_scores: Tuple[SectionScore, ...]


def build_jumper_resolution_stages(settings: Optional[ApplicationSettings] = None) -> List[StageDescriptor]:
    """Stages classifying jumpers, repositioning their port points and
    re-optimizing the most congested sections."""
    settings = settings or ApplicationSettings()
    
    def classify(data: JumperResolutionInput) -> StageResult:
        usage = classify_jumper_usage(
            data.connection_results, data.input_nodes,
            data.prepattern_jumpers, data.obstacles
        )
        return StageResult.success_result(ClassifiedJumpers(source=data, usage=usage))
    
    def reposition(data: ClassifiedJumpers) -> StageResult:
        assignment = reposition_jumper_port_points(
            data.source.node_assigned_port_points, data.source.input_nodes, data.usage
        )
        return StageResult.success_result(RepositionedPortPoints(
            source=data.source,
            usage=data.usage,
            node_assigned_port_points=_freeze_assignment(assignment)
        ))
    
    def optimize(data: RepositionedPortPoints) -> StageResult:
        optimizer = SectionOptimizer(
            capacity_mesh_nodes=data.source.capacity_mesh_nodes,
            capacity_mesh_edges=data.source.capacity_mesh_edges,
            input_nodes=data.source.input_nodes,
            node_assigned_port_points=data.node_assigned_port_points,
            connection_results=data.source.connection_results,
            settings=settings.section_optimizer,
            failure_settings=settings.failure_model
        )
        optimizer.solve()
        if optimizer.failed:
            return StageResult.failure_result(optimizer.error)
        
        return StageResult.success_result(JumperResolutionOutput(
            usage=data.usage,
            nodes_with_port_points=tuple(optimizer.get_nodes_with_port_points()),
            connection_results=tuple(optimizer.connection_results),
            section_scores=tuple(optimizer.section_scores)
        ))
    
    return [
        StageDescriptor("classify_jumpers", classify),
        StageDescriptor("reposition_jumper_port_points", reposition),
        StageDescriptor("optimize_sections", optimize),
    ]
