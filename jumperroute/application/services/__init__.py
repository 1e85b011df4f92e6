"""Application services."""
from .stage_pipeline import (
    StageResult, StageDescriptor, PipelineResult, run_stages,
    JumperResolutionInput, ClassifiedJumpers, RepositionedPortPoints,
    JumperResolutionOutput, build_jumper_resolution_stages
)

__all__ = [
    'StageResult', 'StageDescriptor', 'PipelineResult', 'run_stages',
    'JumperResolutionInput', 'ClassifiedJumpers', 'RepositionedPortPoints',
    'JumperResolutionOutput', 'build_jumper_resolution_stages'
]
