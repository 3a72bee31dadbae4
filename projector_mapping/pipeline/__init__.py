"""Processing pipeline."""

from projector_mapping.pipeline.orchestrator import PipelineOrchestrator

__all__ = ["PipelineOrchestrator"]
