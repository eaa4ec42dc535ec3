"""Peezy Planner Services -- 生成管线与 mini-assessment 级联"""

from .cascade import CascadeResult, MiniAssessmentCascade, build_combined_view
from .catalog_loader import load_catalog_records
from .generation import GenerationResult, TaskGenerationPipeline, build_generated_tasks
from .locks import UserLockRegistry

__all__ = [
    "TaskGenerationPipeline",
    "GenerationResult",
    "build_generated_tasks",
    "MiniAssessmentCascade",
    "CascadeResult",
    "build_combined_view",
    "UserLockRegistry",
    "load_catalog_records",
]
