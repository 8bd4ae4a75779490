"""
studyplan
-------

Studyplan is an adaptive study-scheduling engine: it packs a learner's course sections into a dated,
capacity-constrained study plan and re-times reviews with the FSRS memory model as quiz results come in.
"""

from studyplan.config import PlannerConfig, ReviewStep, DEFAULT_CONFIG
from studyplan.state import State
from studyplan.grade import Grade
from studyplan.section import Section, SectionBlueprint, QuestionsStatus
from studyplan.task import TaskType, TaskStatus, WorkUnit, PlacedTask
from studyplan.calendar import AvailabilityConfig, DaySlot, build_day_capacities
from studyplan.titles import derive_section_title, resolve_task_title
from studyplan.work_units import build_work_units, compute_total_load
from studyplan.feasibility import FeasibilityReport, check_feasibility
from studyplan.placement import PlacementResult, place_tasks
from studyplan.catch_up import OverdueItem, RedistributedTask, distribute_overdue
from studyplan.grading import (
    Attempt,
    AttemptStats,
    GradingThresholds,
    summarize_attempts,
    grade_from_performance,
    grade_from_stats,
)
from studyplan.memory_card import MemoryCard
from studyplan.memory_model import MemoryModel, review_card
from studyplan.review_log import ReviewLog
from studyplan.review_scheduler import ReviewScheduler
from studyplan.planner import PlanResult, generate_plan, partition_for_regeneration

__all__ = [
    "PlannerConfig",
    "ReviewStep",
    "DEFAULT_CONFIG",
    "State",
    "Grade",
    "Section",
    "SectionBlueprint",
    "QuestionsStatus",
    "TaskType",
    "TaskStatus",
    "WorkUnit",
    "PlacedTask",
    "AvailabilityConfig",
    "DaySlot",
    "build_day_capacities",
    "derive_section_title",
    "resolve_task_title",
    "build_work_units",
    "compute_total_load",
    "FeasibilityReport",
    "check_feasibility",
    "PlacementResult",
    "place_tasks",
    "OverdueItem",
    "RedistributedTask",
    "distribute_overdue",
    "Attempt",
    "AttemptStats",
    "GradingThresholds",
    "summarize_attempts",
    "grade_from_performance",
    "grade_from_stats",
    "MemoryCard",
    "MemoryModel",
    "review_card",
    "ReviewLog",
    "ReviewScheduler",
    "PlanResult",
    "generate_plan",
    "partition_for_regeneration",
]
