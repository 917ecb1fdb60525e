"""Multi-step tool orchestration."""

from .orchestrator import MultiStepOrchestrator

__all__ = ["MultiStepOrchestrator"]
