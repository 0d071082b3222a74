"""
Core scheduling package for BreakBell.

Contains the headless BreakScheduler (work/rest state machine and its
interruptible sleep) plus the collaborator contracts it depends on.
Zero platform dependencies.
"""

from core.scheduler import BreakScheduler, SchedulerState

__all__ = ["BreakScheduler", "SchedulerState"]
