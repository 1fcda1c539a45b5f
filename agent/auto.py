"""Auto mode: compile a goal into a plan, then execute it in a fresh browser session."""
import asyncio
from typing import Any, Dict, Optional

from loguru import logger

from executor import execute_actions
from planner import plan_actions


class EmptyPlanError(Exception):
    """The planner produced no usable steps for the goal."""


async def run_auto_agent(
    instruction: str,
    headless: Optional[bool] = None,
    keep_open_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Run the automatic pipeline: plan from the instruction, then execute each step.
    Raises EmptyPlanError when nothing was planned; PlanExecutionError propagates.
    """
    # The planner call blocks; keep it off the event loop.
    actions = await asyncio.to_thread(plan_actions, instruction)
    if not actions:
        raise EmptyPlanError(instruction)

    steps = await execute_actions(actions, headless=headless, keep_open_ms=keep_open_ms)
    logger.info(f"Automation completed: {steps} steps")
    return {"steps": steps, "actions": actions}
