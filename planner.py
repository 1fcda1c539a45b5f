"""Plan compiler: turn a natural-language goal into a list of browser steps."""
import json
import re
from typing import Any, Dict, List, Optional

from anthropic import Anthropic, APIError
from loguru import logger
from pydantic import ValidationError

import config
from models import validate_step

KNOWN_ACTIONS = ("goto", "type", "click", "findAndClickText", "wait")

_FENCE_RE = re.compile(r"```(?:json)?")

_client = None


def _get_client():
    global _client
    if _client is None:
        _client = Anthropic(api_key=config.get_api_key())
    return _client


PLANNER_TEMPLATE = """
You are a browser automation planner.
Convert the user instruction into ONLY a JSON array of steps.
- Do NOT add explanations
- Do NOT add markdown fences
- Just return a valid JSON array of objects

Allowed steps:
  {{"action":"goto","url":"..."}}
  {{"action":"type","selector":"...","text":"..."}}
  {{"action":"click","selector":"..."}}
  {{"action":"findAndClickText","text":"..."}}
  {{"action":"wait","time":2000}}

Rules:
- Always include selectors, prefer CSS selectors over text if available.
- Always use actual selectors from the DOM, e.g. {{"action":"type","selector":"#firstName","text":"Chaitrali"}}
  instead of {{"action":"type","selector":"input[name='firstName']","text":"Chaitrali"}}.
  The first name field has id="firstName", last name has id="lastName", etc.
- Only when an element has no usable selector and must be clicked by its visible text
  (like "Authentication" or "Sign Up"), use {{"action":"findAndClickText","text":"Sign Up"}}.
- The sidebar is already opened and its Authentication tab is already opened.
- To open the Sign Up form, click the first Sign Up link in the sidebar using the CSS selector a[href="/auth/signup"].
- Then fill up the form with the required inputs.
- Prefer Sign Up when the instruction could mean either signing up or logging in.
  If Sign Up is not available, fall back to Login (these links have different routes).
- If the form has a confirm password field then retype the password into it (this is important).
- If no value is given in the instruction, use dummy names, email, password and everything else accordingly.
- Always include enough sequential steps until the goal is reached.

Example:
[
  {{"action":"goto","url":"https://google.com"}},
  {{"action":"click","selector":"a[href='/auth/signup']"}},
  {{"action":"type","selector":"input[name='q']","text":"cats"}},
  {{"action":"click","selector":"input[type='submit']"}},
  {{"action":"findAndClickText","text":"Sign Up"}}
]

User request: "{goal}"
"""


def build_prompt(goal: str) -> str:
    return PLANNER_TEMPLATE.format(goal=goal)


def sanitize_response(text: Optional[str]) -> str:
    """Drop ```json and ``` markers wherever they appear, then trim."""
    return _FENCE_RE.sub("", (text or "").strip()).strip()


def parse_actions(text: str, validate: bool = False) -> List[Dict[str, Any]]:
    """Parse sanitized model output into steps. Returns [] on any failure."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.error(f"Failed to parse AI output: {text}")
        return []
    if not isinstance(data, list) or not all(isinstance(s, dict) for s in data):
        logger.error(f"AI output is not a JSON array of objects: {text}")
        return []
    if validate:
        for i, step in enumerate(data):
            try:
                validate_step(step)
            except ValidationError as e:
                logger.error(f"Step {i} failed validation ({e.error_count()} errors): {step}")
                return []
    return data


def plan_actions(goal: str, client=None) -> List[Dict[str, Any]]:
    """Compile a goal into an ordered list of step dicts; never raises."""
    try:
        client = client or _get_client()
        response = client.messages.create(
            model=config.get_planner_model(),
            max_tokens=config.get_planner_max_tokens(),
            messages=[{"role": "user", "content": build_prompt(goal)}],
        )
        content = "".join(
            getattr(block, "text", None) or "" for block in (response.content or [])
        )
    except APIError as e:
        logger.error(f"Planner request failed: {type(e).__name__}: {e}")
        return []
    except Exception:
        logger.exception("Planner request failed")
        return []

    actions = parse_actions(
        sanitize_response(content), validate=config.planner_validation_enabled()
    )
    logger.info(f"Planned {len(actions)} steps for goal {goal!r}")
    return actions
