"""
Test configuration
"""
import os
import sys
from pathlib import Path

import pytest

# Project root holds flat modules (config, planner, executor, ...)
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

# Set minimal environment variables for testing
os.environ.setdefault("ANTHROPIC_API_KEY", "test_anthropic_key")


SIGNUP_PLAN = [
    {"action": "click", "selector": "a[href=\"/auth/signup\"]"},
    {"action": "type", "selector": "#firstName", "text": "John"},
    {"action": "type", "selector": "#lastName", "text": "Doe"},
    {"action": "type", "selector": "#email", "text": "john.doe@example.com"},
    {"action": "type", "selector": "#password", "text": "Passw0rd!"},
    {"action": "type", "selector": "#confirmPassword", "text": "Passw0rd!"},
    {"action": "click", "selector": "button[type=\"submit\"]"},
]


@pytest.fixture
def signup_plan():
    """Plan for 'Sign up with dummy data' against the demo signup form"""
    return [dict(step) for step in SIGNUP_PLAN]


@pytest.fixture(autouse=True)
def _clean_timing_env(monkeypatch):
    """Keep executor/planner settings at their defaults unless a test overrides them"""
    for name in (
        "LOCATOR_TIMEOUT_MS",
        "TYPE_DELAY_MS",
        "SETTLE_MS",
        "DEFAULT_WAIT_MS",
        "PLANNER_VALIDATE",
        "KEEP_BROWSER_OPEN_MS",
        "HEADLESS",
        "MAX_BROWSER_SESSIONS",
    ):
        monkeypatch.delenv(name, raising=False)
