"""
Tests for the /agent endpoint and the plan-then-execute pipeline
"""
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from playwright.async_api import TimeoutError as PWTimeoutError

import agent.auto as auto
import planner
import server
from agent.auto import EmptyPlanError, run_auto_agent
from executor import PlanExecutionError


@pytest.fixture
def client():
    return TestClient(server.app)


class TestAgentEndpoint:
    """Tests for POST /agent"""

    def test_missing_prompt(self, client, monkeypatch):
        run = AsyncMock()
        monkeypatch.setattr(server, "run_auto_agent", run)

        for body in ({}, {"prompt": ""}, {"prompt": "   "}, {"prompt": None}):
            response = client.post("/agent", json=body)
            assert response.status_code == 400
            assert response.json() == {"error": "No prompt provided"}
        run.assert_not_awaited()

    def test_empty_plan(self, client, monkeypatch):
        monkeypatch.setattr(server, "run_auto_agent", AsyncMock(side_effect=EmptyPlanError("x")))
        response = client.post("/agent", json={"prompt": "do something"})
        assert response.status_code == 500
        assert response.json() == {"error": "AI returned no valid actions"}

    def test_execution_failure(self, client, monkeypatch):
        step = {"action": "click", "selector": "#gone"}
        error = PlanExecutionError(0, step, PWTimeoutError("Timeout 10000ms exceeded."))
        monkeypatch.setattr(server, "run_auto_agent", AsyncMock(side_effect=error))
        response = client.post("/agent", json={"prompt": "click gone"})
        assert response.status_code == 500
        assert response.json() == {"error": "Execution failed"}

    def test_success(self, client, monkeypatch, signup_plan):
        run = AsyncMock(return_value={"steps": len(signup_plan), "actions": signup_plan})
        monkeypatch.setattr(server, "run_auto_agent", run)

        response = client.post("/agent", json={"prompt": "Sign up with dummy data"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "actions": signup_plan}
        run.assert_awaited_once_with("Sign up with dummy data")

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True}


class TestRunAutoAgent:
    """Tests for the compile-then-execute pipeline"""

    @pytest.mark.asyncio
    async def test_empty_plan_skips_execution(self, monkeypatch):
        execute = AsyncMock()
        monkeypatch.setattr(auto, "plan_actions", Mock(return_value=[]))
        monkeypatch.setattr(auto, "execute_actions", execute)

        with pytest.raises(EmptyPlanError):
            await run_auto_agent("nothing useful")
        execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_planner_crash_is_an_empty_plan(self, monkeypatch):
        def broken_client():
            raise TypeError("Could not resolve authentication method")

        execute = AsyncMock()
        monkeypatch.setattr(planner, "_get_client", broken_client)
        monkeypatch.setattr(auto, "execute_actions", execute)

        with pytest.raises(EmptyPlanError):
            await run_auto_agent("Sign up with dummy data")
        execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_plan_is_executed(self, monkeypatch, signup_plan):
        execute = AsyncMock(return_value=len(signup_plan))
        monkeypatch.setattr(auto, "plan_actions", Mock(return_value=signup_plan))
        monkeypatch.setattr(auto, "execute_actions", execute)

        result = await run_auto_agent("Sign up with dummy data", headless=True)

        assert result == {"steps": len(signup_plan), "actions": signup_plan}
        execute.assert_awaited_once_with(signup_plan, headless=True, keep_open_ms=None)

    @pytest.mark.asyncio
    async def test_execution_error_propagates(self, monkeypatch):
        step = {"action": "type", "selector": "#missing", "text": "x"}
        error = PlanExecutionError(0, step, PWTimeoutError("Timeout"))
        monkeypatch.setattr(auto, "plan_actions", Mock(return_value=[step]))
        monkeypatch.setattr(auto, "execute_actions", AsyncMock(side_effect=error))

        with pytest.raises(PlanExecutionError):
            await run_auto_agent("type into missing")
