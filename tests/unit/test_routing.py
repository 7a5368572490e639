"""Unit tests for dialogue loop routing decisions."""

import logging

import pytest

from reactAgent.graph.routing import agent_route, iteration_route, iteration_route_from, reflection_route
from reactAgent.orchestration.plan_builder import parse_plan
from reactAgent.orchestration.session import SessionState, ToolCall


def _state(**overrides):
    state = {
        "session": SessionState(),
        "iteration": 1,
        "max_iterations": 20,
        "reflection_threshold": 3,
        "consecutive_failures": 0,
        "completed": False,
        "tool_calls": [],
        "action_intent": False,
        "phase_failed": False,
    }
    state.update(overrides)
    return state


class TestAgentRoute:

    def test_tool_calls_take_priority(self):
        state = _state(tool_calls=[ToolCall("read_file", {"file_path": "a"})], action_intent=True)
        assert agent_route(state) == "tools"

    def test_action_intent_without_plan_plans(self):
        assert agent_route(_state(action_intent=True)) == "planner"

    def test_active_plan_executes(self):
        session = SessionState()
        session.activate_plan(parse_plan("PLAN:\n1. Read a - read_file(a.txt)"))
        assert agent_route(_state(session=session, action_intent=True)) == "step_executor"

    def test_nothing_to_do_checks_completion(self):
        assert agent_route(_state()) == "completion"

    def test_failed_model_call_closes_iteration(self):
        assert agent_route(_state(phase_failed=True)) == "agent"
        assert agent_route(_state(phase_failed=True, consecutive_failures=3)) == "reflection"
        assert agent_route(_state(phase_failed=True, iteration=20)) == "finalize"


class TestIterationRoute:

    def test_completed_finishes(self):
        assert iteration_route(_state(completed=True, consecutive_failures=5)) == "finalize"

    def test_reflection_at_threshold(self):
        assert iteration_route(_state(consecutive_failures=2)) == "agent"
        assert iteration_route(_state(consecutive_failures=3)) == "reflection"

    def test_reflection_before_budget_check(self):
        assert iteration_route(_state(consecutive_failures=3, iteration=20)) == "reflection"

    @pytest.mark.parametrize("iteration,expected", [(19, "agent"), (20, "finalize")])
    def test_budget(self, iteration, expected):
        assert iteration_route(_state(iteration=iteration)) == expected

    def test_bound_route_name(self):
        route = iteration_route_from("tools")
        assert route.__name__ == "tools_iteration_route"
        assert route(_state()) == "agent"


class TestReflectionRoute:

    def test_continue_or_stop(self):
        assert reflection_route(_state(iteration=5)) == "agent"
        assert reflection_route(_state(iteration=20)) == "finalize"


class TestRoutingLogs:

    def test_decision_is_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="reactAgent.graph.routing")
        agent_route(_state())
        assert "route agent -> completion (No tool calls, no plan, no action intent)" in caplog.text
