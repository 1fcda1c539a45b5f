"""Operator console: type a goal, watch the headed browser carry out the plan."""
import asyncio
import traceback

import streamlit as st

import config
from agent.auto import EmptyPlanError, run_auto_agent
from executor import PlanExecutionError

st.set_page_config(page_title="AI Browser Agent", page_icon="🧭", layout="wide")
st.title("AI Browser Agent")
st.caption("Describe a goal; the planner turns it into browser steps and a visible browser window runs them.")

if "last_traceback" not in st.session_state:
    st.session_state.last_traceback = ""
if "last_actions" not in st.session_state:
    st.session_state.last_actions = []

# Sidebar
with st.sidebar:
    st.subheader("Planner")
    if not config.get_api_key():
        st.error("API key missing. Set ANTHROPIC_API_KEY in system env, or create a .env file in the project root with: ANTHROPIC_API_KEY=sk-ant-...")
        st.caption("If you set system env, restart the terminal/IDE before running streamlit.")
    st.write("Model:", config.get_planner_model())

    st.subheader("Browser")
    keep_open_s = st.number_input(
        "Keep window open after a successful run (seconds)",
        min_value=0,
        max_value=600,
        value=min(600, config.get_keep_open_ms() // 1000),
    )
    st.caption(
        f"Locator timeout {config.get_locator_timeout_ms()} ms, "
        f"settle {config.get_settle_ms()} ms, "
        f"typing delay {config.get_type_delay_ms()} ms/char."
    )

    st.subheader("Debug")
    with st.expander("Last traceback"):
        st.code(st.session_state.get("last_traceback") or "(none)")

instruction = st.text_input("Goal", placeholder="e.g. Sign up with dummy data")
if st.button("Run"):
    if not instruction.strip():
        st.warning("No prompt provided.")
    else:
        with st.spinner("Planning and executing…"):
            try:
                result = asyncio.run(run_auto_agent(instruction, keep_open_ms=int(keep_open_s) * 1000))
                st.session_state.last_actions = result["actions"]
                st.success(f"Completed {result['steps']} steps.")
            except EmptyPlanError:
                st.error("AI returned no valid actions.")
            except PlanExecutionError as e:
                st.session_state.last_traceback = traceback.format_exc()
                st.error(f"Execution failed at step {e.index}: {e.action}")
            except Exception as e:
                st.session_state.last_traceback = traceback.format_exc()
                st.error(f"Execution failed: {type(e).__name__}: {e}")

if st.session_state.last_actions:
    with st.expander("Plan", expanded=True):
        st.json(st.session_state.last_actions)
