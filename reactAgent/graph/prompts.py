"""Loop-level prompts: the enhanced system message and the corrective instruction."""

from __future__ import annotations

from reactAgent.orchestration.session import SessionState
from reactAgent.utils.prompt_builder import PromptBuilder

# ========== System Message ==========
ORCHESTRATION_SYSTEM_TEMPLATE = """{{ base_message }}

ADVANCED ORCHESTRATION MODE:
- You have access to planning, execution, and reflection phases
- Use tools proactively - don't wait to be asked
- Plan complex tasks before executing
- Reflect on errors and adjust approach
- Execute tools in parallel when safe (read operations)
- Validate results before proceeding

TOOL USAGE FORMAT:
<tool_call>
<tool_name>tool_name</tool_name>
<arguments>{"arg": "value"}</arguments>
</tool_call>
Available tools: {{ tools | join(", ") }}

CONTEXT AWARENESS:
- Previous tool executions: {{ tool_executions }}
- File changes: {{ file_changes }}
- Current errors: {{ errors }}
{% if plan_steps is not none %}
- Active plan: {{ plan_steps }} steps (current step {{ current_step + 1 }})
{% endif %}

Remember: Think → Plan → Execute → Validate → Reflect"""


# ========== Corrective Instruction ==========
CORRECTIVE_INSTRUCTION = (
    "Please use the available tools to actually perform the actions. "
    "Don't just describe - execute using tools."
)


def build_system_message(base_message: str, session: SessionState, tools) -> str:
    """Extend the caller's system message with orchestration guidance and live counters."""
    return PromptBuilder.render(
        ORCHESTRATION_SYSTEM_TEMPLATE,
        base_message=base_message or "You are a helpful coding assistant.",
        tools=sorted(tools),
        tool_executions=len(session.tool_history),
        file_changes=len(session.file_changes),
        errors=len(session.errors),
        plan_steps=len(session.plan.steps) if session.plan else None,
        current_step=session.current_step,
    )


__all__ = ["ORCHESTRATION_SYSTEM_TEMPLATE", "CORRECTIVE_INSTRUCTION", "build_system_message"]
