"""Meta-prompts sent by the planning, reflection and completion phases.

All templates are rendered with ``PromptBuilder`` (sandboxed Jinja2).
"""

# ========== Planning ==========
PLANNING_PROMPT = """Analyze the task and create a detailed execution plan. Break it down into specific steps with tool calls.

Format your plan as:
PLAN:
1. Step description - tool_name(args)
2. Step description - tool_name(args)
...

Available tools: {{ tools | join(", ") }}

Consider:
- Dependencies between steps
- Error handling
- Validation steps
- File operations needed

Current context:
{{ context_summary }}

Tool history (last 5):
{{ recent_history or "(none)" }}"""


# ========== Reflection ==========
REFLECTION_PROMPT = """Reflect on the execution so far:

Errors encountered:
{% for error in errors %}
- {{ error }}
{% else %}
- (none)
{% endfor %}

Recent tool executions:
{{ recent_history or "(none)" }}

File changes made:
{% for change in file_changes %}
- {{ change.operation }}: {{ change.path }}
{% else %}
- (none)
{% endfor %}

Current plan status: {{ "executing" if plan_active else "none" }}

Analyze what went wrong (if anything) and suggest:
1. What should be done next
2. How to fix any errors
3. Whether the plan needs adjustment

Be specific and actionable."""


# ========== Completion ==========
COMPLETION_PROMPT = """Based on the conversation and tool execution history, is the task complete?

Task: {{ task }}
Last response: {{ last_reply }}
Tool executions: {{ tool_executions }}
File changes: {{ file_changes }}

Respond with:
COMPLETE: yes/no
REASON: brief explanation

If not complete, what's remaining?"""


__all__ = ["PLANNING_PROMPT", "REFLECTION_PROMPT", "COMPLETION_PROMPT"]
