"""Conversion between transcript messages and chat request payloads."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

_ROLE_TO_MESSAGE = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}

_TYPE_TO_ROLE = {
    "system": "system",
    "human": "user",
    "ai": "assistant",
}


def _stringify_content(content: Any) -> str:
    """Flatten message content; list parts keep their ``text`` field when present."""
    if isinstance(content, list):
        pieces: list[str] = []
        for item in content:
            if isinstance(item, dict) and "text" in item:
                pieces.append(str(item["text"]))
            else:
                pieces.append(str(item))
        return "\n".join(pieces)
    return str(content)


def message_from_role(role: str, content: str) -> BaseMessage:
    """Build a transcript message from a chat-API role name."""
    try:
        return _ROLE_TO_MESSAGE[role](content=content)
    except KeyError:
        raise ValueError(f"Unsupported message role: {role}") from None


def role_of(message: BaseMessage) -> str:
    """Return the chat-API role name of a transcript message."""
    return _TYPE_TO_ROLE.get(message.type, message.type)


def to_wire_messages(messages: Iterable[BaseMessage]) -> List[Dict[str, str]]:
    """Convert transcript messages to ``[{role, content}]`` request payload entries."""
    return [
        {"role": role_of(message), "content": _stringify_content(message.content)}
        for message in messages
    ]


__all__ = ["_stringify_content", "message_from_role", "role_of", "to_wire_messages"]
