"""Model endpoint clients."""

from .ollama_client import ChatModel, OllamaChatClient

__all__ = ["ChatModel", "OllamaChatClient"]
