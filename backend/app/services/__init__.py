from .blueprint_export import render_blueprint_markdown
from .openai_client import ChatCompletion, call_openai_chat_async, is_openai_available, sanitize_json

__all__ = [
    "render_blueprint_markdown",
    "ChatCompletion",
    "call_openai_chat_async",
    "is_openai_available",
    "sanitize_json",
]
