"""Remote assistant access: chat, card upload and response variants."""
from mdm_console.assistant.client import AssistantClient
from mdm_console.assistant.imaging import ensure_jpeg
from mdm_console.assistant.responses import AssistantResponse, parse_response

__all__ = ["AssistantClient", "AssistantResponse", "ensure_jpeg", "parse_response"]
