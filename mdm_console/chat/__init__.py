"""Chat assistant session handling."""
from mdm_console.chat.session import ChatSession, ChatState, is_create_command
from mdm_console.chat.transcript import Transcript

__all__ = ["ChatSession", "ChatState", "Transcript", "is_create_command"]
