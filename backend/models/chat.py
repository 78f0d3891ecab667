"""
Chat domain models and schemas.

Request schema for the streaming chat endpoint.

Dependencies: pydantic
System role: Chat API contracts
"""

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Single conversation turn."""

    role: str = Field(description="Message role, e.g. 'user' or 'assistant'")
    content: str = Field(description="Message content")


class ChatRequest(BaseModel):
    """Request schema for chat messages.

    The last message is the current question, all preceding messages are
    prior turns (oldest first).
    """

    messages: list[Message] = Field(min_length=1, description="Conversation, most recent last")

    @property
    def history(self) -> list[Message]:
        """Prior turns, excluding the current question."""
        return self.messages[:-1]

    @property
    def question(self) -> str:
        """Content of the latest message."""
        return self.messages[-1].content
