"""
Grounded answer prompt.

Defines the prompt template that confines the model to retrieved corpus
context, and the helpers that render context and conversation history into it.

Dependencies: langchain_core.prompts
System role: Prompt template for grounded generation
"""

from collections.abc import Sequence

from langchain_core.prompts import PromptTemplate

from backend.models.chat import Message
from backend.models.chunk import Chunk

GROUNDED_TEMPLATE = """Answer the user's questions based only on the following context. If the answer is not in the context, reply politely that you do not have that information available.
==============================
Context: {context}
==============================
Current conversation:
{chat_history}
user: {question}
assistant:"""

GROUNDED_PROMPT = PromptTemplate.from_template(GROUNDED_TEMPLATE)


def format_context(chunks: Sequence[Chunk]) -> str:
    """Join retrieved chunk texts, best match first, one per line."""
    return "\n".join(chunk.text for chunk in chunks)


def format_chat_history(history: Sequence[Message]) -> str:
    """Render prior turns as ``role: content`` lines, oldest first."""
    return "\n".join(f"{message.role}: {message.content}" for message in history)


def build_prompt(
    context_chunks: Sequence[Chunk],
    history: Sequence[Message],
    question: str,
) -> str:
    """
    Render the grounded prompt.

    Args:
        context_chunks: Retrieved chunks used as the only allowed knowledge
        history: Prior conversation turns, oldest first
        question: Current user question

    Returns:
        str: Prompt text for the generation provider
    """
    return GROUNDED_PROMPT.format(
        context=format_context(context_chunks),
        chat_history=format_chat_history(history),
        question=question,
    )
