"""
Prompt construction for the AI tutor.

The tutor is a beginner-level language assistant. Lesson context, when
known, is appended to the system prompt.
"""

from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """One turn of a tutor conversation."""

    role: Literal["user", "assistant"]
    content: str


class TutorContext(BaseModel):
    """What the learner is currently studying."""

    student_level: str = "A1"
    current_lesson: str | None = None
    current_topic: str | None = None


SYSTEM_PROMPT = """You are a friendly language-learning tutor for beginner students.

YOUR ROLE:
1. Explain grammar, vocabulary and sentence structure at the student's level.
2. Translate short phrases in both directions with simple everyday examples.
3. Correct the student's sentences and briefly explain each mistake.
4. Offer small practice exercises when asked.

GUIDELINES:
- Stay within the student's level; do not introduce advanced topics.
- Keep explanations short, clear and free of linguistic jargon.
- Use bold for key terms and give examples in both languages.
- If a question is unrelated to language learning, steer back to the lesson."""


def build_system_prompt(context: TutorContext | None = None) -> str:
    """System prompt with the learner's context appended."""
    context = context or TutorContext()
    lines = [SYSTEM_PROMPT, "", f"Student Level: {context.student_level}"]
    if context.current_lesson:
        lines.append(f"Current Lesson: {context.current_lesson}")
    if context.current_topic:
        lines.append(f"Current Topic: {context.current_topic}")
    return "\n".join(lines)


def build_messages(
    message: str,
    history: list[ChatMessage] | None = None,
    context: TutorContext | None = None,
) -> list[dict[str, str]]:
    """Chat-completion messages for a new user turn."""
    messages = [{"role": "system", "content": build_system_prompt(context)}]
    messages.extend({"role": m.role, "content": m.content} for m in history or [])
    messages.append({"role": "user", "content": message})
    return messages
