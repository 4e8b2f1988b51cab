"""
Prompt template for summarising a chat into a short sidebar title.
"""
from __future__ import annotations

MAX_TITLE_MESSAGES = 4


def build_chat_title_prompt(messages: list[dict]) -> list[dict]:
    """Build prompt messages asking for a title of at most six words.

    Only the first few messages are used.
    """
    excerpt = '\n'.join(
        f"{m['role']}: {m['content'][:500]}" for m in messages[:MAX_TITLE_MESSAGES]
    )
    return [
        {
            "role": "system",
            "content": "You write short titles for chat conversations.",
        },
        {
            "role": "user",
            "content": f"""Summarise this conversation as a title of at most six words.
Reply with the title only, no quotes and no trailing punctuation.

{excerpt}""",
        },
    ]
