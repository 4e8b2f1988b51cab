"""
Prompt templates for the coding assistant.
"""
from __future__ import annotations


def build_explain_error_prompt(language: str, code: str, error: str) -> list[dict]:
    """Ask for an explanation and fix of an execution or compile error."""
    return [
        {
            "role": "user",
            "content": f"""I encountered an error in my {language} code. Can you help me understand and fix it?

**Programming Language:** {language}

**Full Code:**
```{language}
{code}
```

**Error Message:**
{error}
""",
        }
    ]


def build_selection_question_prompt(
    language: str, code: str, selection: str, question: str,
) -> list[dict]:
    """Ask a question about a selected snippet, with the full file as context."""
    return [
        {
            "role": "system",
            "content": (
                "You are an expert code assistant. A user has selected a specific "
                "part of their code and has a question. Provide a concise and "
                "helpful answer."
            ),
        },
        {
            "role": "user",
            "content": f"""**Programming Language:** {language}

**Full Code Context:**
```{language}
{code}
```

**Selected Code Snippet:**
```{language}
{selection}
```

**User's Question:**
{question}
""",
        },
    ]
