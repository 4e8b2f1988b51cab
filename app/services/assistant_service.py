from app.errors import ValidationError
from app.prompts.code_assist import (
    build_explain_error_prompt,
    build_selection_question_prompt,
)
from app.services.ai_service import AIService


class AssistantService:
    """Coding-assistant questions answered by the LLM."""

    def __init__(self, ai: AIService = None):
        self.ai = ai or AIService()

    def explain_error(self, language: str, code: str, error: str) -> str:
        if not language or not code or not error:
            raise ValidationError('Language, code and error are required')
        return self.ai.complete(build_explain_error_prompt(language, code, error))

    def ask_about_selection(self, language: str, code: str, selection: str, question: str) -> str:
        question = (question or '').strip()
        if not question:
            raise ValidationError('Question is required', field='question')
        if not language or not code:
            raise ValidationError('Language and code are required')
        return self.ai.complete(
            build_selection_question_prompt(language, code, selection or '', question)
        )
