from typing import Optional
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.language_models import BaseChatModel
from devicedesk.core.settings import settings
from devicedesk.llm.client import LLMClient

class GeminiClient(LLMClient):
    def is_configured(self) -> bool:
        return bool(settings.gemini.api_key)

    def get_chat_model(self, model_name: Optional[str] = None, temperature: float = 0.2) -> BaseChatModel:
        return ChatGoogleGenerativeAI(
            google_api_key=settings.gemini.api_key,
            model=model_name or settings.gemini.model,
            temperature=temperature,
            # Ask for JSON directly so the parser sees no markdown fences
            response_mime_type="application/json",
        )

    async def check_health(self) -> bool:
        return self.is_configured()
