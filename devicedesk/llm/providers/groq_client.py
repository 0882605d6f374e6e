from typing import Optional
from langchain_groq import ChatGroq
from langchain_core.language_models import BaseChatModel
from devicedesk.core.settings import settings
from devicedesk.llm.client import LLMClient

class GroqClient(LLMClient):
    def is_configured(self) -> bool:
        return bool(settings.groq.api_key)

    def get_chat_model(self, model_name: Optional[str] = None, temperature: float = 0.2) -> BaseChatModel:
        return ChatGroq(
            groq_api_key=settings.groq.api_key,
            model_name=model_name or settings.groq.default_model,
            temperature=temperature,
            base_url=settings.groq.base_url
        )

    async def check_health(self) -> bool:
        # Key presence only; a real call would cost a completion
        return self.is_configured()
