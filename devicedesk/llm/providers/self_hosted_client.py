from typing import Optional
from langchain_openai import ChatOpenAI
from langchain_core.language_models import BaseChatModel
from devicedesk.core.settings import settings
from devicedesk.llm.client import LLMClient
import httpx

class SelfHostedClient(LLMClient):
    def is_configured(self) -> bool:
        return bool(settings.self_hosted.base_url)

    def get_chat_model(self, model_name: Optional[str] = None, temperature: float = 0.2) -> BaseChatModel:
        return ChatOpenAI(
            base_url=settings.self_hosted.base_url,
            api_key=settings.self_hosted.api_key,
            model=model_name or settings.self_hosted.default_model,
            temperature=temperature
        )

    async def check_health(self) -> bool:
        if not self.is_configured():
            return False
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.get(f"{settings.self_hosted.base_url}/models", timeout=2.0)
                return resp.status_code == 200
        except httpx.HTTPError:
            return False
