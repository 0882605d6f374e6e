import logging
from typing import Dict, Optional, Tuple
from langchain_core.language_models import BaseChatModel
from devicedesk.core.errors import ClassificationUnavailable
from devicedesk.core.settings import settings
from devicedesk.llm.client import LLMClient
from devicedesk.llm.providers.gemini_client import GeminiClient
from devicedesk.llm.providers.groq_client import GroqClient
from devicedesk.llm.providers.self_hosted_client import SelfHostedClient

logger = logging.getLogger(__name__)

class LLMRouter:
    def __init__(self, clients: Optional[Dict[str, LLMClient]] = None, provider: Optional[str] = None):
        self.clients = clients if clients is not None else {
            "gemini": GeminiClient(),
            "groq": GroqClient(),
            "self_hosted": SelfHostedClient()
        }
        self.provider = provider or settings.llm.provider

    def get_client(self) -> Optional[LLMClient]:
        return self.clients.get(self.provider)

    def is_configured(self) -> bool:
        """
        Whether a remote classifier can be used at all. Evaluated once at
        startup; the answer is injected into the intent classifier.
        """
        client = self.get_client()
        return bool(client and client.is_configured())

    async def get_chat_model(self) -> Tuple[BaseChatModel, str]:
        """
        Returns (ChatModel, provider_name) for the configured provider.
        Raises ClassificationUnavailable when the provider is unknown or unhealthy;
        callers fall back to keyword matching.
        """
        client = self.get_client()
        if client is None:
            raise ClassificationUnavailable(f"Unknown LLM provider '{self.provider}'")

        if not await client.check_health():
            logger.warning(f"Provider {self.provider} unhealthy, falling back...")
            raise ClassificationUnavailable(f"Provider {self.provider} unavailable")

        logger.info(f"Routing to {self.provider} for classification")
        model = client.get_chat_model(
            model_name=settings.llm.classifier_model or None,
            temperature=settings.llm.temperature
        )
        return model, self.provider

llm_router = LLMRouter()
