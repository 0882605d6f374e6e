from abc import ABC, abstractmethod
from langchain_core.language_models import BaseChatModel
from typing import Optional

class LLMClient(ABC):
    """
    Abstract Base Class for LLM Providers.
    Wraps LangChain's BaseChatModel and provides a unified interface.
    """

    @abstractmethod
    def is_configured(self) -> bool:
        """True when credentials/endpoints for this provider are present."""
        pass

    @abstractmethod
    def get_chat_model(self, model_name: Optional[str] = None, temperature: float = 0.2) -> BaseChatModel:
        """Returns a configured LangChain ChatModel instance."""
        pass

    @abstractmethod
    async def check_health(self) -> bool:
        """Checks if the provider is healthy and reachable."""
        pass
