from abc import ABC, abstractmethod
from devicedesk.core.models import ClassificationResult

class BaseClassifier(ABC):
    @abstractmethod
    async def classify(self, utterance: str) -> ClassificationResult:
        """
        Classify one user utterance. Implementations never raise; failures are
        turned into a usable result.
        """
        pass
