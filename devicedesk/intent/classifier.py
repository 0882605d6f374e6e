import logging
from typing import Optional

from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from devicedesk.core.actions import Action
from devicedesk.core.errors import ClassificationUnavailable
from devicedesk.core.models import ClassificationResult
from devicedesk.core.observability import TraceManager
from devicedesk.core.prompts import CLASSIFIER_SYSTEM_PROMPT
from devicedesk.intent.base import BaseClassifier
from devicedesk.intent.keywords import KeywordClassifier
from devicedesk.llm.router import LLMRouter, llm_router

logger = logging.getLogger(__name__)

# Names older prompts (and some models) still produce
_ACTION_ALIASES = {
    "get_bitlocker": Action.GET_RECOVERY_KEY.value,
    "bitlocker": Action.GET_RECOVERY_KEY.value,
    "recovery_key": Action.GET_RECOVERY_KEY.value,
}


class IntentData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    intent: Action = Field(..., description="One of: none, get_recovery_key, wipe, reset_passcode, retire.")
    reasoning: Optional[str] = Field(None, description="Brief explanation of why this action was chosen.")
    confirmation_message: str = Field(
        ...,
        alias="confirmationMessage",
        min_length=1,
        description="Short friendly message for the user, asking them to select the device or to clarify.",
    )

    @field_validator("intent", mode="before")
    @classmethod
    def normalize_intent(cls, value):
        if isinstance(value, str):
            value = value.strip().lower().replace("-", "_").replace(" ", "_")
            return _ACTION_ALIASES.get(value, value)
        return value


class IntentClassifier(BaseClassifier):
    """
    Classifies user text into an Action.

    The remote path (LLM via the router) is only attempted when `remote_enabled`
    is set; that flag is decided once at startup. Any failure on the remote path
    (provider down, malformed or empty JSON, unknown intent) is logged and the
    keyword classifier answers instead, so `classify` always returns a result.
    """

    def __init__(
        self,
        router: Optional[LLMRouter] = None,
        remote_enabled: bool = False,
        fallback: Optional[BaseClassifier] = None,
    ):
        self.router = router
        self.remote_enabled = remote_enabled and router is not None
        self.fallback = fallback or KeywordClassifier()
        self.parser = JsonOutputParser(pydantic_object=IntentData)
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", CLASSIFIER_SYSTEM_PROMPT),
            ("user", "User: {input}\n\n{format_instructions}")
        ])

    async def classify(self, utterance: str) -> ClassificationResult:
        if not self.remote_enabled:
            return await self.fallback.classify(utterance)

        try:
            result = await self._classify_remote(utterance)
        except Exception as e:
            logger.warning(f"Remote classification failed, using keyword match: {e}")
            TraceManager.warning("Classification fallback", error=str(e), error_type=type(e).__name__)
            return await self.fallback.classify(utterance)

        TraceManager.info(
            f"Intent classified: {result.action.value}",
            action=result.action.value,
            provider=result.provider
        )
        return result

    async def _classify_remote(self, utterance: str) -> ClassificationResult:
        model, provider = await self.router.get_chat_model()

        chain = self.prompt | model | self.parser
        raw = await chain.ainvoke({
            "input": utterance,
            "format_instructions": self.parser.get_format_instructions()
        })

        if not raw:
            raise ClassificationUnavailable("Empty response from classifier")

        try:
            data = IntentData.model_validate(raw)
        except ValidationError as e:
            raise ClassificationUnavailable(f"Malformed classifier output: {e.error_count()} error(s)") from e

        logger.info(f"Classifier result: intent={data.intent.value} provider={provider}")
        return ClassificationResult(
            action=data.intent,
            confirmation_message=data.confirmation_message,
            reasoning=data.reasoning,
            provider=provider,
        )


def build_intent_classifier(router: LLMRouter = llm_router) -> IntentClassifier:
    remote_enabled = router.is_configured()
    if not remote_enabled:
        logger.warning("No LLM credentials configured. Intent classification is running in keyword match mode.")
    return IntentClassifier(router=router, remote_enabled=remote_enabled)
