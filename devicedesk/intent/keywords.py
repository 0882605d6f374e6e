from typing import List, Tuple
from devicedesk.core.actions import Action
from devicedesk.core.models import ClassificationResult
from devicedesk.core.prompts import OFFLINE_GUIDANCE_MESSAGE
from devicedesk.intent.base import BaseClassifier

# Checked in order; the first matching rule wins
KEYWORD_RULES: List[Tuple[Tuple[str, ...], Action, str]] = [
    (
        ("bitlocker", "recovery", "key"),
        Action.GET_RECOVERY_KEY,
        "I can help you retrieve your BitLocker recovery key. Please select the device.",
    ),
    (
        ("wipe", "lost", "stolen", "reset factory"),
        Action.WIPE,
        "I can help you wipe a lost or stolen device. Which device needs to be wiped?",
    ),
    (
        ("passcode", "pin", "unlock"),
        Action.RESET_PASSCODE,
        "I can help reset your mobile device passcode. Select the device below.",
    ),
]


def match_keywords(utterance: str) -> ClassificationResult:
    lower = utterance.lower()

    for keywords, action, message in KEYWORD_RULES:
        for keyword in keywords:
            if keyword in lower:
                return ClassificationResult(
                    action=action,
                    confirmation_message=message,
                    reasoning=f"Keyword match: {keyword}",
                    provider="keyword",
                )

    return ClassificationResult(
        action=Action.NONE,
        confirmation_message=OFFLINE_GUIDANCE_MESSAGE,
        reasoning="No keyword match",
        provider="keyword",
    )


class KeywordClassifier(BaseClassifier):
    """Deterministic classifier used offline and whenever the LLM path fails."""

    async def classify(self, utterance: str) -> ClassificationResult:
        return match_keywords(utterance)
