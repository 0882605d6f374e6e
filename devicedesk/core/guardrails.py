from typing import Optional, Tuple
from devicedesk.core.observability import TraceManager
from devicedesk.core.settings import settings

class Guardrails:
    """
    Basic checks on chat input before it reaches the classifier.
    """

    @staticmethod
    def validate_input(text: str, max_length: Optional[int] = None) -> Tuple[bool, Optional[str]]:
        """
        Returns: (is_safe, violation_reason)
        """
        max_length = max_length or settings.max_message_length

        if not text or not text.strip():
            return False, "Please type a message describing what you need help with."

        if len(text) > max_length:
            TraceManager.info("Guardrail blocked input", reason="too_long", length=len(text))
            return False, f"That message is too long. Please keep it under {max_length} characters."

        return True, None
