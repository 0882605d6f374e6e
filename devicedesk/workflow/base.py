from abc import ABC, abstractmethod
from devicedesk.backends.base import DeviceBackend
from devicedesk.core.actions import Action
from devicedesk.core.models import Device

class BaseActionHandler(ABC):
    @property
    @abstractmethod
    def action(self) -> Action:
        """The action this handler executes."""
        pass

    def validate(self, device: Device) -> None:
        """
        Raise ValidationFailure if `device` cannot receive this action.
        Called before any backend call.
        """
        return None

    @abstractmethod
    async def execute(self, backend: DeviceBackend, device: Device) -> str:
        """
        Performs exactly one backend operation for `device` and returns the
        user-facing result text.
        """
        pass
