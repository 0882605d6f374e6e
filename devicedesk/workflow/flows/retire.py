from devicedesk.backends.base import DeviceBackend
from devicedesk.core.actions import Action
from devicedesk.core.errors import UnsupportedOperationError
from devicedesk.core.models import Device
from devicedesk.workflow.base import BaseActionHandler

class RetireHandler(BaseActionHandler):
    """Accepted by the vocabulary but not wired to a backend operation yet."""

    @property
    def action(self) -> Action:
        return Action.RETIRE

    async def execute(self, backend: DeviceBackend, device: Device) -> str:
        raise UnsupportedOperationError(
            f"Retiring {device.device_name} is not available from this assistant yet. "
            "Please contact the IT Service Desk."
        )
