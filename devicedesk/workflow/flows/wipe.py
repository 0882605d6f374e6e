from devicedesk.backends.base import DeviceBackend
from devicedesk.core.actions import Action
from devicedesk.core.errors import BackendOperationFailure
from devicedesk.core.models import Device
from devicedesk.workflow.base import BaseActionHandler

class WipeHandler(BaseActionHandler):
    @property
    def action(self) -> Action:
        return Action.WIPE

    async def execute(self, backend: DeviceBackend, device: Device) -> str:
        if not await backend.wipe_device(device.id):
            raise BackendOperationFailure(f"The wipe command for {device.device_name} was not accepted.")
        return f"Wipe command sent to {device.device_name}. The device will reset the next time it checks in."
