from devicedesk.backends.base import DeviceBackend
from devicedesk.core.actions import Action
from devicedesk.core.errors import ValidationFailure
from devicedesk.core.models import Device, DeviceOS
from devicedesk.workflow.base import BaseActionHandler

class RecoveryKeyHandler(BaseActionHandler):
    @property
    def action(self) -> Action:
        return Action.GET_RECOVERY_KEY

    def validate(self, device: Device) -> None:
        if device.os != DeviceOS.WINDOWS:
            raise ValidationFailure("BitLocker is only available for Windows devices.")

    async def execute(self, backend: DeviceBackend, device: Device) -> str:
        key = await backend.get_recovery_key(device.id)
        return f"Success. Here is the BitLocker Recovery Key for {device.device_name}:\n\n{key}"
