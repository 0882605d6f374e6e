from devicedesk.backends.base import DeviceBackend
from devicedesk.core.actions import Action
from devicedesk.core.errors import BackendOperationFailure, ValidationFailure
from devicedesk.core.models import Device, DeviceOS
from devicedesk.workflow.base import BaseActionHandler

class ResetPasscodeHandler(BaseActionHandler):
    @property
    def action(self) -> Action:
        return Action.RESET_PASSCODE

    def validate(self, device: Device) -> None:
        if device.os == DeviceOS.WINDOWS:
            raise ValidationFailure("Passcode reset is primarily for mobile devices (iOS/Android).")

    async def execute(self, backend: DeviceBackend, device: Device) -> str:
        if not await backend.reset_passcode(device.id):
            raise BackendOperationFailure(f"The passcode reset for {device.device_name} was not accepted.")
        return (
            f"Passcode reset command sent to {device.device_name}. "
            "You will be prompted to set a new passcode shortly."
        )
