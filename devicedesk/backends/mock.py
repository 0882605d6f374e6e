import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from devicedesk.backends.base import DeviceBackend
from devicedesk.core.errors import DeviceNotFoundError
from devicedesk.core.models import Device, DeviceOS, UserProfile

logger = logging.getLogger(__name__)

RECOVERY_KEYS = {
    "dev-001": "443215-112233-556677-889900-112233-445566-778899-001122",
}


def fixture_devices(now: Optional[datetime] = None) -> List[Device]:
    now = now or datetime.now(timezone.utc)
    return [
        Device(
            id="dev-001",
            device_name="MDLZ-US-LPT-994",
            os=DeviceOS.WINDOWS,
            is_compliant=True,
            last_sync=now,
            serial_number="H844-2221",
        ),
        Device(
            id="dev-002",
            device_name="John's iPhone 14",
            os=DeviceOS.IOS,
            is_compliant=True,
            last_sync=now,
            serial_number="DX8842A",
        ),
        Device(
            id="dev-003",
            device_name="Pixel 7 Work",
            os=DeviceOS.ANDROID,
            is_compliant=False,
            last_sync=now - timedelta(days=5),
            serial_number="G022155",
        ),
    ]


class MockDeviceBackend(DeviceBackend):
    """
    In-process stand-in for the device-management API. Latency is simulated
    so the UI can show its loading states; tests run it with latency=0.
    """

    def __init__(self, latency: float = 0.0, devices: Optional[List[Device]] = None):
        self.latency = latency
        self.devices = devices
        self.calls: List[tuple] = []

    async def _delay(self, factor: float = 1.0):
        if self.latency:
            await asyncio.sleep(self.latency * factor)

    async def list_devices(self, identity: UserProfile) -> List[Device]:
        self.calls.append(("list_devices", identity.id))
        await self._delay()
        return list(self.devices) if self.devices is not None else fixture_devices()

    async def get_recovery_key(self, device_id: str) -> str:
        self.calls.append(("get_recovery_key", device_id))
        await self._delay(1.5)
        key = RECOVERY_KEYS.get(device_id)
        if key is None:
            raise DeviceNotFoundError("No BitLocker key found for this device type.")
        return key

    async def wipe_device(self, device_id: str) -> bool:
        self.calls.append(("wipe_device", device_id))
        await self._delay(2.0)
        logger.info(f"[MOCK GRAPH] Wiping device {device_id}")
        return True

    async def reset_passcode(self, device_id: str) -> bool:
        self.calls.append(("reset_passcode", device_id))
        await self._delay(2.0)
        logger.info(f"[MOCK GRAPH] Resetting passcode for device {device_id}")
        return True
