from abc import ABC, abstractmethod
from typing import List
from devicedesk.core.models import Device, UserProfile

class DeviceBackend(ABC):
    """
    Device-management service consumed by the workflow engine.
    All calls may suspend; failures are raised as BackendOperationFailure
    (or DeviceListFailure for enumeration).
    """

    @abstractmethod
    async def list_devices(self, identity: UserProfile) -> List[Device]:
        pass

    @abstractmethod
    async def get_recovery_key(self, device_id: str) -> str:
        pass

    @abstractmethod
    async def wipe_device(self, device_id: str) -> bool:
        pass

    @abstractmethod
    async def reset_passcode(self, device_id: str) -> bool:
        pass

    async def close(self):
        pass
