import logging
from typing import Any, Dict, List, Optional
import httpx
from pydantic import ValidationError
from devicedesk.backends.base import DeviceBackend
from devicedesk.core.errors import (
    BackendOperationFailure,
    DeviceListFailure,
    DeviceNotFoundError,
    UnsupportedOperationError,
)
from devicedesk.core.models import Device, DeviceOS, UserProfile

logger = logging.getLogger(__name__)

# Intune operatingSystem values -> our OS families
OS_MAP = {
    "windows": DeviceOS.WINDOWS,
    "ios": DeviceOS.IOS,
    "ipados": DeviceOS.IOS,
    "android": DeviceOS.ANDROID,
    "androidforwork": DeviceOS.ANDROID,
    "androidenterprise": DeviceOS.ANDROID,
    "macos": DeviceOS.MACOS,
}

DEVICE_FIELDS = "id,deviceName,operatingSystem,complianceState,lastSyncDateTime,serialNumber"


def _odata_quote(value: str) -> str:
    return value.replace("'", "''")


class GraphDeviceBackend(DeviceBackend):
    """
    Microsoft Graph (Intune) implementation of the device backend.
    Uses an application token; devices are scoped to the signed-in user by UPN.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.client = client or httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout,
        )

    async def close(self):
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise BackendOperationFailure(f"Device management service unreachable: {e}") from e

        if response.status_code == 404:
            raise DeviceNotFoundError("The device was not found in Intune.")
        if response.status_code == 400:
            raise UnsupportedOperationError(self._error_message(response))
        if response.is_error:
            raise BackendOperationFailure(
                f"Device management service returned {response.status_code}: {self._error_message(response)}"
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return response.json().get("error", {}).get("message") or response.reason_phrase
        except ValueError:
            return response.reason_phrase

    @staticmethod
    def _to_device(item: Dict[str, Any]) -> Optional[Device]:
        os_family = OS_MAP.get((item.get("operatingSystem") or "").lower())
        if os_family is None:
            logger.warning(f"Skipping device {item.get('id')} with unsupported OS {item.get('operatingSystem')}")
            return None
        try:
            return Device(
                id=item["id"],
                device_name=item.get("deviceName") or item["id"],
                os=os_family,
                is_compliant=item.get("complianceState") == "compliant",
                last_sync=item.get("lastSyncDateTime"),
                serial_number=item.get("serialNumber") or "",
            )
        except (KeyError, ValidationError) as e:
            logger.warning(f"Skipping malformed device record: {e}")
            return None

    async def list_devices(self, identity: UserProfile) -> List[Device]:
        params = {
            "$filter": f"userPrincipalName eq '{_odata_quote(identity.email)}'",
            "$select": DEVICE_FIELDS,
        }
        try:
            response = await self._request("GET", "/deviceManagement/managedDevices", params=params)
            payload = response.json()
        except (BackendOperationFailure, ValueError) as e:
            raise DeviceListFailure(str(e)) from e

        devices = [self._to_device(item) for item in payload.get("value", [])]
        return [d for d in devices if d is not None]

    async def get_recovery_key(self, device_id: str) -> str:
        params = {"$filter": f"deviceId eq '{_odata_quote(device_id)}'"}
        response = await self._request("GET", "/informationProtection/bitlocker/recoveryKeys", params=params)
        keys = response.json().get("value", [])
        if not keys:
            raise DeviceNotFoundError("No BitLocker key found for this device.")

        key_id = keys[0]["id"]
        response = await self._request(
            "GET",
            f"/informationProtection/bitlocker/recoveryKeys/{key_id}",
            params={"$select": "key"},
        )
        key = response.json().get("key")
        if not key:
            raise UnsupportedOperationError("The recovery key for this device could not be read.")
        return key

    async def wipe_device(self, device_id: str) -> bool:
        await self._request("POST", f"/deviceManagement/managedDevices/{device_id}/wipe", json={})
        return True

    async def reset_passcode(self, device_id: str) -> bool:
        await self._request("POST", f"/deviceManagement/managedDevices/{device_id}/resetPasscode")
        return True
