import httpx
import pytest

from devicedesk.backends.graph import GraphDeviceBackend
from devicedesk.core.errors import (
    BackendOperationFailure,
    DeviceListFailure,
    DeviceNotFoundError,
    UnsupportedOperationError,
)
from devicedesk.core.models import DeviceOS

BASE_URL = "https://graph.test/v1.0"


def make_backend(handler):
    client = httpx.AsyncClient(
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
        headers={"Authorization": "Bearer app-token"},
    )
    return GraphDeviceBackend(base_url=BASE_URL, access_token="app-token", client=client)


MANAGED_DEVICES = {
    "value": [
        {
            "id": "a1",
            "deviceName": "LPT-1",
            "operatingSystem": "Windows",
            "complianceState": "compliant",
            "lastSyncDateTime": "2026-10-01T08:00:00Z",
            "serialNumber": "S1",
        },
        {
            "id": "b2",
            "deviceName": "Work iPad",
            "operatingSystem": "iPadOS",
            "complianceState": "noncompliant",
            "lastSyncDateTime": "2026-09-28T08:00:00Z",
            "serialNumber": "S2",
        },
        {
            "id": "c3",
            "deviceName": "Old Linux box",
            "operatingSystem": "Linux",
            "complianceState": "compliant",
            "lastSyncDateTime": "2026-09-28T08:00:00Z",
            "serialNumber": "S3",
        },
    ]
}


@pytest.mark.asyncio
async def test_list_devices_filters_by_user_and_maps_os(identity):
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["filter"] = request.url.params["$filter"]
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json=MANAGED_DEVICES)

    backend = make_backend(handler)
    devices = await backend.list_devices(identity)

    assert seen["path"] == "/v1.0/deviceManagement/managedDevices"
    assert seen["filter"] == "userPrincipalName eq 'alex.doe@example.com'"
    assert seen["auth"] == "Bearer app-token"
    assert [d.id for d in devices] == ["a1", "b2"]
    assert devices[0].os == DeviceOS.WINDOWS
    assert devices[0].is_compliant is True
    assert devices[1].os == DeviceOS.IOS
    assert devices[1].is_compliant is False


@pytest.mark.asyncio
async def test_list_devices_failure_is_device_list_failure(identity):
    backend = make_backend(lambda request: httpx.Response(503, json={"error": {"message": "Service unavailable"}}))

    with pytest.raises(DeviceListFailure):
        await backend.list_devices(identity)


@pytest.mark.asyncio
async def test_list_devices_network_error(identity):
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(DeviceListFailure):
        await make_backend(handler).list_devices(identity)


@pytest.mark.asyncio
async def test_get_recovery_key_reads_first_key():
    def handler(request: httpx.Request):
        if request.url.path.endswith("/recoveryKeys"):
            assert request.url.params["$filter"] == "deviceId eq 'a1'"
            return httpx.Response(200, json={"value": [{"id": "k-1", "volumeType": "operatingSystemVolume"}]})
        assert request.url.path.endswith("/recoveryKeys/k-1")
        assert request.url.params["$select"] == "key"
        return httpx.Response(200, json={"id": "k-1", "key": "111111-222222"})

    assert await make_backend(handler).get_recovery_key("a1") == "111111-222222"


@pytest.mark.asyncio
async def test_get_recovery_key_without_keys_is_not_found():
    backend = make_backend(lambda request: httpx.Response(200, json={"value": []}))
    with pytest.raises(DeviceNotFoundError):
        await backend.get_recovery_key("b2")


@pytest.mark.asyncio
async def test_wipe_posts_to_device():
    calls = []

    def handler(request: httpx.Request):
        calls.append((request.method, request.url.path))
        return httpx.Response(204)

    assert await make_backend(handler).wipe_device("a1") is True
    assert calls == [("POST", "/v1.0/deviceManagement/managedDevices/a1/wipe")]


@pytest.mark.asyncio
async def test_reset_passcode_error_mapping():
    backend = make_backend(lambda request: httpx.Response(404, json={"error": {"message": "Not found"}}))
    with pytest.raises(DeviceNotFoundError):
        await backend.reset_passcode("zz")

    backend = make_backend(lambda request: httpx.Response(400, json={"error": {"message": "Not supported on Windows"}}))
    with pytest.raises(UnsupportedOperationError, match="Not supported on Windows"):
        await backend.reset_passcode("a1")

    backend = make_backend(lambda request: httpx.Response(500, text="oops"))
    with pytest.raises(BackendOperationFailure, match="returned 500"):
        await backend.reset_passcode("a1")
