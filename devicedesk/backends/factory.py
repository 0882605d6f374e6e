import logging
from devicedesk.backends.base import DeviceBackend
from devicedesk.backends.graph import GraphDeviceBackend
from devicedesk.backends.mock import MockDeviceBackend
from devicedesk.core.settings import settings

logger = logging.getLogger(__name__)

def build_device_backend() -> DeviceBackend:
    backend = settings.devices.backend
    if backend == "graph":
        if not settings.devices.graph_access_token:
            raise RuntimeError("DEVICE_BACKEND=graph requires GRAPH_ACCESS_TOKEN")
        logger.info(f"Using Microsoft Graph device backend at {settings.devices.graph_base_url}")
        return GraphDeviceBackend(
            base_url=settings.devices.graph_base_url,
            access_token=settings.devices.graph_access_token,
            timeout=settings.devices.graph_timeout_seconds,
        )
    if backend != "mock":
        raise RuntimeError(f"Unknown DEVICE_BACKEND '{backend}'")

    logger.info("Using mock device backend")
    return MockDeviceBackend(latency=settings.devices.mock_latency_seconds)
