import asyncio
from datetime import datetime, timezone

import pytest

from devicedesk.backends.mock import MockDeviceBackend
from devicedesk.core.actions import Action
from devicedesk.core.errors import (
    BackendOperationFailure,
    DeviceListFailure,
    InvalidActionError,
    InvalidWorkflowStateError,
    WorkflowBusyError,
)
from devicedesk.core.models import Device, DeviceOS, WorkflowState
from devicedesk.core.prompts import CANCELLED_MESSAGE, DEVICE_LIST_ERROR_MESSAGE, DEVICE_SELECTION_MESSAGE
from devicedesk.workflow.engine import WorkflowEngine

RECOVERY_KEY = "443215-112233-556677-889900-112233-445566-778899-001122"


class ScriptedBackend(MockDeviceBackend):
    """Mock backend whose operations can be made to fail."""

    def __init__(self, list_error=None, wipe_error=None, passcode_result=True):
        super().__init__(latency=0)
        self.list_error = list_error
        self.wipe_error = wipe_error
        self.passcode_result = passcode_result

    async def list_devices(self, identity):
        if self.list_error:
            self.calls.append(("list_devices", identity.id))
            raise self.list_error
        return await super().list_devices(identity)

    async def wipe_device(self, device_id):
        if self.wipe_error:
            self.calls.append(("wipe_device", device_id))
            raise self.wipe_error
        return await super().wipe_device(device_id)

    async def reset_passcode(self, device_id):
        self.calls.append(("reset_passcode", device_id))
        return self.passcode_result


class BlockingBackend(MockDeviceBackend):
    def __init__(self):
        super().__init__(latency=0)
        self.release = asyncio.Event()

    async def list_devices(self, identity):
        await self.release.wait()
        return await super().list_devices(identity)


def action_calls(backend):
    return [c for c in backend.calls if c[0] != "list_devices"]


async def started(engine, action):
    await engine.start_action(action)
    assert engine.state == WorkflowState.AWAITING_SELECTION
    return engine


@pytest.mark.asyncio
async def test_start_action_presents_devices(engine, backend):
    await engine.start_action(Action.WIPE)

    assert engine.state == WorkflowState.AWAITING_SELECTION
    assert engine.active_action == Action.WIPE
    assert len(engine.messages) == 2

    announce, selector = engine.messages
    assert announce.role == "assistant"
    assert announce.text.endswith("Fetching your devices...")
    assert announce.action == Action.WIPE
    assert selector.text == DEVICE_SELECTION_MESSAGE
    assert selector.requires_selection is True
    assert [d.id for d in selector.devices] == ["dev-001", "dev-002", "dev-003"]
    assert backend.calls == [("list_devices", "user-1")]


@pytest.mark.asyncio
async def test_start_action_uses_prompt_override(engine):
    await engine.start_action(Action.GET_RECOVERY_KEY, "Sure, let's find that key.")
    assert engine.messages[0].text == "Sure, let's find that key. Fetching your devices..."


@pytest.mark.asyncio
async def test_start_action_uses_canned_prompt(engine):
    await engine.start_action(Action.RESET_PASSCODE)
    assert engine.messages[0].text.startswith("I can help you reset the passcode on your mobile device.")


@pytest.mark.asyncio
async def test_start_action_rejected_while_awaiting_selection(engine):
    await started(engine, Action.WIPE)
    before = engine.messages

    with pytest.raises(WorkflowBusyError):
        await engine.start_action(Action.GET_RECOVERY_KEY)

    assert engine.active_action == Action.WIPE
    assert engine.state == WorkflowState.AWAITING_SELECTION
    assert engine.messages == before


@pytest.mark.asyncio
async def test_start_action_rejected_while_loading_devices(identity):
    backend = BlockingBackend()
    engine = WorkflowEngine(backend=backend, identity=identity)

    first = asyncio.create_task(engine.start_action(Action.WIPE))
    await asyncio.sleep(0)
    assert engine.is_loading_devices
    assert len(engine.messages) == 1

    with pytest.raises(WorkflowBusyError):
        await engine.start_action(Action.RESET_PASSCODE)
    assert engine.active_action == Action.WIPE
    assert len(engine.messages) == 1

    backend.release.set()
    await first
    assert engine.state == WorkflowState.AWAITING_SELECTION
    assert len(engine.messages) == 2


@pytest.mark.asyncio
async def test_cancelled_device_fetch_returns_to_idle(identity):
    engine = WorkflowEngine(backend=BlockingBackend(), identity=identity)

    task = asyncio.create_task(engine.start_action(Action.WIPE))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert engine.state == WorkflowState.IDLE
    assert engine.active_action == Action.NONE


@pytest.mark.asyncio
async def test_none_action_cannot_be_started(engine):
    with pytest.raises(InvalidActionError):
        await engine.start_action(Action.NONE)
    assert engine.state == WorkflowState.IDLE
    assert engine.messages == ()


@pytest.mark.asyncio
async def test_device_list_failure_returns_to_idle(identity):
    backend = ScriptedBackend(list_error=DeviceListFailure("Intune timeout"))
    engine = WorkflowEngine(backend=backend, identity=identity)

    await engine.start_action(Action.GET_RECOVERY_KEY)

    assert engine.state == WorkflowState.IDLE
    assert engine.active_action == Action.NONE
    assert len(engine.messages) == 2
    assert engine.messages[-1].text == DEVICE_LIST_ERROR_MESSAGE
    assert engine.messages[-1].requires_selection is False

    # Conversation is immediately usable again
    backend.list_error = None
    await engine.start_action(Action.GET_RECOVERY_KEY)
    assert engine.state == WorkflowState.AWAITING_SELECTION


@pytest.mark.asyncio
async def test_empty_device_list_returns_to_idle(identity):
    engine = WorkflowEngine(backend=MockDeviceBackend(devices=[]), identity=identity)

    await engine.start_action(Action.WIPE)

    assert engine.state == WorkflowState.IDLE
    assert len(engine.messages) == 2
    assert "couldn't find any devices" in engine.messages[-1].text


@pytest.mark.asyncio
async def test_recovery_key_success(engine, backend, devices):
    await started(engine, Action.GET_RECOVERY_KEY)

    await engine.select_device(devices["dev-001"])

    assert len(engine.messages) == 4
    assert engine.messages[2].text == "Processing BitLocker key retrieval for MDLZ-US-LPT-994..."
    assert RECOVERY_KEY in engine.messages[3].text
    assert engine.messages[3].text.startswith("Success.")
    assert action_calls(backend) == [("get_recovery_key", "dev-001")]


@pytest.mark.asyncio
async def test_recovery_key_rejects_non_windows_device(engine, backend, devices):
    await started(engine, Action.GET_RECOVERY_KEY)

    await engine.select_device(devices["dev-002"])

    assert engine.messages[-1].text == "Error: BitLocker is only available for Windows devices."
    assert action_calls(backend) == []


@pytest.mark.asyncio
async def test_passcode_reset_rejects_windows_device(engine, backend, devices):
    await started(engine, Action.RESET_PASSCODE)

    await engine.select_device(devices["dev-001"])

    assert engine.messages[-1].text.startswith("Error: Passcode reset is primarily for mobile devices")
    assert ("reset_passcode", "dev-001") not in backend.calls
    assert action_calls(backend) == []


@pytest.mark.asyncio
async def test_select_device_requires_pending_selection(engine, devices):
    with pytest.raises(InvalidWorkflowStateError):
        await engine.select_device(devices["dev-001"])
    assert engine.messages == ()


def _windows_device_without_key():
    return Device(
        id="dev-999",
        device_name="Spare Laptop",
        os=DeviceOS.WINDOWS,
        is_compliant=True,
        last_sync=datetime.now(timezone.utc),
        serial_number="X-1",
    )


CYCLES = [
    # action, backend kwargs, device id, expected result prefix
    (Action.GET_RECOVERY_KEY, {}, "dev-001", "Success."),
    (Action.GET_RECOVERY_KEY, {}, "dev-999", "Error: No BitLocker key found"),
    (Action.WIPE, {}, "dev-003", "Wipe command sent to Pixel 7 Work."),
    (Action.WIPE, {"wipe_error": BackendOperationFailure("Device is offline")}, "dev-003", "Error: Device is offline"),
    (Action.RESET_PASSCODE, {}, "dev-002", "Passcode reset command sent to John's iPhone 14."),
    (Action.RESET_PASSCODE, {"passcode_result": False}, "dev-002", "Error: The passcode reset for John's iPhone 14 was not accepted."),
    (Action.RETIRE, {}, "dev-002", "Error: Retiring John's iPhone 14 is not available"),
    (Action.WIPE, {"wipe_error": RuntimeError()}, "dev-001", "Error: Something went wrong."),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("action,backend_kwargs,device_id,expected", CYCLES)
async def test_every_cycle_ends_idle(identity, action, backend_kwargs, device_id, expected):
    backend = ScriptedBackend(**backend_kwargs)
    engine = WorkflowEngine(backend=backend, identity=identity)
    device = _windows_device_without_key() if device_id == "dev-999" else None

    await engine.start_action(action)
    assert len(engine.messages) == 2
    device = device or engine.find_device(device_id)

    await engine.select_device(device)

    assert engine.state == WorkflowState.IDLE
    assert engine.active_action == Action.NONE
    assert len(engine.messages) == 4
    assert engine.messages[-1].text.startswith(expected)
    # at most one backend operation per execution
    assert len(action_calls(backend)) <= 1
    assert engine.presented_devices == ()


@pytest.mark.asyncio
async def test_successive_cycles_only_grow_the_log(engine, devices):
    lengths = [len(engine.messages)]
    for action, device_id in [(Action.WIPE, "dev-001"), (Action.GET_RECOVERY_KEY, "dev-001")]:
        await engine.start_action(action)
        lengths.append(len(engine.messages))
        await engine.select_device(engine.find_device(device_id))
        lengths.append(len(engine.messages))

    assert lengths == [0, 2, 4, 6, 8]
    assert engine.messages[1].requires_selection is True


@pytest.mark.asyncio
async def test_cancel_pending_selection(engine):
    await started(engine, Action.WIPE)

    engine.cancel()

    assert engine.state == WorkflowState.IDLE
    assert engine.active_action == Action.NONE
    assert engine.messages[-1].text == CANCELLED_MESSAGE


def test_cancel_when_idle_is_rejected(engine):
    with pytest.raises(InvalidWorkflowStateError):
        engine.cancel()


@pytest.mark.asyncio
async def test_find_device_only_knows_presented_devices(engine):
    assert engine.find_device("dev-001") is None
    await started(engine, Action.WIPE)
    assert engine.find_device("dev-001").device_name == "MDLZ-US-LPT-994"
    assert engine.find_device("dev-404") is None
