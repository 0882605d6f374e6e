import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple
from devicedesk.backends.base import DeviceBackend
from devicedesk.core.actions import ACTION_LABELS, ACTION_PROMPTS, Action
from devicedesk.core.errors import (
    InvalidActionError,
    InvalidWorkflowStateError,
    ValidationFailure,
    WorkflowBusyError,
)
from devicedesk.core.models import ConversationMessage, Device, UserProfile, WorkflowState
from devicedesk.core.observability import TraceManager
from devicedesk.core.prompts import (
    CANCELLED_MESSAGE,
    DEVICE_LIST_ERROR_MESSAGE,
    DEVICE_SELECTION_MESSAGE,
)
from devicedesk.workflow.base import BaseActionHandler
from devicedesk.workflow.flows import AVAILABLE_HANDLERS

logger = logging.getLogger(__name__)

NO_DEVICES_MESSAGE = "I couldn't find any devices enrolled to your account. Would you like help with something else?"


class WorkflowEngine:
    """
    Per-conversation action workflow.

    Idle -> AwaitingDevices -> AwaitingSelection -> Executing -> Idle

    Only one action runs at a time. `start_action` outside Idle raises
    WorkflowBusyError and changes nothing. Every cycle ends in Idle whatever
    the backend does, and the conversation log only ever grows.
    """

    def __init__(
        self,
        backend: DeviceBackend,
        identity: UserProfile,
        session_id: Optional[str] = None,
        handlers: Optional[Sequence[BaseActionHandler]] = None,
    ):
        self.backend = backend
        self.identity = identity
        self.session_id = session_id
        self.registry: Dict[Action, BaseActionHandler] = {
            h.action: h for h in (handlers if handlers is not None else AVAILABLE_HANDLERS)
        }
        self.state = WorkflowState.IDLE
        self.active_action = Action.NONE
        self._messages: List[ConversationMessage] = []
        self._devices: List[Device] = []

    # --- Conversation log ---

    @property
    def messages(self) -> Tuple[ConversationMessage, ...]:
        return tuple(self._messages)

    @property
    def is_loading_devices(self) -> bool:
        return self.state == WorkflowState.AWAITING_DEVICES

    @property
    def presented_devices(self) -> Tuple[Device, ...]:
        return tuple(self._devices)

    def _append(self, message: ConversationMessage) -> ConversationMessage:
        self._messages.append(message)
        return message

    def record_user_message(self, text: str) -> ConversationMessage:
        return self._append(ConversationMessage(role="user", text=text))

    def reply(self, text: str, action: Optional[Action] = None, **payload) -> ConversationMessage:
        return self._append(ConversationMessage(role="assistant", text=text, action=action, **payload))

    def find_device(self, device_id: str) -> Optional[Device]:
        for device in self._devices:
            if device.id == device_id:
                return device
        return None

    # --- State machine ---

    def _transition(self, new_state: WorkflowState):
        TraceManager.info(
            f"Workflow transition: {self.state.value} -> {new_state.value}",
            session_id=self.session_id,
            action=self.active_action.value,
            user_id=self.identity.id
        )
        self.state = new_state

    def _reset(self):
        self._transition(WorkflowState.IDLE)
        self.active_action = Action.NONE
        self._devices = []

    async def start_action(self, action: Action, prompt_override: Optional[str] = None) -> None:
        if self.state != WorkflowState.IDLE:
            logger.warning(
                f"Rejected {action.value}: {self.active_action.value} is {self.state.value}",
                extra={"session_id": self.session_id}
            )
            raise WorkflowBusyError(
                f"Cannot start {action.value} while {self.active_action.value} is {self.state.value}."
            )
        if action not in self.registry:
            raise InvalidActionError(f"Action '{action.value}' cannot be started.")

        self.active_action = action
        self._transition(WorkflowState.AWAITING_DEVICES)
        text = prompt_override or ACTION_PROMPTS.get(action, "Selecting devices...")
        self.reply(f"{text} Fetching your devices...", action=action)

        try:
            devices = await self.backend.list_devices(self.identity)
        except asyncio.CancelledError:
            self._reset()
            raise
        except Exception as e:
            logger.error(f"Device list failed for {self.identity.id}: {e}", exc_info=True)
            TraceManager.error("Device list failed", exc=e, session_id=self.session_id)
            self.reply(DEVICE_LIST_ERROR_MESSAGE, action=action)
            self._reset()
            return

        if not devices:
            self.reply(NO_DEVICES_MESSAGE, action=action)
            self._reset()
            return

        self._devices = list(devices)
        self._transition(WorkflowState.AWAITING_SELECTION)
        self.reply(
            DEVICE_SELECTION_MESSAGE,
            action=action,
            devices=self._devices,
            requires_selection=True
        )

    async def select_device(self, device: Device) -> None:
        if self.state != WorkflowState.AWAITING_SELECTION:
            raise InvalidWorkflowStateError(
                f"No device selection is pending (workflow is {self.state.value})."
            )

        action = self.active_action
        handler = self.registry[action]
        self._transition(WorkflowState.EXECUTING)
        self.reply(f"Processing {ACTION_LABELS[action]} for {device.device_name}...", action=action)

        try:
            handler.validate(device)
            result_text = await handler.execute(self.backend, device)
        except ValidationFailure as e:
            TraceManager.info(
                "Device rejected by validation",
                session_id=self.session_id,
                action=action.value,
                device_os=device.os.value
            )
            self.reply(f"Error: {e}", action=action)
        except asyncio.CancelledError:
            self.reply("Error: The request was cancelled.", action=action)
            raise
        except Exception as e:
            logger.error(f"{action.value} failed for device {device.id}: {e}", exc_info=True)
            TraceManager.error("Action failed", exc=e, session_id=self.session_id, action=action.value)
            self.reply(f"Error: {str(e) or 'Something went wrong.'}", action=action)
        else:
            TraceManager.info("Action completed", session_id=self.session_id, action=action.value)
            self.reply(result_text, action=action)
        finally:
            self._reset()

    def cancel(self) -> None:
        if self.state != WorkflowState.AWAITING_SELECTION:
            raise InvalidWorkflowStateError(
                f"Nothing to cancel (workflow is {self.state.value})."
            )
        self.reply(CANCELLED_MESSAGE, action=self.active_action)
        self._reset()
