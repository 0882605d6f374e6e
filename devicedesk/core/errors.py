class DeviceDeskError(Exception):
    pass


class ClassificationUnavailable(DeviceDeskError):
    """Remote classifier unreachable or returned unusable output."""


class DeviceListFailure(DeviceDeskError):
    """Device enumeration failed."""


class ValidationFailure(DeviceDeskError):
    """Chosen device is incompatible with the active action."""


class BackendOperationFailure(DeviceDeskError):
    """A device-management operation failed or was refused."""


class DeviceNotFoundError(BackendOperationFailure):
    pass


class UnsupportedOperationError(BackendOperationFailure):
    pass


class WorkflowError(DeviceDeskError):
    """Caller invoked the workflow engine out of turn."""


class WorkflowBusyError(WorkflowError):
    pass


class InvalidWorkflowStateError(WorkflowError):
    pass


class InvalidActionError(WorkflowError):
    pass
