from .recovery_key import RecoveryKeyHandler
from .wipe import WipeHandler
from .reset_passcode import ResetPasscodeHandler
from .retire import RetireHandler

# Registry of all available action handlers
# New actions should be added here
AVAILABLE_HANDLERS = [
    RecoveryKeyHandler(),
    WipeHandler(),
    ResetPasscodeHandler(),
    RetireHandler()
]
