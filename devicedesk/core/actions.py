from enum import Enum


class Action(str, Enum):
    NONE = "none"
    GET_RECOVERY_KEY = "get_recovery_key"
    WIPE = "wipe"
    RESET_PASSCODE = "reset_passcode"
    RETIRE = "retire"


# Action metadata for the classifier system prompt
ACTION_DESCRIPTIONS = {
    Action.GET_RECOVERY_KEY: "User needs a recovery key, BitLocker key, or is locked out of a laptop.",
    Action.WIPE: "User wants to wipe, factory reset, or format a device (lost/stolen).",
    Action.RESET_PASSCODE: "User forgot a phone PIN or passcode, or needs to unlock a mobile device.",
    Action.RETIRE: "Remove company data but keep personal data.",
    Action.NONE: "General greeting or unclear request.",
}

# Announcement used when an action is started without a classifier message
# (e.g. from a quick action button)
ACTION_PROMPTS = {
    Action.GET_RECOVERY_KEY: "I can help you retrieve your BitLocker recovery key.",
    Action.WIPE: "I can help you initiate a remote wipe for a lost or stolen device.",
    Action.RESET_PASSCODE: "I can help you reset the passcode on your mobile device.",
    Action.RETIRE: "I can help you remove company data from a device you are keeping.",
}

# Human readable labels for progress messages
ACTION_LABELS = {
    Action.GET_RECOVERY_KEY: "BitLocker key retrieval",
    Action.WIPE: "remote wipe",
    Action.RESET_PASSCODE: "passcode reset",
    Action.RETIRE: "retire",
}
