from devicedesk.core.actions import ACTION_DESCRIPTIONS

# Dynamic parts for Classifier Prompt
action_descriptions = "\n".join([f"- '{k.value}': {v}" for k, v in ACTION_DESCRIPTIONS.items()])

CLASSIFIER_SYSTEM_PROMPT = f"""You are an IT Support Assistant for enrolled company devices.
The user is asking for help. Classify their intent into exactly one of the following actions:
{action_descriptions}

If the intent is clear, provide a short friendly confirmation message asking them to select the device.
If unclear, ask for clarification.

OUTPUT FORMAT:
You MUST return a single valid JSON object with the keys "intent", "reasoning" and "confirmationMessage".
"intent" MUST be one of the action names listed above. Do not include markdown formatting.
Example:
{{{{
  "intent": "wipe",
  "reasoning": "User reported a stolen phone.",
  "confirmationMessage": "I'm sorry to hear that. Which device needs to be wiped?"
}}}}
"""

OFFLINE_GUIDANCE_MESSAGE = (
    "I'm currently in offline mode (No API Key). Please use the Quick Action buttons, "
    "or type 'bitlocker', 'wipe', or 'passcode'."
)

GREETING_MESSAGE = (
    "Hello {first_name}. I am your IT assistant. I can help you manage your enrolled devices. "
    "What would you like to do today?"
)

DEVICE_SELECTION_MESSAGE = "Please select the device you want to manage:"

DEVICE_LIST_ERROR_MESSAGE = (
    "I encountered an error fetching your devices from Intune. Please try again later."
)

CANCELLED_MESSAGE = "Okay, I've cancelled the current action. How else can I help you?"

BUSY_MESSAGE = (
    "I'm still working on your current request. Pick a device from the list above, "
    "or say 'cancel' to stop."
)

CHAT_DEFAULT_MESSAGE = "I'm here to help with your devices."
