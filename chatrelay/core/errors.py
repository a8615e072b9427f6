"""Project error hierarchy."""


class ChatRelayError(Exception):
    """Base error."""


class MissingChatInputError(ChatRelayError):
    """Raised when a chat body carries neither a messages array nor a prompt."""


class InferenceError(ChatRelayError):
    """Raised when the inference backend cannot be reached or rejects a run."""
