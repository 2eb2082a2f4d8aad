"""Custom exceptions for KakaShell."""


class KakaShellError(Exception):
    """Base exception for all KakaShell errors."""


class ConfigError(KakaShellError):
    """Configuration error."""


class ChatError(KakaShellError):
    """Chat-completion request or response error."""


class CommandError(KakaShellError):
    """Local shell command could not be executed."""
