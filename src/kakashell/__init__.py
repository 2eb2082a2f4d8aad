"""KakaShell: an AI-assisted Linux command shell."""

__version__ = "0.1.0"
