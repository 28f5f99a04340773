"""Companion Chat: configure an AI companion and chat with it."""

__version__ = "1.0.0"
