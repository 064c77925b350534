"""Telegram bot handlers module."""

from .dialogue import DialogueHandlers, main_keyboard

__all__ = ["DialogueHandlers", "main_keyboard"]
