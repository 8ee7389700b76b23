"""Inline keyboard builders."""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup


def reminder_keyboard() -> InlineKeyboardMarkup:
    """Keyboard for reminder messages: log a drink, dismiss, pause."""
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton("💧 200ml", callback_data="drink:200"),
                InlineKeyboardButton("💧 300ml", callback_data="drink:300"),
                InlineKeyboardButton("💧 500ml", callback_data="drink:500"),
            ],
            [
                InlineKeyboardButton("✗ Dismiss", callback_data="dismiss"),
                InlineKeyboardButton("⏸ Pause 1h", callback_data="pause:60"),
            ],
        ]
    )


def paused_keyboard() -> InlineKeyboardMarkup:
    """Keyboard shown while reminders are paused."""
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton("▶ Resume now", callback_data="resume")]]
    )
