"""
Aurora support desk core.

Identity verification for the Telegram login widget, role binding, and the
order/ticket services that sit on top of a whole-snapshot document store.
"""

__version__ = "1.0.0"
