"""
Telegram Weather Relay Bot
==========================
Relays OpenWeatherMap conditions and same-day forecasts to Telegram users,
with optional scheduled forecast delivery at user-chosen times.
"""

__version__ = "1.0.0"
__author__ = "Weather Relay Bot"
