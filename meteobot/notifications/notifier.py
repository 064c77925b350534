"""
Scheduled forecast delivery.
Once per tick, pushes today's forecast to users whose schedule matches the current minute.
"""

import logging
from datetime import datetime
from typing import Optional

from telegram import Bot
from telegram.error import TelegramError
import pytz

from .templates import MessageTemplates
from ..clock import local_now, hhmm
from ..storage import ConversationStore
from ..weather import OpenWeatherClient, WeatherServiceError

logger = logging.getLogger(__name__)

# Schedule times have minute granularity
TICK_SECONDS = 60


class Notifier:
    """
    Sends unsolicited forecasts at user-chosen times.

    Failures for a user are logged and dropped for that tick; there is
    no retry and the user is not told. Each local minute is processed at
    most once.
    """

    def __init__(
        self,
        bot: Bot,
        store: ConversationStore,
        weather: OpenWeatherClient,
        timezone: pytz.BaseTzInfo = pytz.UTC
    ):
        """
        Initialize the notifier.

        Args:
            bot: Telegram bot instance
            store: Conversation store with user schedules
            weather: OpenWeather API client
            timezone: Timezone that schedule times are expressed in
        """
        self.bot = bot
        self.store = store
        self.weather = weather
        self.timezone = timezone
        self._last_minute: Optional[datetime] = None

    async def run_tick(self, now: Optional[datetime] = None) -> int:
        """
        Deliver forecasts due at the current minute.

        Args:
            now: Instant to treat as "now" (defaults to the real clock)

        Returns:
            Number of forecasts delivered
        """
        moment = local_now(self.timezone, now)
        minute = moment.replace(second=0, microsecond=0)
        if minute == self._last_minute:
            return 0
        self._last_minute = minute

        current = hhmm(moment)
        due = self.store.due_at(current)

        if not due:
            return 0

        logger.info(f"Scheduled delivery at {current} for {len(due)} users")

        delivered = 0
        for user_id, city in due:
            try:
                await self.send_forecast(user_id, city, moment)
                delivered += 1
            except (WeatherServiceError, TelegramError) as e:
                logger.warning(f"Scheduled forecast for user {user_id} ({city}) dropped: {e}")
            except Exception as e:
                logger.error(f"Unexpected error delivering forecast to user {user_id} ({city}): {e!r}")

        return delivered

    async def send_forecast(self, user_id: int, city: str, moment: datetime) -> None:
        """
        Fetch, format and send today's forecast to one user.

        Raises:
            WeatherServiceError: If the forecast cannot be fetched or is empty
            TelegramError: If the message cannot be sent
        """
        entries = await self.weather.fetch_forecast(city)
        text = MessageTemplates.format_forecast(
            city, entries, moment.date(), self.timezone
        )
        await self.bot.send_message(chat_id=user_id, text=text)
        logger.debug(f"Sent scheduled forecast to {user_id}")
