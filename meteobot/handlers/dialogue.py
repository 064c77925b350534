"""
Telegram dialogue handler.
Routes every text message through the pending-mode check and then the fixed menu.
"""

import logging
from datetime import datetime
from typing import Optional

from telegram import Update, ReplyKeyboardMarkup, KeyboardButton
from telegram.ext import ContextTypes
import pytz

from ..clock import local_today
from ..notifications import MessageTemplates
from ..storage import ConversationStore, ConversationMode
from ..weather import OpenWeatherClient, ProviderError, NotFoundError, NoDataError

logger = logging.getLogger(__name__)


def main_keyboard() -> ReplyKeyboardMarkup:
    """Reply keyboard with the menu buttons."""
    return ReplyKeyboardMarkup(
        [
            [
                KeyboardButton(MessageTemplates.BTN_SET_CITY),
                KeyboardButton(MessageTemplates.BTN_WEATHER),
            ],
            [
                KeyboardButton(MessageTemplates.BTN_FORECAST),
            ],
            [
                KeyboardButton(MessageTemplates.BTN_ADD_SCHEDULE),
                KeyboardButton(MessageTemplates.BTN_REMOVE_SCHEDULE),
            ],
        ],
        resize_keyboard=True
    )


def normalize_schedule_time(text: str) -> Optional[str]:
    """
    Parse a user-typed time.

    Returns:
        Zero-padded "HH:MM", or None if the text is not a valid time
    """
    try:
        return datetime.strptime(text.strip(), "%H:%M").strftime("%H:%M")
    except ValueError:
        return None


class DialogueHandlers:
    """
    Handles all text messages from users.

    A pending mode always wins: while one is set, the next message is its
    payload and is never treated as a menu command.
    """

    def __init__(
        self,
        store: ConversationStore,
        weather: OpenWeatherClient,
        timezone: pytz.BaseTzInfo = pytz.UTC
    ):
        """
        Initialize dialogue handlers.

        Args:
            store: Conversation store
            weather: OpenWeather API client
            timezone: Timezone that defines "today" for forecasts
        """
        self.store = store
        self.weather = weather
        self.timezone = timezone
        self._menu = {
            MessageTemplates.CMD_START: self.show_menu,
            MessageTemplates.BTN_SET_CITY: self.ask_city,
            MessageTemplates.BTN_WEATHER: self.show_weather,
            MessageTemplates.BTN_FORECAST: self.show_forecast,
            MessageTemplates.BTN_ADD_SCHEDULE: self.ask_schedule_time,
            MessageTemplates.BTN_REMOVE_SCHEDULE: self.ask_removal,
        }

    async def handle_message(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Entry point for every inbound text message."""
        message = update.message
        if message is None or message.text is None:
            return

        user_id = update.effective_chat.id
        text = message.text.strip()

        mode = self.store.consume_mode(user_id)
        if mode is not ConversationMode.NONE:
            await self._apply_mode(mode, user_id, text, update)
            return

        action = self._menu.get(text)
        if action is None:
            await message.reply_text(MessageTemplates.UNKNOWN_COMMAND)
            return

        await action(user_id, update)

    async def _apply_mode(
        self,
        mode: ConversationMode,
        user_id: int,
        text: str,
        update: Update
    ) -> None:
        """Treat the message as the payload of the pending mode."""
        if mode is ConversationMode.AWAITING_CITY:
            self.store.set_city(user_id, text)
            reply = MessageTemplates.CITY_SAVED.format(city=text)

        elif mode is ConversationMode.AWAITING_SCHEDULE_TIME:
            time = normalize_schedule_time(text)
            if time is None:
                reply = MessageTemplates.SCHEDULE_INVALID
            else:
                self.store.add_schedule_time(user_id, time)
                reply = MessageTemplates.SCHEDULE_ADDED.format(time=time)

        elif mode is ConversationMode.AWAITING_SCHEDULE_REMOVAL:
            time = normalize_schedule_time(text) or text
            if self.store.remove_schedule_time(user_id, time):
                reply = MessageTemplates.SCHEDULE_REMOVED.format(time=time)
            else:
                reply = MessageTemplates.SCHEDULE_NOT_FOUND.format(time=time)

        else:
            raise ValueError(f"Unhandled conversation mode: {mode}")

        await update.message.reply_text(reply)

    # Menu actions

    async def show_menu(self, user_id: int, update: Update) -> None:
        await update.message.reply_text(
            MessageTemplates.WELCOME,
            reply_markup=main_keyboard()
        )
        logger.info(f"User {user_id} opened the menu")

    async def ask_city(self, user_id: int, update: Update) -> None:
        self.store.begin_awaiting_city(user_id)
        await update.message.reply_text(MessageTemplates.ASK_CITY)

    async def ask_schedule_time(self, user_id: int, update: Update) -> None:
        self.store.begin_awaiting_schedule_time(user_id)
        await update.message.reply_text(MessageTemplates.ASK_SCHEDULE_TIME)

    async def ask_removal(self, user_id: int, update: Update) -> None:
        times = self.store.list_schedule_times(user_id)
        if not times:
            await update.message.reply_text(MessageTemplates.NO_SCHEDULES)
            return

        self.store.begin_awaiting_removal(user_id)
        await update.message.reply_text(MessageTemplates.format_removal_prompt(times))

    async def show_weather(self, user_id: int, update: Update) -> None:
        """Reply with current conditions for the stored city."""
        city = self.store.get_city(user_id)
        if not city:
            await update.message.reply_text(MessageTemplates.SET_CITY_FIRST)
            return

        try:
            snapshot = await self.weather.fetch_current(city)
        except ProviderError as e:
            logger.warning(f"Current weather for {city!r} failed: {e}")
            await update.message.reply_text(MessageTemplates.WEATHER_FAILED)
            return

        await update.message.reply_text(MessageTemplates.format_current_weather(snapshot))

    async def show_forecast(self, user_id: int, update: Update) -> None:
        """Reply with today's forecast for the stored city."""
        city = self.store.get_city(user_id)
        if not city:
            await update.message.reply_text(MessageTemplates.SET_CITY_FIRST)
            return

        try:
            entries = await self.weather.fetch_forecast(city)
            text = MessageTemplates.format_forecast(
                city, entries, local_today(self.timezone), self.timezone
            )
        except NotFoundError as e:
            logger.warning(f"Forecast for {city!r} failed: {e}")
            text = MessageTemplates.CITY_NOT_FOUND
        except NoDataError as e:
            logger.info(f"Forecast for {city!r} empty: {e}")
            text = MessageTemplates.FORECAST_EMPTY
        except ProviderError as e:
            logger.warning(f"Forecast for {city!r} failed: {e}")
            text = MessageTemplates.FORECAST_FAILED

        await update.message.reply_text(text)
