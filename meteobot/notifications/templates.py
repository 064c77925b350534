"""
Message templates for the Weather Bot.
All user-facing text is fixed Ukrainian plain text (no parse mode).
"""

from datetime import date
from typing import List, Sequence

import pytz

from ..weather.exceptions import NoDataError
from ..weather.models import WeatherSnapshot, ForecastEntry


class MessageTemplates:
    """
    Fixed replies and formatters for weather messages.
    """

    # Menu buttons (matched exactly, case-sensitive)
    CMD_START = "/start"
    BTN_SET_CITY = "📍 Задати місто"
    BTN_WEATHER = "🌦 Показати погоду"
    BTN_FORECAST = "📅 Прогноз на день"
    BTN_ADD_SCHEDULE = "⏰ Додати розсилку"
    BTN_REMOVE_SCHEDULE = "🗑 Видалити розсилку"

    WELCOME = "Привіт! Обери дію з меню:"
    UNKNOWN_COMMAND = "Не впізнаю цю команду. Скористайся меню."
    SET_CITY_FIRST = "Спочатку задай місто через кнопку 📍 Задати місто."

    ASK_CITY = "Введи назву міста:"
    ASK_SCHEDULE_TIME = "Введи час розсилки у форматі ГГ:ХХ (наприклад, 08:30):"
    ASK_REMOVAL = "Твої розсилки: {times}\nВведи час, який потрібно видалити:"
    NO_SCHEDULES = "У тебе немає запланованих розсилок."

    CITY_SAVED = '✅ Місто "{city}" збережено!'
    SCHEDULE_ADDED = "✅ Розсилку на {time} додано!"
    SCHEDULE_INVALID = "❌ Невірний формат часу. Використовуй ГГ:ХХ, наприклад 08:30."
    SCHEDULE_REMOVED = "🗑 Розсилку на {time} видалено."
    SCHEDULE_NOT_FOUND = "❌ Розсилки на {time} не знайдено."

    WEATHER_FAILED = "Не вдалося отримати погоду. Спробуй ще раз."
    FORECAST_FAILED = "Не вдалося отримати прогноз. Спробуй пізніше."
    FORECAST_EMPTY = "Немає даних прогнозу на сьогодні."
    CITY_NOT_FOUND = "Не вдалося знайти місто. Перевір назву і задай його знову."

    # First matching keyword wins
    EMOJI_KEYWORDS = (
        ("дощ", "🌧"),
        ("сніг", "❄️"),
        ("сонячно", "☀️"),
        ("ясно", "🌞"),
        ("гроза", "⛈"),
        ("хмар", "☁️"),
        ("туман", "🌫"),
        ("вітер", "💨"),
    )
    DEFAULT_EMOJI = "🌡"

    # Upper bound (inclusive) of each temperature band
    TEMPERATURE_COMMENTS = (
        (-10, "🥶 Надворі так холодно, що навіть Wi-Fi замерз!"),
        (0, "🧥 Вдягайся як капуста — шар за шаром."),
        (10, "🌀 Краще залишайся вдома з чаєм."),
        (20, "🌤 Легенький светрик не завадить."),
        (30, "😎 Ідеально! Йди ловити сонце."),
    )
    HOT_COMMENT = "🔥 Надворі жарко. Тримайся в тіні й пий воду."

    CONDITION_COMMENTS = {
        "Rain": "☔ Парасоля — твій найкращий друг сьогодні.",
        "Snow": "❄ Головне — не лизати металеві предмети.",
        "Clear": "🌞 Можна засмагати, але не перегрівайся.",
        "Thunderstorm": "⛈ Краще не виходити з дому без причини.",
        "Clouds": "🌫 Ідеально для філософських думок про сенс життя.",
    }

    @classmethod
    def weather_emoji(cls, description: str) -> str:
        """
        Pick an emoji for a forecast description.

        Args:
            description: Provider description text, any case

        Returns:
            Emoji for the first keyword found, or the thermometer
        """
        text = (description or "").lower()
        for keyword, emoji in cls.EMOJI_KEYWORDS:
            if keyword in text:
                return emoji
        return cls.DEFAULT_EMOJI

    @classmethod
    def temperature_comment(cls, temperature: float) -> str:
        for upper, comment in cls.TEMPERATURE_COMMENTS:
            if temperature <= upper:
                return comment
        return cls.HOT_COMMENT

    @classmethod
    def format_current_weather(cls, snapshot: WeatherSnapshot) -> str:
        """
        Format current conditions with a light-hearted comment.

        Args:
            snapshot: Current weather

        Returns:
            Plain-text message
        """
        text = (
            f"📍 Погода в місті {snapshot.city}:\n"
            f"🌡 {snapshot.temperature:.1f}°C\n"
            f"💧 Вологість: {snapshot.humidity}%\n"
            f"☁️ {snapshot.description} ({snapshot.condition})\n"
            f"\n"
            f"🧠 Коментар:\n"
            f"{cls.temperature_comment(snapshot.temperature)}"
        )

        condition_comment = cls.CONDITION_COMMENTS.get(snapshot.condition)
        if condition_comment:
            text += f"\n{condition_comment}"

        return text

    @classmethod
    def forecast_lines(
        cls,
        entries: Sequence[ForecastEntry],
        reference_date: date,
        timezone: pytz.BaseTzInfo = pytz.UTC
    ) -> List[str]:
        """
        Render the entries that fall on the reference date.

        Args:
            entries: Forecast steps in any order
            reference_date: Calendar day to keep, in the given timezone
            timezone: Timezone used for the day check and the HH:MM label

        Returns:
            One line per matching entry, in input order
        """
        lines = []
        for entry in entries:
            local_time = entry.timestamp.astimezone(timezone)
            if local_time.date() != reference_date:
                continue
            lines.append(
                f"🕒 {local_time.strftime('%H:%M')}: "
                f"{cls.weather_emoji(entry.description)} "
                f"{entry.temperature:.1f}°C — {entry.description}"
            )
        return lines

    @classmethod
    def format_forecast(
        cls,
        city: str,
        entries: Sequence[ForecastEntry],
        reference_date: date,
        timezone: pytz.BaseTzInfo = pytz.UTC
    ) -> str:
        """
        Format the same-day forecast for a city.

        Raises:
            NoDataError: If no entry falls on the reference date
        """
        lines = cls.forecast_lines(entries, reference_date, timezone)
        if not lines:
            raise NoDataError(f"no forecast entries for {city!r} on {reference_date}")

        return "\n".join([f"📅 Прогноз на день для {city}:"] + lines)

    @classmethod
    def format_removal_prompt(cls, times: Sequence[str]) -> str:
        return cls.ASK_REMOVAL.format(times=", ".join(times))
