"""
Main entry point for the Telegram Weather Bot.
Initializes all components and starts the bot.
"""

import asyncio
import logging
import signal

from telegram import Update
from telegram.ext import (
    Application,
    ContextTypes,
    MessageHandler,
    filters
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
import pytz

from .config import Config
from .health import HealthServer
from .storage import ConversationStore
from .weather import OpenWeatherClient
from .notifications import Notifier, TICK_SECONDS
from .handlers import DialogueHandlers

logger = logging.getLogger(__name__)


class WeatherBot:
    """
    Main bot class that coordinates all components.
    """

    def __init__(self):
        """Initialize the bot."""
        self.store: ConversationStore = None
        self.openweather: OpenWeatherClient = None
        self.notifier: Notifier = None
        self.scheduler: AsyncIOScheduler = None
        self.application: Application = None
        self.health: HealthServer = None
        self._stop_event = asyncio.Event()
        self._running = False

    async def initialize(self) -> None:
        """
        Initialize all bot components.

        Raises:
            ValueError: If required configuration is missing or invalid
        """
        if Config.CONFIG_FILE:
            Config.load_file(Config.CONFIG_FILE)

        Config.setup_logging()
        errors = Config.validate()
        if errors:
            for error in errors:
                logger.error(f"Config error: {error}")
            raise ValueError("Invalid configuration. Check .env or CONFIG_FILE.")

        logger.debug("Initializing Weather Bot...")
        timezone = Config.get_timezone()

        self.store = ConversationStore()
        self.openweather = OpenWeatherClient(
            Config.WEATHER_API_KEY,
            lang=Config.WEATHER_LANG,
            units=Config.WEATHER_UNITS
        )

        # Build telegram application
        self.application = (
            Application.builder()
            .token(Config.TELEGRAM_TOKEN)
            .build()
        )

        self.notifier = Notifier(
            bot=self.application.bot,
            store=self.store,
            weather=self.openweather,
            timezone=timezone
        )

        self._setup_handlers(timezone)
        self._setup_scheduler(timezone)

        if Config.HEALTH_CHECK_ENABLED:
            self.health = HealthServer(Config.HEALTH_PORT)

        logger.debug("Weather Bot initialized successfully")

    def _setup_handlers(self, timezone: pytz.BaseTzInfo) -> None:
        """Setup Telegram message handlers."""
        dialogue = DialogueHandlers(self.store, self.openweather, timezone)

        # Commands included: a pending mode must see /start as plain payload
        self.application.add_handler(
            MessageHandler(filters.TEXT, dialogue.handle_message)
        )
        self.application.add_error_handler(self._on_error)

        logger.debug("Message handlers registered")

    def _setup_scheduler(self, timezone: pytz.BaseTzInfo) -> None:
        """Setup the per-minute delivery scheduler."""
        self.scheduler = AsyncIOScheduler(timezone=timezone)

        self.scheduler.add_job(
            self._scheduled_delivery,
            trigger=IntervalTrigger(seconds=TICK_SECONDS),
            id="scheduled_delivery",
            name="Scheduled forecast delivery",
            replace_existing=True
        )

        logger.debug(
            f"Scheduler configured: delivery check every {TICK_SECONDS} seconds"
        )

    async def _scheduled_delivery(self) -> None:
        """Scheduled job to push due forecasts."""
        try:
            delivered = await self.notifier.run_tick()
            if delivered:
                logger.debug(f"Scheduled delivery sent {delivered} forecasts")
        except Exception as e:
            logger.error(f"Error in scheduled delivery: {e}")

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Error while handling update", exc_info=context.error)

    async def start(self) -> None:
        """Start the bot."""
        if self._running:
            logger.warning("Bot is already running")
            return

        self._running = True
        logger.debug("Starting Weather Bot...")

        if self.health:
            await self.health.start()

        self.scheduler.start()

        await self.application.initialize()
        await self.application.start()
        await self.application.updater.start_polling(
            allowed_updates=Update.ALL_TYPES
        )

        logger.info(f"✅ Бот запущено як {self.application.bot.username}")

        await self._stop_event.wait()

    def request_stop(self) -> None:
        self._stop_event.set()

    async def stop(self) -> None:
        """Stop the bot gracefully."""
        logger.debug("Stopping Weather Bot...")
        self._running = False
        self._stop_event.set()

        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)

        # Stop bot (updater may already be stopped or never started)
        if self.application:
            try:
                if self.application.updater and self.application.updater.running:
                    await self.application.updater.stop()
                if self.application.running:
                    await self.application.stop()
                await self.application.shutdown()
            except RuntimeError as e:
                logger.debug(f"Application shutdown: {e}")

        if self.health:
            await self.health.stop()

        if self.openweather:
            await self.openweather.close()

        logger.debug("Weather Bot stopped")


async def main() -> None:
    """Main entry point."""
    bot = WeatherBot()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, bot.request_stop)

    try:
        await bot.initialize()
        await bot.start()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise
    finally:
        await bot.stop()


def run() -> None:
    """Run the bot (blocking)."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
