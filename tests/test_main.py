import logging
from datetime import timedelta
from types import SimpleNamespace

import pytz

from meteobot.main import WeatherBot


async def test_error_handler_keeps_traceback(caplog):
    bot = WeatherBot()
    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        error = e

    with caplog.at_level(logging.ERROR, logger="meteobot.main"):
        await bot._on_error(None, SimpleNamespace(error=error))

    assert caplog.records[-1].exc_info[1] is error
    assert "Traceback" in caplog.text
    assert "RuntimeError: boom" in caplog.text


def test_scheduler_ticks_every_minute():
    bot = WeatherBot()
    bot._setup_scheduler(pytz.timezone("Etc/GMT-3"))

    job = bot.scheduler.get_job("scheduled_delivery")
    assert job.trigger.interval == timedelta(seconds=60)
