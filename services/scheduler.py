from datetime import datetime, timedelta
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from core.logger import logger
from services.poller import poller


scheduler = AsyncIOScheduler()

def start_scheduler():
    from core.config import settings

    logger.info("Starting Scheduler...")

    if settings.ENABLE_POLLER:
        first_run = datetime.now() + timedelta(milliseconds=settings.POLL_INITIAL_DELAY_MS)
        scheduler.add_job(
            poller.check,
            "interval",
            seconds=settings.POLL_INTERVAL_MS / 1000,
            next_run_time=first_run,
            id="temperature_poll",
            replace_existing=True,
        )
        logger.info(f"Initial check in {settings.POLL_INITIAL_DELAY_MS / 1000:.0f} seconds...")
    else:
        logger.info("Temperature Poller Disabled via Config.")

    scheduler.start()

    jobs = [job.name for job in scheduler.get_jobs()]
    logger.info(f"Scheduler active with jobs: {jobs}")

def stop_scheduler():
    logger.info("Stopping Scheduler...")
    scheduler.shutdown(wait=False)
