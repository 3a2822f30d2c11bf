import asyncio
import atexit
import json
import logging
import sys

from apscheduler.schedulers.blocking import BlockingScheduler

import config
from core.error_handling import AppError
from core.models import ServiceConfig
from core.watcher import ServiceWatcher

logger = logging.getLogger(__name__)

def load_service_config(path: str = None) -> ServiceConfig:
    with open(path or config.SERVICE_CONFIG_PATH, 'r') as f:
        return ServiceConfig.from_dict(json.load(f))

# Scheduler Job
def run_watch_job(service_name: str, service_config: ServiceConfig, monitor_host: str = None):
    try:
        return asyncio.run(ServiceWatcher().watch(service_name, service_config, monitor_host))
    except AppError as e:
        # Fatal to this cycle only; the next interval tries again
        logger.error(f"Watch cycle for {service_name} aborted: {e}")
    except Exception as e:
        logger.exception(f"Error in watch job: {e}")
    return None

def main():
    if not config.SERVICE_NAME:
        print("SERVICE_NAME is not set")
        sys.exit(1)
    service_config = load_service_config()

    scheduler = BlockingScheduler()
    # max_instances=1: cycles for one service never overlap
    scheduler.add_job(
        func=run_watch_job,
        args=(config.SERVICE_NAME, service_config, config.MONITOR_HOST),
        trigger="interval",
        seconds=config.WATCH_INTERVAL_SECONDS,
        max_instances=1,
        coalesce=True,
        id='watch',
    )
    atexit.register(lambda: scheduler.shutdown(wait=False) if scheduler.running else None)

    print("Service Watch Started")
    print(f"Service: {config.SERVICE_NAME} (every {config.WATCH_INTERVAL_SECONDS}s)")
    run_watch_job(config.SERVICE_NAME, service_config, config.MONITOR_HOST)
    scheduler.start()

if __name__ == '__main__':
    main()
