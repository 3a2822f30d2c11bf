import os

from dotenv import load_dotenv

load_dotenv()

ENVIRONMENT = os.getenv('ENVIRONMENT', 'dev')

# Watch target
SERVICE_NAME = os.getenv('SERVICE_NAME', '')
SERVICE_CONFIG_PATH = os.getenv('SERVICE_CONFIG_PATH', 'service.json')

# Monitor host (empty = collect only, never submit)
MONITOR_HOST = os.getenv('MONITOR_HOST') or None
MONITOR_SUBMIT_PATH = os.getenv('MONITOR_SUBMIT_PATH', '/report')

WATCH_INTERVAL_SECONDS = int(os.getenv('WATCH_INTERVAL_SECONDS', '60'))

# External calls
HTTP_TIMEOUT_SECONDS = float(os.getenv('HTTP_TIMEOUT_SECONDS', '10'))
COMMAND_TIMEOUT_SECONDS = float(os.getenv('COMMAND_TIMEOUT_SECONDS', '30'))
PM2_BIN = os.getenv('PM2_BIN', 'pm2')
DISK_USAGE_COMMAND = os.getenv('DISK_USAGE_COMMAND', 'df -h --sync')
# Only matches /dev/sdXN; cloud block devices (xvda, nvme0n1) need an explicit checkDisk list
DISK_DEVICE_PATTERN = os.getenv('DISK_DEVICE_PATTERN', r'^/dev/sd[a-z][0-9]?$')

USAGE_PRECISION = int(os.getenv('USAGE_PRECISION', '4'))
SUPPORT_WALLET_COUNT = int(os.getenv('SUPPORT_WALLET_COUNT', '10'))

LOG_FILE = os.getenv('LOG_FILE', 'service_watch.log')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
