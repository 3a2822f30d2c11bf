import asyncio
import logging
import re
import shlex
import subprocess
from typing import Callable, Dict, List, Optional

import config
from core.collector_base import Collector
from core.models import CollectorOutcome, ServiceConfig
from core.normalizer import normalize

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*(-?\d+)')

def run_disk_usage_command(command: str = None) -> str:
    """Run the df-style command synchronously and return its stdout."""
    cmd = shlex.split(command or config.DISK_USAGE_COMMAND)
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=config.COMMAND_TIMEOUT_SECONDS
    )
    if result.returncode != 0:
        raise RuntimeError(f"{' '.join(cmd)} exited with {result.returncode}: {result.stderr.strip()}")
    return result.stdout

def parse_percent(value: Optional[str]) -> float:
    """'92%' -> 0.92. Missing or unparsable values give 0.0."""
    if value is None:
        return 0.0
    match = _LEADING_INT.match(value.replace('%', ''))
    if not match:
        return 0.0
    return normalize(int(match.group(1)) / 100)

def parse_df_output(text: str, allow_list: Optional[List[str]] = None,
                    device_pattern: str = None) -> Dict[str, Dict[str, object]]:
    """
    Parse `df -h` output, header line discarded.

    Filesystems are kept when they appear in allow_list, or, without an
    allow-list, when they match device_pattern (hard disks by default).
    """
    pattern = re.compile(device_pattern or config.DISK_DEVICE_PATTERN)
    disks = {}
    for line in text.split('\n')[1:]:
        columns = line.split()
        if not columns:
            continue
        filesystem = columns[0]
        if allow_list is not None:
            if filesystem not in allow_list:
                continue
        elif not pattern.search(filesystem):
            continue

        size, used, available, used_percent = (columns[1:5] + [None] * 4)[:4]
        disks[filesystem] = {
            'size': size,
            'used': used,
            'available': available,
            'utilization': parse_percent(used_percent),
        }
    return disks

class DiskCollector(Collector):
    key = 'disk'

    def __init__(self, runner: Callable[[], str] = None):
        self.runner = runner or run_disk_usage_command

    async def collect(self, service_config: ServiceConfig) -> CollectorOutcome:
        allow_list = service_config.check_disk if isinstance(service_config.check_disk, list) else None
        try:
            output = await asyncio.to_thread(self.runner)
        except Exception as e:  # missing binary, timeout, non-zero exit
            return self.failure(e)
        return self.success({self.key: parse_df_output(output, allow_list)})
