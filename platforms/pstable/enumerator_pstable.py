import asyncio
import logging
import re
import time
from typing import List, Optional

import psutil

from core.enumerator_base import ProcessEnumerator
from core.models import Instance, ServiceConfig

logger = logging.getLogger(__name__)

class ProcessTableEnumerator(ProcessEnumerator):
    """
    Scans the OS process table for commands matching a pattern.

    Supervision of these services happens elsewhere, so an empty scan is
    reported as zero usage and restart is not available.
    """

    def __init__(self, instance_type: str):
        self.instance_type = instance_type

    def command_pattern(self, service_config: ServiceConfig) -> str:
        return service_config.command_pattern or re.escape(self.instance_type)

    @staticmethod
    def _lifetime_cpu_percent(proc: psutil.Process, now: float) -> float:
        # Same figure as `ps aux`: cpu time over wall time since start
        times = proc.cpu_times()
        elapsed = now - proc.create_time()
        if elapsed <= 0:
            return 0.0
        return (times.user + times.system) / elapsed * 100

    def _match(self, pattern, proc: psutil.Process) -> Optional[str]:
        cmdline = proc.info.get('cmdline') or []
        command = " ".join(cmdline) if cmdline else (proc.info.get('name') or "")
        return command if pattern.search(command) else None

    def _scan(self, pattern) -> List[Instance]:
        now = time.time()
        instances = []
        for proc in psutil.process_iter(['pid', 'name', 'cmdline']):
            try:
                if not self._match(pattern, proc):
                    continue
                instances.append(Instance(
                    name=proc.info.get('name') or "",
                    pid=proc.info.get('pid'),
                    cpu_fraction=self._lifetime_cpu_percent(proc, now) / 100,
                    memory_fraction=proc.memory_percent() / 100,
                ))
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

        return instances

    async def enumerate(self, service_name: str, service_config: ServiceConfig) -> List[Instance]:
        pattern = re.compile(self.command_pattern(service_config))
        # process_iter walks /proc synchronously
        instances = await asyncio.to_thread(self._scan, pattern)
        if not instances:
            logger.info(f"No process matches /{pattern.pattern}/ for {service_name}")
        return instances
