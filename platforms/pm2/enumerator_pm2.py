import asyncio
import json
import logging
from typing import Any, Dict, List, Tuple

import psutil

import config
from core.enumerator_base import ProcessEnumerator
from core.error_handling import AppError, InstanceNotFound, safe_execute_async
from core.models import Instance, ServiceConfig

logger = logging.getLogger(__name__)

def parse_jlist(output: str) -> List[Any]:
    """
    Process list from `pm2 jlist` output. pm2 may print banner lines such as
    "In-memory PM2 is out-of-date" or "[PM2] Spawning PM2 daemon" before the JSON.
    """
    decoder = json.JSONDecoder()
    start = output.find('[')
    while start != -1:
        try:
            value, _ = decoder.raw_decode(output, start)
        except ValueError:
            value = None
        if isinstance(value, list):
            return value
        start = output.find('[', start + 1)
    raise ValueError("no process list in pm2 jlist output")

class Pm2Enumerator(ProcessEnumerator):
    supports_restart = True

    def __init__(self, pm2_bin: str = None, timeout: float = None):
        self.pm2_bin = pm2_bin or config.PM2_BIN
        self.timeout = timeout or config.COMMAND_TIMEOUT_SECONDS

    async def _run_pm2(self, *args: str) -> Tuple[bool, str]:
        """
        Helper to run a pm2 subcommand without a shell.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self.pm2_bin, *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return False, f"Execution failed: {str(e)}"
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return False, f"Execution timed out after {self.timeout:g}s."
        success = (proc.returncode == 0)
        if success:
            return True, stdout.decode(errors='replace')
        output = stdout.decode(errors='replace') + "\n" + stderr.decode(errors='replace')
        return False, output.strip()

    @safe_execute_async(default_return=[])
    async def describe(self, service_name: str) -> List[Dict[str, Any]]:
        # An unreachable pm2 daemon reads as "no instance"
        success, output = await self._run_pm2('jlist')
        if not success:
            raise AppError(f"pm2 jlist failed: {output}")
        processes = parse_jlist(output)
        return [p for p in processes if isinstance(p, dict) and p.get('name') == service_name]

    async def enumerate(self, service_name: str, service_config: ServiceConfig) -> List[Instance]:
        processes = await self.describe(service_name)
        if not processes:
            raise InstanceNotFound(service_name)

        total_memory = psutil.virtual_memory().total
        instances = []
        for proc in processes:
            monit = proc.get('monit') or {}
            instances.append(Instance(
                name=proc.get('name', service_name),
                pid=proc.get('pid'),
                cpu_fraction=float(monit.get('cpu') or 0) / 100,
                memory_fraction=float(monit.get('memory') or 0) / total_memory,
            ))
        return instances

    async def restart(self, service_name: str) -> Tuple[bool, str]:
        success, output = await self._run_pm2('restart', service_name)
        if not success:
            logger.error(f"pm2 restart {service_name} failed: {output}")
        return success, output.strip()
