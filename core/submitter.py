import logging
from typing import Any, Dict

import config
from .http_client import HttpClient
from .models import HttpSpec, SubmitResult

logger = logging.getLogger(__name__)

class MonitorSubmitter:
    def __init__(self, monitor_host: str, http_client: HttpClient = None):
        self.monitor_host = monitor_host
        self.http_client = http_client or HttpClient()

    @property
    def submit_url(self) -> str:
        return self.monitor_host.rstrip('/') + config.MONITOR_SUBMIT_PATH

    async def submit(self, report: Dict[str, Any]) -> SubmitResult:
        """
        Send the report and read back the callbacks the monitor asks for.

        Raises:
            TransportError: the monitor host could not be reached.
        """
        response = await self.http_client.post(HttpSpec(uri=self.submit_url, method='POST', body=report))
        logger.info(f"Monitor response: {response}")

        callbacks = []
        if isinstance(response, dict) and isinstance(response.get('callbacks'), list):
            callbacks = [c for c in response['callbacks'] if isinstance(c, str)]
        return SubmitResult(submitted=True, callbacks=callbacks, response=response)
