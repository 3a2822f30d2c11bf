import logging
import traceback
from typing import List, Tuple

import config
from .enumerator_base import ProcessEnumerator
from .http_client import HttpClient
from .models import CallbackResult, HttpSpec, ServiceConfig

logger = logging.getLogger(__name__)

RESTART = 'restart'
MAKE_SUPPORT_WALLET = 'makeSupportWallet'

class CallbackDispatcher:
    """
    Runs the remediation actions a monitor host requested, one after another.

    Only the actions in `actions` are known; anything else is ignored.
    A failing action is logged and recorded, and the remaining ones still run.
    """
    actions = (RESTART, MAKE_SUPPORT_WALLET)

    def __init__(self, service_name: str, service_config: ServiceConfig,
                 enumerator: ProcessEnumerator, http_client: HttpClient):
        self.service_name = service_name
        self.service_config = service_config
        self.enumerator = enumerator
        self.http_client = http_client

    async def dispatch(self, callbacks: List[str]) -> List[CallbackResult]:
        results = []
        for name in callbacks:
            if name not in self.actions:
                logger.debug(f"Ignoring unknown callback: {name}")
                continue
            try:
                success, output = await self.execute_action(name)
            except Exception as e:
                logger.error(f"Callback {name} failed: {str(e)}")
                logger.debug(traceback.format_exc())
                success, output = False, str(e)
            results.append(CallbackResult(name=name, success=success, output=output))
        return results

    async def execute_action(self, name: str) -> Tuple[bool, str]:
        if name == RESTART:
            if not self.enumerator.supports_restart:
                logger.error(f"restart requested but {self.service_name} is supervised elsewhere")
                return False, "restart not supported for this instance type"
            success, output = await self.enumerator.restart(self.service_name)
            if success:
                logger.info(f"Restarted {self.service_name}")
            else:
                logger.error(f"Restart of {self.service_name} failed: {output}")
            return success, output

        if name == MAKE_SUPPORT_WALLET:
            uri = self.service_config.make_support_wallet
            if not uri:
                logger.error("makeSupportWallet requested but no makeSupportWallet uri is configured")
                return False, "makeSupportWallet uri not configured"
            response = await self.http_client.post(
                HttpSpec(uri=uri, method='POST', body={'count': config.SUPPORT_WALLET_COUNT})
            )
            logger.info("madeSupportWallet")
            return True, str(response)

        return False, f"Unknown action type: {name}"
