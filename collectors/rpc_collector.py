from typing import Any, Optional

from core.collector_base import Collector
from core.http_client import HttpClient
from core.models import CollectorOutcome, ServiceConfig

def parse_block_height(value: Any) -> Optional[int]:
    """
    Block height from an RPC result: an integer, a '0x' hex string or a
    decimal string. Anything else gives None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            if text[:2].lower() == '0x':
                return int(text[2:], 16)
            return int(text, 10)
        except ValueError:
            return None
    return None

class RpcCollector(Collector):
    key = 'rpc'

    def __init__(self, http_client: HttpClient):
        self.http_client = http_client

    async def collect(self, service_config: ServiceConfig) -> CollectorOutcome:
        rpc = service_config.rpc
        try:
            response = await self.http_client.request_rpc(rpc)
        except Exception as e:  # transport or protocol failure
            return self.failure(e)

        fragment = dict(response) if isinstance(response, dict) else {}
        fragment[self.key] = True
        if isinstance(rpc.chain, str):
            height = parse_block_height(response)
            if height is not None:
                fragment['blockNumber'] = {rpc.chain: [height]}
        return self.success(fragment)
