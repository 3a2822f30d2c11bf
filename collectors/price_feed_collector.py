from datetime import datetime, timezone
from typing import Any, Dict

from core.collector_base import Collector
from core.http_client import HttpClient
from core.models import CollectorOutcome, ServiceConfig

def to_epoch_ms(value: Any) -> int:
    """
    Epoch milliseconds from a feed timestamp: a number or digit string is
    taken as epoch ms already, anything else is parsed as ISO-8601.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)

def parse_last_tx_info(response: Any) -> Dict[str, int]:
    if not isinstance(response, dict):
        raise ValueError("price feed response is not an object")
    last_tx_info = response['lastTxInfo']
    return {tx['name']: to_epoch_ms(tx['at']) for tx in last_tx_info.values()}

class PriceFeedCollector(Collector):
    key = 'priceFeed'

    def __init__(self, http_client: HttpClient):
        self.http_client = http_client

    async def collect(self, service_config: ServiceConfig) -> CollectorOutcome:
        try:
            response = await self.http_client.get(service_config.price_feed)
            feed = parse_last_tx_info(response)
        except Exception as e:  # fetch or parse failure
            return self.failure(e, marker={})
        return self.success({self.key: feed})
