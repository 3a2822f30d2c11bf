from typing import Any, Optional

from core.collector_base import Collector
from core.error_handling import FieldNotFound
from core.http_client import HttpClient
from core.models import CollectorOutcome, ServiceConfig

def extract_field(response: Any, field_path: Optional[str]) -> Any:
    """
    Drill into a structured response along a dotted path, e.g. 'result.status'.

    Raises:
        FieldNotFound: a segment is absent. That is a misconfiguration,
        not a transient failure.
    """
    if not isinstance(field_path, str) or not field_path:
        return response
    result = response
    for segment in field_path.split('.'):
        if isinstance(result, dict) and segment in result:
            result = result[segment]
        else:
            raise FieldNotFound(field_path, segment)
    return result

class HttpCollector(Collector):
    key = 'http'

    def __init__(self, http_client: HttpClient):
        self.http_client = http_client

    async def collect(self, service_config: ServiceConfig) -> CollectorOutcome:
        try:
            response = await self.http_client.request(service_config.http)
        except Exception as e:  # transport or protocol failure
            return self.failure(e)

        fragment = {}
        if isinstance(response, dict):
            result = extract_field(response, service_config.response_field)
            if isinstance(result, dict):
                fragment.update(result)
        fragment[self.key] = True
        return self.success(fragment)
