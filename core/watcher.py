"""
One watch cycle for a single service.

SelectStrategy -> EnumerateInstances -> ComputeBaseline -> RunCollectors
-> MergeFragments -> StampIdentity -> Submit -> DispatchCallbacks

Only three conditions escape a cycle: InstanceTypeRequired (no usable
instance type), InstanceNotFound (pm2 knows no instance of the service)
and FieldNotFound (a configured HTTP field path is wrong). Every other
failure ends up in the report as a false / empty marker.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from collectors.disk_collector import DiskCollector
from collectors.http_collector import HttpCollector
from collectors.price_feed_collector import PriceFeedCollector
from collectors.rpc_collector import RpcCollector
from .collector_base import Collector, collapse
from .dispatcher import CallbackDispatcher
from .enumerator_base import ProcessEnumerator, select_enumerator
from .error_handling import TransportError
from .models import Instance, ServiceConfig
from .normalizer import normalize
from .http_client import HttpClient
from .submitter import MonitorSubmitter

logger = logging.getLogger(__name__)

CORE_KEYS = ('cpuUsage', 'memoryUsage', 'serviceName', 'serviceId')

def compute_usage(instances: List[Instance]) -> Tuple[float, float]:
    cpu_usage = sum(i.cpu_fraction for i in instances)
    memory_usage = sum(i.memory_fraction for i in instances)
    return normalize(cpu_usage), normalize(memory_usage)

def merge_fragment(report: Dict[str, Any], fragment: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge one collector fragment into the report in place.

    New keys are added. A later fragment replaces an earlier fragment's key,
    but core keys (usage and identity) are never taken from a fragment.
    """
    for key, value in fragment.items():
        if key in CORE_KEYS:
            logger.warning(f"Dropping reserved key '{key}' from collector fragment")
            continue
        if key in report:
            logger.debug(f"Collector fragment overrides '{key}'")
        report[key] = value
    return report

def stamp_identity(report: Dict[str, Any], service_name: str, service_id: Optional[str]) -> Dict[str, Any]:
    report['serviceName'] = service_name
    if service_id is not None:
        report['serviceId'] = service_id
    return report

class ServiceWatcher:
    def __init__(self, http_client: HttpClient = None,
                 enumerator_factory: Callable[[Any], ProcessEnumerator] = select_enumerator,
                 submitter_factory: Callable[..., MonitorSubmitter] = MonitorSubmitter,
                 disk_runner: Callable[[], str] = None):
        self.http_client = http_client or HttpClient()
        self.enumerator_factory = enumerator_factory
        self.submitter_factory = submitter_factory
        self.disk_runner = disk_runner

    def collectors_for(self, service_config: ServiceConfig) -> List[Collector]:
        # Fixed order: http, rpc, disk, priceFeed
        collectors = []
        if service_config.http is not None:
            collectors.append(HttpCollector(self.http_client))
        if service_config.rpc is not None:
            collectors.append(RpcCollector(self.http_client))
        # An empty allow-list still enables the collector
        if service_config.check_disk is not None and service_config.check_disk is not False:
            collectors.append(DiskCollector(self.disk_runner))
        if service_config.price_feed is not None:
            collectors.append(PriceFeedCollector(self.http_client))
        return collectors

    async def build_report(self, service_name: str, service_config: ServiceConfig,
                           enumerator: ProcessEnumerator) -> Dict[str, Any]:
        instances = await enumerator.enumerate(service_name, service_config)
        cpu_usage, memory_usage = compute_usage(instances)
        logger.debug(f"{service_name}: {len(instances)} instance(s), cpu={cpu_usage} memory={memory_usage}")

        report = {'cpuUsage': cpu_usage, 'memoryUsage': memory_usage}
        if service_config.skip_cpu:
            report['cpuUsage'] = 0
        if service_config.skip_memory:
            report['memoryUsage'] = 0

        for collector in self.collectors_for(service_config):
            outcome = await collector.collect(service_config)
            merge_fragment(report, collapse(outcome))

        return stamp_identity(report, service_name, service_config.service_id)

    async def watch(self, service_name: str, service_config: ServiceConfig,
                    monitor_host: Optional[str] = None) -> Dict[str, Any]:
        logger.info(f"Collecting {service_name}...")
        enumerator = self.enumerator_factory(service_config.instance_type)

        report = await self.build_report(service_name, service_config, enumerator)
        logger.info(f"Report: {report}")

        if monitor_host is None:
            return report

        logger.info(f"Submitting to {monitor_host}...")
        submitter = self.submitter_factory(monitor_host, self.http_client)
        try:
            result = await submitter.submit(report)
        except TransportError as e:
            logger.error(f"Submission to {monitor_host} failed: {e}")
            return report

        if result.callbacks:
            dispatcher = CallbackDispatcher(service_name, service_config, enumerator, self.http_client)
            for outcome in await dispatcher.dispatch(result.callbacks):
                logger.info(f"Callback {outcome.name}: {'ok' if outcome.success else 'failed'}")
        return report

async def watch(service_name: str, service_config: ServiceConfig,
                monitor_host: Optional[str] = None) -> Dict[str, Any]:
    return await ServiceWatcher().watch(service_name, service_config, monitor_host)
