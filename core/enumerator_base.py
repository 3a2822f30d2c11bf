from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from .error_handling import InstanceTypeRequired
from .models import Instance, ServiceConfig

PM2_INSTANCE_TYPES = ('pm2', 'process-manager')

class ProcessEnumerator(ABC):
    # Only enumerators that can restart an instance enforce that one exists.
    supports_restart = False

    @abstractmethod
    async def enumerate(self, service_name: str, service_config: ServiceConfig) -> List[Instance]:
        """
        List the running instances of a service.

        Args:
            service_name (str): Name the service is registered under.
            service_config (ServiceConfig): Watch target configuration.

        Returns:
            List[Instance] with cpu_fraction / memory_fraction on a 0-1 scale.
        """
        pass

    async def restart(self, service_name: str) -> Tuple[bool, str]:
        """
        Restart a service. Failures are reported, never raised.

        Returns:
            (success: bool, output: str)
        """
        return False, f"Restart is not supported by {type(self).__name__}"

def normalize_instance_type(instance_type) -> Optional[str]:
    if not isinstance(instance_type, str):
        return None
    return instance_type.strip().lower() or None

def select_enumerator(instance_type) -> 'ProcessEnumerator':
    normalized = normalize_instance_type(instance_type)
    if normalized is None:
        raise InstanceTypeRequired()
    if normalized in PM2_INSTANCE_TYPES:
        from platforms.pm2.enumerator_pm2 import Pm2Enumerator
        return Pm2Enumerator()
    from platforms.pstable.enumerator_pstable import ProcessTableEnumerator
    # Lower-casing only picks the strategy; the command name keeps its case
    return ProcessTableEnumerator(instance_type.strip())
