import functools
import logging
import traceback

import config

# Configure logging
logging.basicConfig(
    filename=config.LOG_FILE,
    level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def safe_execute_async(default_return=None):
    """
    Decorator to wrap coroutines in a try/except block.
    Logs errors and returns a default value on failure.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {str(e)}")
                logger.debug(traceback.format_exc())
                return default_return
        return wrapper
    return decorator

class AppError(Exception):
    """Base custom exception class."""
    pass

class InstanceTypeRequired(AppError):
    """The service config names no usable instance type. Aborts the cycle."""
    def __init__(self, message='InstanceTypeRequired'):
        super().__init__(message)

class InstanceNotFound(AppError):
    """The process manager reports no instance of the service. Aborts the cycle."""
    def __init__(self, service_name: str):
        super().__init__(f"InstanceNotFound: {service_name}")
        self.service_name = service_name

class FieldNotFound(AppError):
    """A configured response field path is missing from a successful response."""
    def __init__(self, field_path: str, segment: str):
        super().__init__(f"{field_path} not found (missing segment '{segment}')")
        self.field_path = field_path
        self.segment = segment

class TransportError(AppError):
    """HTTP / RPC exchange failed. Tolerated wherever it is raised."""
    pass

class RpcError(TransportError):
    """The RPC endpoint answered with a JSON-RPC error member."""
    pass
