from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

@dataclass(frozen=True)
class HttpSpec:
    uri: str
    method: str = 'GET'
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    body: Any = None  # sent as JSON when set
    timeout: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HttpSpec':
        return cls(
            uri=data['uri'],
            method=str(data.get('method', 'GET')).upper(),
            headers=dict(data.get('headers') or {}),
            params=dict(data.get('qs') or data.get('params') or {}),
            body=data.get('body', data.get('json')),
            timeout=data.get('timeout'),
        )

@dataclass(frozen=True)
class RpcSpec:
    uri: str
    method: str  # JSON-RPC method, e.g. 'eth_blockNumber'
    params: List[Any] = field(default_factory=list)
    headers: Dict[str, str] = field(default_factory=dict)
    chain: Optional[str] = None
    timeout: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RpcSpec':
        return cls(
            uri=data['uri'],
            method=data['method'],
            params=list(data.get('params') or []),
            headers=dict(data.get('headers') or {}),
            chain=data.get('chain'),
            timeout=data.get('timeout'),
        )

@dataclass(frozen=True)
class ServiceConfig:
    instance_type: Optional[str] = None  # 'pm2' or the command name to look for
    service_id: Optional[str] = None
    http: Optional[HttpSpec] = None
    response_field: Optional[str] = None
    rpc: Optional[RpcSpec] = None
    check_disk: Union[bool, List[str], None] = None  # a list is the filesystem allow-list
    price_feed: Optional[HttpSpec] = None
    skip_cpu: bool = False
    skip_memory: bool = False
    make_support_wallet: Optional[str] = None
    command_pattern: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServiceConfig':
        """
        Build a config from the monitor's camelCase wire format.

        Example:
            {"instanceType": "pm2", "http": {"uri": "http://localhost:3000/health"},
             "skipWatch": {"memoryUsage": true}}
        """
        skip_watch = data.get('skipWatch') or {}
        check_disk = data.get('checkDisk')
        return cls(
            instance_type=data.get('instanceType'),
            service_id=data.get('serviceId'),
            http=HttpSpec.from_dict(data['http']) if data.get('http') else None,
            response_field=data.get('responseField'),
            rpc=RpcSpec.from_dict(data['rpc']) if data.get('rpc') else None,
            check_disk=list(check_disk) if isinstance(check_disk, (list, tuple)) else check_disk,
            price_feed=HttpSpec.from_dict(data['priceFeed']) if data.get('priceFeed') else None,
            skip_cpu=bool(skip_watch.get('cpuUsage', False)),
            skip_memory=bool(skip_watch.get('memoryUsage', False)),
            make_support_wallet=data.get('makeSupportWallet'),
            command_pattern=data.get('commandPattern'),
        )

@dataclass(frozen=True)
class Instance:
    name: str
    pid: Optional[int]
    cpu_fraction: float
    memory_fraction: float

@dataclass
class CollectorOutcome:
    key: str
    ok: bool
    fragment: Dict[str, Any]
    error: Optional[str] = None

@dataclass
class SubmitResult:
    submitted: bool
    callbacks: List[str] = field(default_factory=list)
    response: Any = None

@dataclass
class CallbackResult:
    name: str
    success: bool
    output: str
