from .client import LightningClient
from .cln import ClnClient
from .errors import LnClientError, TransportError, ProtocolError, DomainError, ConvergenceTimeout
from .lnd import LndClient
from .poll import wait_until, POLL_ATTEMPTS, POLL_DELAY
from .rest import LndRestRpc, RouteError
from .types import Backend, Balance, ConnectInfo, InvoiceStatus, OutputStatus, OutputRecord
from .utils import sat_to_msat

__version__ = "0.1.0"

__all__ = [
    "LightningClient",
    "ClnClient",
    "LndClient",
    "LndRestRpc",
    "RouteError",
    "LnClientError",
    "TransportError",
    "ProtocolError",
    "DomainError",
    "ConvergenceTimeout",
    "wait_until",
    "POLL_ATTEMPTS",
    "POLL_DELAY",
    "Backend",
    "Balance",
    "ConnectInfo",
    "InvoiceStatus",
    "OutputStatus",
    "OutputRecord",
    "sat_to_msat",
    "__version__",
]
