from dataclasses import dataclass
from enum import Enum


class Backend(Enum):
    CLN = "cln"
    LND = "lnd"


class InvoiceStatus(Enum):
    """Canonical state of an invoice or an outgoing payment.

    Incoming lookups only ever produce Unpaid, Expired or Paid; outgoing
    lookups produce Unpaid, Pending, Paid or Failed.
    """
    PAID = "paid"
    PENDING = "pending"
    UNPAID = "unpaid"
    EXPIRED = "expired"
    FAILED = "failed"


class OutputStatus(Enum):
    UNCONFIRMED = "unconfirmed"
    IMMATURE = "immature"
    CONFIRMED = "confirmed"
    SPENT = "spent"


@dataclass(frozen=True)
class ConnectInfo:
    pubkey: str
    address: str
    port: int


@dataclass(frozen=True)
class Balance:
    """On-chain and channel funds, all in millisatoshi."""
    on_chain_spendable: int
    on_chain_total: int
    ln: int

    def __post_init__(self):
        if self.on_chain_spendable < 0 or self.on_chain_total < 0 or self.ln < 0:
            raise ValueError("Balance amounts must be >= 0: {}".format(self))
        if self.on_chain_spendable > self.on_chain_total:
            raise ValueError("Spendable exceeds total on-chain funds: {}".format(self))


@dataclass(frozen=True)
class OutputRecord:
    amount_msat: int
    status: OutputStatus
