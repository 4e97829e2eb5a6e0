"""
The contract test code uses to drive a node, whatever its implementation.

Both `ClnClient` and `LndClient` satisfy it structurally; neither inherits
from it. Tests should only ever talk to a `LightningClient`, so the same
test runs unchanged against either backend.
"""
from pyln.regtest.types import Backend, Balance, ConnectInfo, InvoiceStatus
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class LightningClient(Protocol):

    backend: Backend

    async def get_connect_info(self) -> ConnectInfo:
        """
        How a peer reaches this node: its pubkey and first listening address.
        """
        ...

    async def get_new_onchain_address(self) -> str:
        ...

    async def connect_peer(self, pubkey: str, host: str, port: int) -> None:
        ...

    async def open_channel(self, amount_sat: int, peer_id: str,
                           push_amount: Optional[int] = None) -> str:
        """
        Fund a channel of {amount_sat} satoshis to the already connected
        {peer_id}, pushing {push_amount} satoshis to them. Returns the
        channel identifier.
        """
        ...

    async def balance(self) -> Balance:
        ...

    async def create_invoice(self, amount_sat: Optional[int] = None) -> str:
        """
        Create a bolt11 invoice for {amount_sat} satoshis, or for any
        amount if {amount_sat} is None.
        """
        ...

    async def pay_invoice(self, bolt11: str) -> str:
        """
        Pay {bolt11} and return the hex-encoded payment preimage.
        """
        ...

    async def wait_chain_sync(self) -> None:
        ...

    async def wait_channels_active(self) -> None:
        ...

    async def check_incoming_payment_status(self, payment_hash: str) -> InvoiceStatus:
        """
        Status of the invoice we issued with {payment_hash}. The invoice
        must exist.
        """
        ...

    async def check_outgoing_payment_status(self, payment_hash: str) -> InvoiceStatus:
        """
        Status of our payment to {payment_hash}; Unpaid if we never tried.
        """
        ...
