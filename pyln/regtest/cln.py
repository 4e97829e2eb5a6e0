from pathlib import Path
from pyln.client import LightningRpc
from pyln.regtest.errors import DomainError
from pyln.regtest.handle import RpcHandle
from pyln.regtest.normalize import aggregate_balance, first_outgoing_status, incoming_status
from pyln.regtest.poll import wait_until
from pyln.regtest.schemas import CLN_SCHEMAS
from pyln.regtest.types import Backend, ConnectInfo
from pyln.regtest.utils import TEST_NETWORK, only_first, parse_pubkey, sat_to_msat

import logging
import uuid


def is_synced(info):
    return 'warning_bitcoind_sync' not in info and 'warning_lightningd_sync' not in info


def all_channels_active(res):
    return all(c['active'] for c in res['channels'])


class ClnClient(object):
    """Drive a Core Lightning node over its JSON-RPC socket.

    Every call goes through a single `LightningRpc`, serialized by an
    `RpcHandle`.
    """
    backend = Backend.CLN

    def __init__(self, rpc_path=None, rpc=None, executor=None, logger=None):
        if logger is None:
            logger = logging.getLogger("ClnClient")
        if rpc is None:
            if rpc_path is None:
                raise ValueError("Need either rpc_path or rpc")
            rpc = LightningRpc(str(rpc_path), logger=logger)
        self.rpc_path = rpc_path
        self.logger = logger
        self.handle = RpcHandle(rpc, schemas=CLN_SCHEMAS, executor=executor, logger=logger)

    @classmethod
    def from_lightning_dir(cls, lightning_dir, network=TEST_NETWORK, **kwargs):
        rpc_path = Path(lightning_dir) / network / "lightning-rpc"
        logging.debug("Using CLN rpc socket at %s", rpc_path)
        return cls(rpc_path=rpc_path, **kwargs)

    async def get_info(self):
        return await self.handle.call("getinfo")

    async def list_channels(self):
        res = await self.handle.call("listchannels")
        return res['channels']

    async def get_connect_info(self):
        info = await self.get_info()

        binding = only_first(info.get('binding'))
        if binding is None:
            raise DomainError("CLN node {} has no binding".format(info['id']))
        if binding.get('address') is None:
            raise DomainError("CLN binding has no address: {}".format(binding))
        if binding.get('port') is None:
            raise DomainError("CLN binding has no port: {}".format(binding))

        return ConnectInfo(
            pubkey=info['id'],
            address=binding['address'],
            port=binding['port'],
        )

    async def get_new_onchain_address(self):
        res = await self.handle.call("newaddr")
        if not res.get('bech32'):
            raise DomainError("CLN newaddr returned no bech32 address: {}".format(res))
        return res['bech32']

    async def connect_peer(self, pubkey, host, port):
        res = await self.handle.call("connect", {
            "id": pubkey,
            "host": host,
            "port": port,
        })
        self.logger.debug("CLN connected to peer: %s", res['id'])

    async def open_channel(self, amount_sat, peer_id, push_amount=None):
        parse_pubkey(peer_id)
        res = await self.handle.call("fundchannel", {
            "id": peer_id,
            # Plain integers are satoshis to fundchannel
            "amount": amount_sat,
            "push_msat": sat_to_msat(push_amount) if push_amount is not None else None,
        })
        self.logger.info("CLN opened channel: %s", res['channel_id'])
        return res['channel_id']

    async def balance(self):
        res = await self.handle.call("listfunds")
        return aggregate_balance(
            ((o['amount_msat'], o['status']) for o in res['outputs']),
            (c['our_amount_msat'] for c in res['channels']),
            method="listfunds",
        )

    async def create_invoice(self, amount_sat=None):
        res = await self.handle.call("invoice", {
            "amount_msat": "any" if amount_sat is None else sat_to_msat(amount_sat),
            "label": str(uuid.uuid4()),
            "description": "",
        })
        return res['bolt11']

    async def pay_invoice(self, bolt11):
        res = await self.handle.call("pay", {"bolt11": bolt11})
        return res['payment_preimage'].lower()

    async def wait_chain_sync(self):
        await wait_until(self.get_info, is_synced, what="CLN chain sync", logger=self.logger)
        self.logger.info("CLN completed chain sync")

    async def wait_channels_active(self):
        await wait_until(
            lambda: self.handle.call("listchannels"),
            all_channels_active,
            what="CLN channels to become active",
            logger=self.logger,
        )
        self.logger.info("All CLN channels active")

    async def check_incoming_payment_status(self, payment_hash):
        res = await self.handle.call("listinvoices", {"payment_hash": payment_hash})
        invoice = only_first(res['invoices'])
        if invoice is None:
            raise DomainError("Could not find invoice with payment_hash {}".format(payment_hash))
        return incoming_status(invoice['status'], "listinvoices")

    async def check_outgoing_payment_status(self, payment_hash):
        res = await self.handle.call("listpays", {"payment_hash": payment_hash})
        return first_outgoing_status((p['status'] for p in res['pays']), "listpays")
