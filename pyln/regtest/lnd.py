from base64 import b64decode, b64encode
from pathlib import Path
from pyln.regtest.errors import DomainError, ProtocolError, TransportError
from pyln.regtest.handle import RpcHandle
from pyln.regtest.normalize import aggregate_balance, first_outgoing_status, incoming_status
from pyln.regtest.poll import wait_until
from pyln.regtest.rest import LndRestRpc
from pyln.regtest.schemas import LND_SCHEMAS
from pyln.regtest.types import Backend, ConnectInfo, OutputStatus
from pyln.regtest.utils import TEST_NETWORK, only_first, parse_pubkey, sat_to_msat

import binascii
import logging


# gRPC status code LND uses for unknown invoices
GRPC_NOT_FOUND = 5
MAX_CONFS = 2**31 - 1


def is_synced(info):
    return info.get('synced_to_chain', False)


def all_channels_active(res):
    return all(c.get('active', False) for c in res['channels'])


def is_not_found(error):
    if not isinstance(error, dict):
        return False
    return error.get('code') == GRPC_NOT_FOUND or error.get('http_status') == 404


def parse_uri(uri):
    """Split `pubkey@host:port`, as found in `getinfo.uris`."""
    pubkey, sep, hostport = uri.partition('@')
    host, sep2, port = hostport.rpartition(':')
    if not sep or not sep2 or not host or not port.isdigit():
        raise DomainError("Malformed LND uri {!r}".format(uri))
    return pubkey, host.strip('[]'), int(port)


def b64_bytes(method, value):
    try:
        return b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise ProtocolError(method, value, "not base64")


class LndClient(object):
    """Drive an LND node over its REST interface."""
    backend = Backend.LND

    def __init__(self, host=None, port=None, tls_cert=None, macaroon=None,
                 rpc=None, executor=None, logger=None):
        if logger is None:
            logger = logging.getLogger("LndClient")
        if rpc is None:
            if host is None or port is None:
                raise ValueError("Need either host and port, or rpc")
            rpc = LndRestRpc(host, port, tls_cert, macaroon, logger=logger)
        self.logger = logger
        self.handle = RpcHandle(rpc, schemas=LND_SCHEMAS, executor=executor, logger=logger)

    @classmethod
    def from_lnd_dir(cls, lnd_dir, port, host="localhost", network=TEST_NETWORK, **kwargs):
        lnd_dir = Path(lnd_dir)
        return cls(
            host=host,
            port=port,
            tls_cert=lnd_dir / "tls.cert",
            macaroon=lnd_dir / "data" / "chain" / "bitcoin" / network / "admin.macaroon",
            **kwargs
        )

    async def get_info(self):
        return await self.handle.call("getinfo")

    async def list_channels(self):
        res = await self.handle.call("listchannels")
        return res['channels']

    async def get_connect_info(self):
        info = await self.get_info()

        uri = only_first(info.get('uris'))
        if uri is None:
            raise DomainError("LND node {} advertises no uris".format(info['identity_pubkey']))
        _, host, port = parse_uri(uri)

        return ConnectInfo(
            pubkey=info['identity_pubkey'],
            address=host,
            port=port,
        )

    async def get_new_onchain_address(self):
        res = await self.handle.call("newaddress", {"type": "WITNESS_PUBKEY_HASH"})
        if not res.get('address'):
            raise DomainError("LND newaddress returned no address: {}".format(res))
        return res['address']

    async def connect_peer(self, pubkey, host, port):
        await self.handle.call("connectpeer", {
            "addr": {
                "pubkey": pubkey,
                "host": "{}:{}".format(host, port),
            },
            "perm": False,
            "timeout": "60",
        })
        self.logger.debug("LND connected to peer: %s", pubkey)

    async def open_channel(self, amount_sat, peer_id, push_amount=None):
        node_pubkey = parse_pubkey(peer_id)
        res = await self.handle.call("openchannel", {
            "node_pubkey": b64encode(node_pubkey).decode('ASCII'),
            "local_funding_amount": str(amount_sat),
            "push_sat": str(push_amount or 0),
        })

        if res.get('funding_txid_str'):
            txid = res['funding_txid_str']
        else:
            # Raw txid bytes are in internal (reversed) byte order
            txid = b64_bytes("openchannel", res['funding_txid_bytes'])[::-1].hex()
        channel_point = "{}:{}".format(txid, res.get('output_index', 0))

        self.logger.info("LND opened channel: %s", channel_point)
        return channel_point

    async def balance(self):
        utxos = await self.handle.call("listunspent", {
            "min_confs": 0,
            "max_confs": MAX_CONFS,
        })
        channels = await self.list_channels()

        def outputs():
            for u in utxos['utxos']:
                if int(u.get('confirmations', 0)) > 0:
                    status = OutputStatus.CONFIRMED
                else:
                    status = OutputStatus.UNCONFIRMED
                yield sat_to_msat(int(u['amount_sat'])), status

        return aggregate_balance(
            outputs(),
            (sat_to_msat(int(c.get('local_balance', 0))) for c in channels),
            method="listunspent",
            channel_method="listchannels",
        )

    async def create_invoice(self, amount_sat=None):
        if amount_sat is None:
            # LND treats a missing value as "any amount"
            payload = {}
        elif amount_sat == 0:
            raise ValueError("LND cannot create a zero-amount invoice; use None for any amount")
        else:
            payload = {"value_msat": str(sat_to_msat(amount_sat))}

        res = await self.handle.call("addinvoice", payload)
        return res['payment_request']

    async def pay_invoice(self, bolt11):
        payload = {"payment_request": bolt11}
        res = await self.handle.call("sendpayment", payload)

        if res.get('payment_error'):
            raise TransportError("sendpayment", payload, res['payment_error'])
        preimage = b64_bytes("sendpayment", res.get('payment_preimage', '')).hex()
        if len(preimage) != 64:
            raise ProtocolError("sendpayment", res, "missing payment preimage")
        return preimage

    async def wait_chain_sync(self):
        await wait_until(self.get_info, is_synced, what="LND chain sync", logger=self.logger)
        self.logger.info("LND completed chain sync")

    async def wait_channels_active(self):
        await wait_until(
            lambda: self.handle.call("listchannels"),
            all_channels_active,
            what="LND channels to become active",
            logger=self.logger,
        )
        self.logger.info("All LND channels active")

    async def check_incoming_payment_status(self, payment_hash):
        try:
            res = await self.handle.call("lookupinvoice", {"r_hash_str": payment_hash})
        except TransportError as e:
            if is_not_found(e.error):
                raise DomainError("Could not find invoice with payment_hash {}".format(payment_hash)) from e
            raise
        return incoming_status(res['state'], "lookupinvoice")

    async def check_outgoing_payment_status(self, payment_hash):
        res = await self.handle.call("listpayments", {"include_incomplete": "true"})
        return first_outgoing_status(
            (p['status'] for p in res['payments'] if p['payment_hash'].lower() == payment_hash.lower()),
            "listpayments",
        )
