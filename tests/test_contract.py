"""The same assertions, whichever backend is behind the client.

Nothing in here may look at the concrete client type; the only
backend-specific code is the priming of the fake nodes.
"""
from fakes import BOLT11, PAYMENT_HASH, UNKNOWN_HASH, sequence
from pyln.regtest import (
    Backend, Balance, ConvergenceTimeout, DomainError, InvoiceStatus, LightningClient,
)
import pytest
import re


def make_unsynced(node):
    info = node.fake.responses["getinfo"]
    if node.backend == Backend.CLN:
        info["warning_lightningd_sync"] = "Still loading latest blocks from bitcoind."
    else:
        info["synced_to_chain"] = False


def set_outputs(node, confirmed_sat, unconfirmed_sat):
    if node.backend == Backend.CLN:
        node.fake.responses["listfunds"] = {"channels": [], "outputs": [
            {"amount_msat": confirmed_sat * 1000, "status": "confirmed"},
            {"amount_msat": unconfirmed_sat * 1000, "status": "unconfirmed"},
        ]}
    else:
        node.fake.responses["listunspent"] = {"utxos": [
            {"amount_sat": str(confirmed_sat), "confirmations": "6"},
            {"amount_sat": str(unconfirmed_sat), "confirmations": "0"},
        ]}


def test_is_a_lightning_client(node):
    assert isinstance(node, LightningClient)


@pytest.mark.asyncio
async def test_connect_info_is_stable(node):
    assert await node.get_connect_info() == await node.get_connect_info()


@pytest.mark.asyncio
async def test_unknown_outgoing_payment_is_unpaid(node):
    assert await node.check_outgoing_payment_status(UNKNOWN_HASH) == InvoiceStatus.UNPAID


@pytest.mark.asyncio
async def test_unknown_incoming_invoice_is_an_error(node):
    with pytest.raises(DomainError):
        await node.check_incoming_payment_status(UNKNOWN_HASH)


@pytest.mark.asyncio
async def test_wait_chain_sync_immediate(node, sleeps):
    await node.wait_chain_sync()
    assert sleeps == []


@pytest.mark.asyncio
async def test_wait_chain_sync_timeout(node, sleeps):
    make_unsynced(node)
    with pytest.raises(ConvergenceTimeout):
        await node.wait_chain_sync()
    assert len(sleeps) == 100
    assert sum(sleeps) == 200


@pytest.mark.asyncio
async def test_invoice_pay_settle(node, peer):
    bolt11 = await node.create_invoice(amount_sat=1000)
    assert bolt11 == BOLT11

    preimage = await peer.pay_invoice(bolt11)
    assert re.fullmatch(r"[0-9a-f]{64}", preimage)

    assert await node.check_incoming_payment_status(PAYMENT_HASH) == InvoiceStatus.PAID


@pytest.mark.asyncio
async def test_open_channel_then_wait_active(node, peer, sleeps):
    info = await peer.get_connect_info()
    await node.connect_peer(info.pubkey, info.address, info.port)

    node.fake.responses["listchannels"] = sequence(
        {"channels": [{"active": False}]},
        {"channels": [{"active": False}]},
        {"channels": [{"active": True}]},
    )
    channel_id = await node.open_channel(amount_sat=100000, peer_id=info.pubkey)
    assert channel_id
    await node.wait_channels_active()
    assert len(sleeps) == 2


@pytest.mark.asyncio
async def test_channel_never_active(node, sleeps):
    node.fake.responses["listchannels"] = {"channels": [{"active": True}, {"active": False}]}
    with pytest.raises(ConvergenceTimeout):
        await node.wait_channels_active()
    assert len(sleeps) == 100


@pytest.mark.asyncio
async def test_no_channels_is_active(node, sleeps):
    await node.wait_channels_active()
    assert sleeps == []


@pytest.mark.asyncio
async def test_balance_in_msat(node):
    set_outputs(node, confirmed_sat=500, unconfirmed_sat=300)
    assert await node.balance() == Balance(on_chain_spendable=500000, on_chain_total=800000, ln=0)


@pytest.mark.asyncio
async def test_new_address(node):
    assert (await node.get_new_onchain_address()).startswith("bcrt1")
