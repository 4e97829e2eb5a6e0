"""Shapes of the responses the adapters rely on.

These only pin down the keys that tell one kind of response from another,
and the types of the values we read. Fields whose absence is a normal
(if unwelcome) answer, such as `binding` in `getinfo` or `bech32` in
`newaddr`, stay optional here so the adapters can report them as domain
errors instead.
"""

AMOUNT = {"type": ["integer", "string"]}
# LND's REST gateway renders 64-bit integers as strings
INT64 = {"type": ["integer", "string"], "pattern": "^-?[0-9]+$"}


def _obj(required=(), **properties):
    return {
        "type": "object",
        "required": list(required),
        "properties": properties,
    }


def _list_of(item):
    return {"type": "array", "items": item}


CLN_SCHEMAS = {
    "getinfo": _obj(
        ["id"],
        id={"type": "string"},
        binding=_list_of(_obj(address={"type": "string"}, port={"type": "integer"})),
        warning_bitcoind_sync={"type": "string"},
        warning_lightningd_sync={"type": "string"},
    ),
    "newaddr": _obj(bech32={"type": "string"}),
    "connect": _obj(["id"], id={"type": "string"}),
    "fundchannel": _obj(["channel_id"], channel_id={"type": "string"}),
    "listfunds": _obj(
        ["outputs", "channels"],
        outputs=_list_of(_obj(["amount_msat", "status"], amount_msat=AMOUNT, status={"type": "string"})),
        channels=_list_of(_obj(["our_amount_msat"], our_amount_msat=AMOUNT)),
    ),
    "invoice": _obj(["bolt11"], bolt11={"type": "string"}),
    "pay": _obj(["payment_preimage"], payment_preimage={"type": "string", "pattern": "^[0-9a-fA-F]{64}$"}),
    "listchannels": _obj(
        ["channels"],
        channels=_list_of(_obj(["active"], active={"type": "boolean"})),
    ),
    "listinvoices": _obj(
        ["invoices"],
        invoices=_list_of(_obj(["status"], status={"type": "string"})),
    ),
    "listpays": _obj(
        ["pays"],
        pays=_list_of(_obj(["status"], status={"type": "string"})),
    ),
}


LND_SCHEMAS = {
    "getinfo": _obj(
        ["identity_pubkey"],
        identity_pubkey={"type": "string"},
        uris=_list_of({"type": "string"}),
        synced_to_chain={"type": "boolean"},
    ),
    "newaddress": _obj(address={"type": "string"}),
    "connectpeer": {"type": "object"},
    "openchannel": {
        "type": "object",
        "properties": {
            "funding_txid_bytes": {"type": "string"},
            "funding_txid_str": {"type": "string"},
            "output_index": {"type": "integer"},
        },
        "anyOf": [
            {"required": ["funding_txid_bytes"]},
            {"required": ["funding_txid_str"]},
        ],
    },
    "listunspent": _obj(
        ["utxos"],
        utxos=_list_of(_obj(["amount_sat"], amount_sat=INT64, confirmations=INT64)),
    ),
    "listchannels": _obj(
        ["channels"],
        channels=_list_of(_obj(
            local_balance=INT64,
            active={"type": "boolean"},
        )),
    ),
    "addinvoice": _obj(["payment_request"], payment_request={"type": "string"}),
    "sendpayment": _obj(
        payment_error={"type": "string"},
        payment_preimage={"type": "string"},
    ),
    "lookupinvoice": _obj(["state"], state={"type": "string"}),
    "listpayments": _obj(
        ["payments"],
        payments=_list_of(_obj(
            ["payment_hash", "status"],
            payment_hash={"type": "string"},
            status={"type": "string"},
        )),
    ),
}
