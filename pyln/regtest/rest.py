"""Blocking client for LND's REST interface.

Mirrors `pyln.client.LightningRpc` closely enough that the two can sit
behind the same `RpcHandle`: one `call(method, payload)` entry point that
returns the decoded result, raising `RpcError` when the node refuses the
request.
"""
from pathlib import Path
from pyln.client import RpcError
from string import Formatter

import json
import logging
import requests


class RouteError(LookupError):
    """No REST route for a method, or a path parameter is missing."""


class LndRestRpc(object):
    # method -> (HTTP verb, path); `{name}` segments are taken from the payload
    ROUTES = {
        "getinfo": ("GET", "/v1/getinfo"),
        "newaddress": ("GET", "/v1/newaddress"),
        "connectpeer": ("POST", "/v1/peers"),
        "openchannel": ("POST", "/v1/channels"),
        "listunspent": ("POST", "/v2/wallet/utxos"),
        "listchannels": ("GET", "/v1/channels"),
        "addinvoice": ("POST", "/v1/invoices"),
        "sendpayment": ("POST", "/v1/channels/transactions"),
        "lookupinvoice": ("GET", "/v1/invoice/{r_hash_str}"),
        "listpayments": ("GET", "/v1/payments"),
    }

    def __init__(self, host, port, tls_cert, macaroon, timeout=None, logger=logging):
        """
        {tls_cert} is the path to LND's `tls.cert`, {macaroon} either the
        raw macaroon bytes or the path to a macaroon file.
        """
        self.base_url = "https://{}:{}".format(host, port)
        self.timeout = timeout
        self.logger = logger

        if not isinstance(macaroon, (bytes, bytearray)):
            macaroon = Path(macaroon).read_bytes()

        self.session = requests.Session()
        self.session.verify = str(tls_cert)
        self.session.headers["Grpc-Metadata-macaroon"] = macaroon.hex()

    def url(self, method, payload):
        """Resolve {method} to a verb and URL, consuming path parameters
        from {payload}."""
        if method not in self.ROUTES:
            raise RouteError("Unknown LND method {}".format(method))
        verb, path = self.ROUTES[method]
        names = [name for _, name, _, _ in Formatter().parse(path) if name]
        missing = [n for n in names if n not in payload]
        if missing:
            raise RouteError("Missing {} for LND method {}".format(missing, method))
        path = path.format(**{n: payload.pop(n) for n in names})
        return verb, self.base_url + path

    def call(self, method, payload=None):
        if payload is None:
            payload = {}
        # Filter out arguments that are None
        payload = {k: v for k, v in payload.items() if v is not None}

        verb, url = self.url(method, payload)
        self.logger.debug("%s %s with %r", verb, url, payload)

        if verb == "GET":
            resp = self.session.request(verb, url, params=payload, timeout=self.timeout)
        else:
            resp = self.session.request(verb, url, json=payload, timeout=self.timeout)

        try:
            body = json.loads(resp.text) if resp.text else {}
        except ValueError:
            raise ValueError("Malformed response to {}, not JSON: {!r}".format(method, resp.text[:200]))

        if not resp.ok:
            if not isinstance(body, dict):
                body = {"message": body}
            body.setdefault("http_status", resp.status_code)
            raise RpcError(method, payload, body)

        if not isinstance(body, dict):
            raise TypeError("Malformed response, response is not a dictionary %s." % body)
        return body
