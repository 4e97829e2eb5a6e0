from functools import partial
from pyln.client import RpcError
from pyln.regtest.errors import ProtocolError, TransportError

import asyncio
import jsonschema  # type: ignore
import logging


class RpcHandle(object):
    """One connection to a node, used by one call at a time.

    Wraps a blocking transport (anything with a `call(method, payload)`
    method, like `LightningRpc`) for use from asyncio. The lock is held
    from sending the request until the response has been read, because
    neither transport copes with interleaved requests. The blocking call
    itself runs in `executor` so the event loop keeps serving other
    tasks while we wait on the node. A caller cancelled mid-call (say by
    `asyncio.wait_for`) still holds the lock until the node has answered.

    If `schemas` maps a method name to a JSON schema, every response to
    that method is validated against it and a mismatch becomes a
    `ProtocolError`.
    """

    def __init__(self, rpc, schemas=None, executor=None, logger=logging):
        self.rpc = rpc
        self.executor = executor
        self.logger = logger
        self.lock = asyncio.Lock()
        self.validators = {
            method: jsonschema.Draft7Validator(schema)
            for method, schema in (schemas or {}).items()
        }

    async def call(self, method, payload=None):
        self.logger.debug("Calling %s with payload %r", method, payload)
        loop = asyncio.get_running_loop()

        async with self.lock:
            fut = loop.run_in_executor(
                self.executor,
                partial(self.rpc.call, method, payload),
            )
            try:
                res = await asyncio.shield(fut)
            except asyncio.CancelledError:
                # The thread cannot be interrupted; hold the lock until
                # the node has answered, then drop the answer.
                self.logger.debug("Call to %s cancelled, draining the response", method)
                await asyncio.wait([fut])
                if not fut.cancelled():
                    fut.exception()
                raise
            except RpcError as e:
                raise TransportError(method, payload, e.error) from e
            except OSError as e:
                raise TransportError(method, payload, str(e)) from e
            except (ValueError, TypeError) as e:
                # Raised by the transports for replies they cannot parse
                raise ProtocolError(method, None, str(e)) from e

        self.logger.debug("Received response for %s call: %r", method, res)
        self.check(method, res)
        return res

    def check(self, method, res):
        validator = self.validators.get(method)
        if validator is None:
            return
        try:
            validator.validate(res)
        except jsonschema.ValidationError as e:
            raise ProtocolError(method, res, e.message) from e
