class LnClientError(Exception):
    """Base class for everything a LightningClient raises."""


class TransportError(LnClientError):
    """The call did not complete: the connection failed or the node
    rejected the request. Never retried.
    """
    def __init__(self, method: str, payload, error):
        super().__init__(
            "RPC call failed: method: {}, payload: {}, error: {}".format(
                method, payload, error
            )
        )

        self.method = method
        self.payload = payload
        self.error = error


class ProtocolError(LnClientError):
    """The node answered with something other than what we asked for.

    Usually means the backend version does not match what the adapter
    expects.
    """
    def __init__(self, method: str, response, reason: str):
        super().__init__(
            "Unexpected response to {}: {} (response: {!r})".format(
                method, reason, response
            )
        )

        self.method = method
        self.response = response
        self.reason = reason


class DomainError(LnClientError):
    """A well-formed response lacks a field or record we require."""


class ConvergenceTimeout(LnClientError, TimeoutError):
    def __init__(self, what: str, attempts: int, delay: float):
        super().__init__(
            "Timeout while waiting for {} after {} attempts ({}s apart)".format(
                what, attempts, delay
            )
        )

        self.what = what
        self.attempts = attempts
        self.delay = delay
