"""Map backend representations onto the canonical model.

Both backends report invoice and payment states with their own
vocabularies, and amounts in their own units. The functions here are the
only place those vocabularies are known; everything else deals in
`InvoiceStatus`, `OutputStatus` and integer millisatoshi.

Unknown values are never mapped to a default. A status we do not
recognize means the backend speaks a dialect we were not written for, and
guessing would make a test pass or fail for the wrong reason.
"""
from pyln.client import Millisatoshi
from pyln.regtest.errors import ProtocolError
from pyln.regtest.types import Balance, InvoiceStatus, OutputRecord, OutputStatus
from typing import Iterable, Optional, Tuple, Union


INCOMING_STATUS = {
    # CLN `listinvoices`
    'unpaid': InvoiceStatus.UNPAID,
    'expired': InvoiceStatus.EXPIRED,
    'paid': InvoiceStatus.PAID,
    # LND `lookupinvoice`
    'OPEN': InvoiceStatus.UNPAID,
    'ACCEPTED': InvoiceStatus.UNPAID,
    'SETTLED': InvoiceStatus.PAID,
    'CANCELED': InvoiceStatus.EXPIRED,
}

OUTGOING_STATUS = {
    # CLN `listpays`
    'complete': InvoiceStatus.PAID,
    'pending': InvoiceStatus.PENDING,
    'failed': InvoiceStatus.FAILED,
    # LND `listpayments`
    'SUCCEEDED': InvoiceStatus.PAID,
    'IN_FLIGHT': InvoiceStatus.PENDING,
    'INITIATED': InvoiceStatus.PENDING,
    'FAILED': InvoiceStatus.FAILED,
}


def incoming_status(raw: str, method: str = 'listinvoices') -> InvoiceStatus:
    try:
        return INCOMING_STATUS[raw]
    except (KeyError, TypeError):
        raise ProtocolError(method, raw, "unknown invoice status {!r}".format(raw))


def outgoing_status(raw: str, method: str = 'listpays') -> InvoiceStatus:
    try:
        return OUTGOING_STATUS[raw]
    except (KeyError, TypeError):
        raise ProtocolError(method, raw, "unknown payment status {!r}".format(raw))


def first_outgoing_status(statuses: Iterable[str], method: str = 'listpays') -> InvoiceStatus:
    """Status of the first matching payment record.

    No record at all means the payment was never attempted, which is
    reported as Unpaid rather than an error: pollers waiting on a payment
    treat "not there yet" and "there but unsettled" the same way.
    """
    for raw in statuses:
        return outgoing_status(raw, method)
    return InvoiceStatus.UNPAID


def to_msat(amount: Union[int, str, Millisatoshi], method: str = 'balance') -> int:
    """Integer millisatoshi from an int or an "...msat" style string."""
    if isinstance(amount, bool) or not isinstance(amount, (int, str, Millisatoshi)):
        raise ProtocolError(method, amount, "amount is not a number of msat")
    try:
        return int(Millisatoshi(amount))
    except (TypeError, ValueError) as e:
        raise ProtocolError(method, amount, str(e))


def output_record(amount, status, method: str = 'balance') -> OutputRecord:
    if isinstance(status, OutputStatus):
        parsed = status
    else:
        try:
            parsed = OutputStatus(status)
        except ValueError:
            raise ProtocolError(method, status, "unknown output status {!r}".format(status))
    return OutputRecord(amount_msat=to_msat(amount, method), status=parsed)


def aggregate_balance(outputs: Iterable[Tuple[object, object]],
                      channel_amounts: Iterable[object],
                      method: Optional[str] = 'balance',
                      channel_method: Optional[str] = None) -> Balance:
    """Reduce output records and channel funds to a `Balance`.

    `outputs` yields `(amount, status)` pairs and `channel_amounts` our
    side of each channel. Confirmed outputs are spendable; unconfirmed and
    immature ones only count towards the total; spent ones are ignored.
    Errors name `method`, or `channel_method` for a bad channel amount
    when the two come from different calls.

    A single malformed record fails the whole aggregation: a balance that
    silently lost some funds is worse than no balance at all.
    """
    on_chain_total = 0
    on_chain_spendable = 0
    ln = 0

    for amount, status in outputs:
        record = output_record(amount, status, method)
        if record.status == OutputStatus.SPENT:
            continue
        on_chain_total += record.amount_msat
        if record.status == OutputStatus.CONFIRMED:
            on_chain_spendable += record.amount_msat

    for amount in channel_amounts:
        ln += to_msat(amount, channel_method or method)

    return Balance(
        on_chain_spendable=on_chain_spendable,
        on_chain_total=on_chain_total,
        ln=ln,
    )
