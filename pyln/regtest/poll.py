from asyncio import sleep
from pyln.regtest.errors import ConvergenceTimeout

import logging


POLL_ATTEMPTS = 100
POLL_DELAY = 2


async def wait_until(check, predicate, attempts=POLL_ATTEMPTS, delay=POLL_DELAY,
                     what=None, logger=logging):
    """Await `check()` until `predicate` holds for its result.

    Makes at most `attempts` calls, sleeping `delay` seconds after every
    one that does not satisfy `predicate`, so the worst case is
    `attempts * delay` seconds. Only the calling task sleeps.

    Returns the first satisfying result, or raises `ConvergenceTimeout`
    once the attempts are used up. Exceptions from `check` are not
    retried.
    """
    if what is None:
        what = getattr(predicate, '__name__', repr(predicate))

    for attempt in range(1, attempts + 1):
        result = await check()
        if predicate(result):
            logger.debug("Done waiting for %s after %d attempt(s)", what, attempt)
            return result
        logger.debug("Still waiting for %s (attempt %d/%d)", what, attempt, attempts)
        await sleep(delay)

    raise ConvergenceTimeout(what, attempts, delay)
