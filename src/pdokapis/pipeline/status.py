"""Registry liveness checks: one known-good query per registry."""

import asyncio
import logging

from pdokapis.core.errors import PdokError
from pdokapis.retrieval.bag import BagClient
from pdokapis.retrieval.brk import BrkClient
from pdokapis.retrieval.locatieserver import LookupClient

logger = logging.getLogger(__name__)


async def _check(name: str, call) -> str:
    try:
        ok = await call
    except PdokError as e:
        logger.warning("%s status check failed: %s", name, e, extra={"registry": name})
        return f"error: {e}"
    return "ok" if ok else "error: unexpected result"


async def check_registries(
    lookup: LookupClient, brk: BrkClient, bag: BagClient,
) -> dict[str, str]:
    """Query every registry once, concurrently.

    Returns {"locatieserver": ..., "brk": ..., "bag": ...} with "ok" or an error string.
    """
    async def lookup_ok() -> bool:
        return bool(await lookup.lookup_tg_office())

    async def brk_ok() -> bool:
        return bool(await brk.get_brk_status())

    names = ("locatieserver", "brk", "bag")
    results = await asyncio.gather(
        _check("locatieserver", lookup_ok()),
        _check("brk", brk_ok()),
        _check("bag", bag.get_bag_status()),
    )
    return dict(zip(names, results))
