from __future__ import annotations

import asyncio

from pipekit import ato_list, tee, to_list_returning, zip_with
from pipekit import prelude as P


async def fetch_price(symbol: str) -> float:
    await asyncio.sleep(0)
    return {"ACME": 12.5, "INIT": 3.0}.get(symbol, 0.0)


def audit_and_total(quantities: list[int], prices: list[float]) -> tuple[list[float], None]:
    audit: list[float] = []
    lines = zip_with(lambda q, p: q * p, P.each(quantities), P.each(prices))
    totals, result = to_list_returning(lines | tee(P.consume_with(audit.append)))
    assert audit == totals
    return totals, result


if __name__ == "__main__":
    print(audit_and_total([1, 2, 3], [10.0, 20.0]))
    print(asyncio.run(ato_list(P.each(["ACME", "INIT"]) | P.map_m(fetch_price))))
