#!/usr/bin/env python3

from __future__ import annotations

import asyncio
import logging

import click

from kvcache import AsyncioScheduler, CacheEvent, create_cache


async def run_demo(ttl: float, check_period: float, wait: float) -> None:
    cache = create_cache(std_ttl=ttl, check_period=check_period, scheduler=AsyncioScheduler())

    for event in (CacheEvent.SET, CacheEvent.DEL, CacheEvent.EXPIRED):
        cache.on(event, lambda key, value, event=event: click.echo(f"[{event.value}] {key} = {value!r}"))

    cache.set("session", {"user": "alice", "roles": ["admin"]})
    cache.set("pinned", "kept forever", 0)
    click.echo(f"keys: {cache.keys()}")
    click.echo(f"expires at: {cache.get_ttl('session')}")

    try:
        await asyncio.sleep(wait)
    finally:
        cache.close()

    click.echo(f"keys: {cache.keys()}")
    click.echo(f"stats: {cache.get_stats().as_dict()}")


@click.command()
@click.option("--ttl", default=1.0, help="Lifetime of the demo entry in seconds")
@click.option("--check-period", default=0.5, help="Seconds between expiry sweeps")
@click.option("--wait", default=2.0, help="How long to keep the loop running")
@click.option("--log-level", default="INFO", help="Logging level")
def main(ttl: float, check_period: float, wait: float, log_level: str) -> int:
    logging.basicConfig(level=getattr(logging, log_level.upper()), format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(run_demo(ttl, check_period, wait))
    return 0


if __name__ == "__main__":
    main()
