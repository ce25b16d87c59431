#!/usr/bin/env python3
"""
Clear cached API responses from Redis by key pattern.

Useful after a bulk import or a manual database fix, when the services'
own invalidation never ran. Patterns use Redis glob syntax, e.g.
``store:*`` or ``news:all:*``.
"""

import argparse
import asyncio
import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from shared.caching import CacheAccessor, RedisStore


async def clear(*, redis_url: str, patterns: List[str], namespace: Optional[str]) -> Dict[str, int]:
    """Clear each pattern and return keys removed per pattern."""
    store = RedisStore.from_url(redis_url)
    accessor = CacheAccessor(store, namespace=namespace)
    try:
        if not await store.ping():
            raise SystemExit(f"Redis at {redis_url} is not reachable")
        return {pattern: await accessor.clear_cache(pattern) for pattern in patterns}
    finally:
        await store.close()


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clear cached API responses by key pattern.")
    parser.add_argument("patterns", nargs="+", help="Glob patterns to clear, e.g. 'store:*'")
    parser.add_argument("--redis-url", default=os.getenv("COMMUNITY_REDIS_URL", "redis://localhost:6379/0"), help="Redis connection URL")
    parser.add_argument("--namespace", default=os.getenv("COMMUNITY_CACHE_KEY_PREFIX"), help="Key namespace the services were configured with")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write JSON summary")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    summary = asyncio.run(clear(redis_url=args.redis_url, patterns=args.patterns, namespace=args.namespace))
    payload = json.dumps(summary, indent=2, sort_keys=True)
    print(payload)
    if args.output:
        args.output.write_text(payload)


if __name__ == "__main__":
    main()
