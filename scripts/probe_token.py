#!/usr/bin/env python3
"""Probe the instance metadata identity endpoint and report token availability."""

import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

from msitoken import DEFAULT_METADATA_ENDPOINT, ManagedIdentityTokenProvider


async def main() -> None:
    """Main entry point."""
    load_dotenv()

    if os.getenv("MSI_DEBUG"):
        logging.basicConfig(level=logging.DEBUG)

    object_id = sys.argv[1] if len(sys.argv) > 1 else os.getenv("MSI_OBJECT_ID") or None

    async with ManagedIdentityTokenProvider(
        endpoint=os.getenv("MSI_ENDPOINT", DEFAULT_METADATA_ENDPOINT),
        retry_timeout=int(os.getenv("MSI_RETRY_TIMEOUT", "0")),
    ) as provider:
        token = await provider.acquire_token(object_id)

    print(json.dumps({"tokenAvailable": token is not None, "objectId": object_id}))
    if token is None:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
