"""AurumTrack - live gold/silver prices and next-session gap prediction for Indian ETF proxies.

Usage:
    import asyncio
    from aurumtrack import AurumTrackClient

    async def main():
        async with AurumTrackClient() as client:
            await client.service.refresh()
            view = client.service.build_view(client.calendar.local_now())

    asyncio.run(main())
"""

from aurumtrack.core.client import AurumTrackClient
from aurumtrack.core.config import AurumTrackConfig, ConfigManager
from aurumtrack.core.models import GatingState, Quote, SessionState

__version__ = "0.1.0"

__all__ = [
    "AurumTrackClient",
    "AurumTrackConfig",
    "ConfigManager",
    "GatingState",
    "Quote",
    "SessionState",
    "__version__",
]
