"""Shared fixtures for integration tests."""

import pytest_asyncio

from fortnox import ClientSettings, FortnoxClient


@pytest_asyncio.fixture
async def client():
    """Client built from FORTNOX_* environment variables."""
    async with FortnoxClient.from_settings(ClientSettings.from_env()) as fortnox:
        yield fortnox
