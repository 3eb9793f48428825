"""Fixtures for storefront integration tests.

A storefront here runs the whole flow: seeded catalogue, cart commands,
checkout timers, the fake settlement gateway and the recording channel.
"""

import pytest


@pytest.fixture()
def config():
    from storefront.settings import Settings

    return Settings(
        SETTLEMENT_DELAY=3.0,
        AUTO_CLEAR_DELAY=5.0,
        WALLET_ADDRESS="1IntegrationWallet",
    )


@pytest.fixture()
def shop(timer, gateway, channel, config):
    from storefront.app import Storefront

    storefront = Storefront(timer=timer, gateway=gateway, channel=channel, config=config, session_id="browser-1")
    yield storefront
    storefront.close()
