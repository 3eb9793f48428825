"""Settlement gateway factory.

Provides get_gateway() / set_gateway() to swap implementations. The fake
gateway is the default: the storefront never settles real payments.
"""

from payments.gateway.fake_adapter import FakeSettlementGateway
from payments.gateway.port import SettlementGateway

_current_gateway: SettlementGateway | None = None


def get_gateway() -> SettlementGateway:
    """Return the current settlement gateway. Defaults to FakeSettlementGateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeSettlementGateway()
    return _current_gateway


def set_gateway(gateway: SettlementGateway) -> None:
    """Override the active settlement gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
