"""Pytest configuration and fixtures."""

import pytest
import structlog

from staple_sim.models.pool import PoolToken, Vtp
from tests.helpers import FEE_ONE_PERCENT, make_token, make_vtp


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog.configure() done by a test (e.g. the CLI)."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def vtp() -> Vtp:
    """VTP with n=10, p=12%, pa=1."""
    return make_vtp()


@pytest.fixture
def balanced_token() -> PoolToken:
    """Balanced 18-decimal token (assets == liability == 1000), no fees."""
    return make_token()


@pytest.fixture
def fee_token() -> PoolToken:
    """Balanced 18-decimal token with a 1% swap-out fee."""
    return make_token(swap_fee_out=FEE_ONE_PERCENT)
