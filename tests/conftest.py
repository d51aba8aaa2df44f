"""Root-level pytest fixtures for the datafilter test suite.

Provides shared configuration and filter fixtures following the
Pydantic-based configuration architecture. Tests build filters from these
fixtures instead of relying on the process-wide default filter.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from datafilter import DataFilter
from datafilter.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Configuration with all defaults.

    Use this as the base for all test configs.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_strict_config(make_config):
    ...     config = make_config(strict=True)
    ...     assert config.strict is True
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Filter Fixtures
# =============================================================================

@pytest.fixture
def data_filter(internal_config):
    """Loose-mode filter with a private registry."""
    return DataFilter(internal_config)


@pytest.fixture
def make_filter(make_config):
    """Factory fixture for filters built from custom configs.

    Examples
    --------
    >>> def test_strict_filter(make_filter):
    ...     data_filter = make_filter(strict=True)
    ...     assert data_filter.process(3, "int") == 3
    """
    def _make(**user_overrides):
        return DataFilter(make_config(**user_overrides))

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)
