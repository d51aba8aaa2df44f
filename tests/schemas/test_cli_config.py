"""Tests for CLIConfig schema and conversion to internal overrides."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from datafilter.schemas.cli import CLIConfig


def test_cli_to_internal_overrides_with_strict():
    """Test CLI config conversion with strict override."""
    cli = CLIConfig(strict=True)
    overrides = cli.to_internal_overrides()
    assert overrides == {"strict": True}


def test_cli_to_internal_overrides_with_loose():
    """An explicit False is an override too."""
    cli = CLIConfig(strict=False)
    overrides = cli.to_internal_overrides()
    assert overrides["strict"] is False


def test_cli_to_internal_overrides_with_log_level():
    """Test CLI config conversion with log_level override."""
    cli = CLIConfig(log_level="DEBUG")
    overrides = cli.to_internal_overrides()
    assert overrides["logging"]["level"] == "DEBUG"


def test_cli_to_internal_overrides_empty():
    """Unset options produce no overrides."""
    assert CLIConfig().to_internal_overrides() == {}


def test_cli_rejects_unknown_fields():
    """CLIConfig is strict about its fields."""
    with pytest.raises(PydanticValidationError):
        CLIConfig(max_depth=3)


def test_cli_rejects_bad_log_level():
    """Log levels are the standard names."""
    with pytest.raises(PydanticValidationError):
        CLIConfig(log_level="LOUD")
