"""
Configuration management for the Drive relay.

Contains the Pydantic settings shared by the upload relay and the token
minter, plus the validation step both run before listening.
"""
from drive_relay.config.settings import (
    ConfigValidation,
    MINTER_REQUIRED_FIELDS,
    RELAY_REQUIRED_FIELDS,
    Settings,
    get_settings,
    validate_settings,
)

__all__ = [
    "ConfigValidation",
    "MINTER_REQUIRED_FIELDS",
    "RELAY_REQUIRED_FIELDS",
    "Settings",
    "get_settings",
    "validate_settings",
]
