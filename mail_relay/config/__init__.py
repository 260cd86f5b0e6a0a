"""Configuration module for the mail relay.

Loads and validates relay settings from environment variables or .env file.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from mail_relay.config.settings import RelayConfig

__all__ = ["RelayConfig"]
