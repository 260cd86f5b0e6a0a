"""Relay module for the mail relay.

Dispatches validated send requests to the configured delivery provider.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from mail_relay.relay.dispatcher import RelayDispatcher

__all__ = ["RelayDispatcher"]
