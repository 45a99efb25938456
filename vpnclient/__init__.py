"""
vpn-client - Simulated VPN Connection Control
=============================================

A command-line client that simulates bringing a VPN connection up and
down, with:
- An append-only event log of every status transition
- Idempotent up/down (no-op when already in the requested state)
- Status with uptime, resolved past transient failures
- History queries by date range, status and sort order
"""

__version__ = "0.1.0"
__author__ = "vpn-client Team"
