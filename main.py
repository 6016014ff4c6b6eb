"""
Booking bot entry point.

Loads configuration, restores the saved ledger and runs the console
transport. The chat-network connection is a transport concern; any
transport feeds InboundEvents into ``BookingApp.router`` the same way.

Usage:
    Interactive:  python main.py
    Scripted:     python main.py --scenario booking
    Staff unit:   python main.py --unit bangu
"""

import logging

logger = logging.getLogger(__name__)


def _run_console_mode() -> None:
    """Start the console transport (no chat-network credentials required)."""
    from console_demo import main as console_main

    console_main()


if __name__ == "__main__":
    _run_console_mode()
