"""
Life Balance CLI

Commands:
- lifebalance event add/list/remove - Event log operations
- lifebalance friend add/list/remove - Friend registry operations
- lifebalance status - Balance, debt, network effect and ratio health
- lifebalance timeline - Running balance after each event
- lifebalance suggest - Ask the rating oracle for a magnitude
- lifebalance clear - Delete all events and friends
"""

__version__ = "0.1.0"
