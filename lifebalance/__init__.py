"""
Life Balance Engine

Event log of life events (misfortune / good fortune) with pure derivations:
debt forecast, direct balance, network effect and ratio health.
"""

__version__ = "0.1.0"
