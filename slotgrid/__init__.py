"""
slotgrid - lays out a calendar day's availability as a stack of positioned slots.
"""

__version__ = "0.1.0"
