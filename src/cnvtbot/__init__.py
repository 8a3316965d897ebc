"""
CNVTBOT - Telegram currency conversion bot backed by daily rate snapshots.
"""

__version__ = "1.0.0"
