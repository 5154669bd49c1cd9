"""
Piazza: a time-limited, topic-tagged posting board.
"""
from piazza.__version__ import __version__
