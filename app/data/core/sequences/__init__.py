"""
Named sequence counters for transaction numbering
"""

from app.data.core.sequences.sequence_counter import SequenceCounter
from app.data.core.sequences.sequence_generator import SequenceGenerator

__all__ = [
    'SequenceCounter',
    'SequenceGenerator',
]
