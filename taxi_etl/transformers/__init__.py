"""Record transformations applied between extraction and loading"""

from .deduplicator import Deduplicator, DedupResult, split_duplicates
from .validator import RecordValidator, ValidationResult
from .normalizer import RecordNormalizer, normalize_flag, civil_to_utc

__all__ = [
    'Deduplicator', 'DedupResult', 'split_duplicates',
    'RecordValidator', 'ValidationResult',
    'RecordNormalizer', 'normalize_flag', 'civil_to_utc'
]
