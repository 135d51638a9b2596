"""
Tag entropy evaluation for recommender output.
"""

from tag_entropy_eval.vocabulary import SparseTagVector, TagVocabulary

__all__ = ["TagVocabulary", "SparseTagVector"]
