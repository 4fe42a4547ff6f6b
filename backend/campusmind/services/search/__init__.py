"""
Federated search: category routing, scatter-gather dispatch and
merge/dedup/rank of per-source results.

Package Structure:
- router.py: category -> source table
- ranking.py: dedup key, merge and heuristic ranking
- aggregator.py: AcademicService orchestrator
"""
from .aggregator import AcademicService
from .ranking import dedup_key, deduplicate, merge_results, rank_results, score
from .router import CATEGORY_SOURCES, resolve_category

__all__ = [
    "AcademicService",
    "CATEGORY_SOURCES",
    "resolve_category",
    "dedup_key",
    "deduplicate",
    "merge_results",
    "rank_results",
    "score",
]
