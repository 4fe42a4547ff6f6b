"""
Keyword matcher: infer the library category or career behind a
free-text subject name ("Anatomía II", "Kinesiologia", ...).

Both sides are lowercased, NFD-decomposed and stripped of combining
marks, so accents never affect a match. A keyword counts when it is a
substring of the subject or the subject is a substring of it. The
candidate with the strictly highest count wins; ties keep declaration
order.
"""
import unicodedata
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple, TypeVar

from campusmind.schemas import Career, LibraryCategory

T = TypeVar("T", LibraryCategory, Career)


class Match(NamedTuple):
    candidate: Optional[object]
    count: int
    keywords: Tuple[str, ...]


NO_MATCH = Match(None, 0, ())


def normalize_text(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(c for c in decomposed if not unicodedata.combining(c)).strip()


def matched_keywords(subject: str, keywords: Iterable[str]) -> Tuple[str, ...]:
    """Keywords (as declared) that match an already-normalized subject."""
    hits = []
    for keyword in keywords:
        normalized = normalize_text(keyword)
        if normalized and (normalized in subject or subject in normalized):
            hits.append(keyword)
    return tuple(hits)


def best_match(subject_name: str, candidates: Sequence[T]) -> Match:
    subject = normalize_text(subject_name)
    if not subject:
        return NO_MATCH

    best = NO_MATCH
    for candidate in candidates:
        hits = matched_keywords(subject, candidate.keywords)
        # Strictly greater: ties keep the earlier candidate
        if len(hits) > best.count:
            best = Match(candidate, len(hits), hits)
    return best


def match_category(subject_name: str, categories: Sequence[LibraryCategory]) -> Match:
    return best_match(subject_name, categories)


def match_career(subject_name: str, careers: Sequence[Career]) -> Match:
    return best_match(subject_name, careers)


def careers_with_category(category_id: str, careers: Sequence[Career]) -> List[Career]:
    return [c for c in careers if category_id in c.categories]
