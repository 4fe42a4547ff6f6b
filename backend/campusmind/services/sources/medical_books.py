"""
Medical books composite source.

Fans out to four sub-sources in parallel and merges them into one result:
- booksmedicos.org (Spanish medical books, scraped)
- PubMed Central (free full-text articles, via Entrez)
- NCBI Bookshelf (medical textbooks, via Entrez)
- OpenStax (a fixed list of free health-science textbooks)

Each sub-source is isolated: a failure or timeout in one contributes an
empty list and never hides the others. Merge order is the order above;
duplicates (by doi, then url, then external id) keep the first copy.

Note: Biopython's Entrez library is synchronous. Calls run in a
ThreadPoolExecutor so they overlap with the other sub-sources. A timed
out Entrez call stops being awaited but its worker thread runs to
completion.
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Awaitable, Dict, List, Optional, Sequence

from Bio import Entrez
from bs4 import BeautifulSoup

from campusmind.core.config import settings
from campusmind.core.logging import get_logger
from campusmind.schemas import (
    AcademicResource,
    AcademicSource,
    ResourceType,
    SearchQuery,
    SearchResult,
)

from .base import BROWSER_USER_AGENT, BaseSource

logger = get_logger(__name__)

Entrez.email = settings.API_CONTACT_EMAIL
Entrez.tool = "campusmind"

# Shared executor for running sync Entrez calls
_executor = ThreadPoolExecutor(max_workers=4)

PMC_ARTICLE_URL = "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC{id}/"
BOOKSHELF_URL = "https://www.ncbi.nlm.nih.gov/books/{id}/"
BOOKSMEDICOS_URL = "https://booksmedicos.org/"

PMC_PREFIX = "pmc-"
BOOKSHELF_MAX = 10
BOOKSMEDICOS_MAX = 15
MAX_ENTREZ_AUTHORS = 5

OPENSTAX_BOOKS = (
    {
        "id": "anatomy-and-physiology",
        "title": "Anatomy and Physiology",
        "subjects": ("anatomy", "physiology", "body", "human", "organ", "tissue", "cell"),
        "url": "https://openstax.org/details/books/anatomy-and-physiology-2e",
        "pdf_url": "https://assets.openstax.org/oscms-prodcms/media/documents/AnatomyandPhysiology2e-WEB.pdf",
    },
    {
        "id": "biology",
        "title": "Biology 2e",
        "subjects": ("biology", "cell", "genetics", "evolution", "organism", "life"),
        "url": "https://openstax.org/details/books/biology-2e",
        "pdf_url": "https://assets.openstax.org/oscms-prodcms/media/documents/Biology2e-WEB.pdf",
    },
    {
        "id": "microbiology",
        "title": "Microbiology",
        "subjects": ("microbiology", "bacteria", "virus", "pathogen", "infection", "immune"),
        "url": "https://openstax.org/details/books/microbiology",
        "pdf_url": "https://assets.openstax.org/oscms-prodcms/media/documents/Microbiology-WEB.pdf",
    },
    {
        "id": "chemistry",
        "title": "Chemistry 2e",
        "subjects": ("chemistry", "organic", "biochemistry", "molecular", "compound"),
        "url": "https://openstax.org/details/books/chemistry-2e",
        "pdf_url": "https://assets.openstax.org/oscms-prodcms/media/documents/Chemistry2e-WEB.pdf",
    },
    {
        "id": "psychology",
        "title": "Psychology 2e",
        "subjects": ("psychology", "mental", "brain", "behavior", "cognitive", "psychiatric"),
        "url": "https://openstax.org/details/books/psychology-2e",
        "pdf_url": "https://assets.openstax.org/oscms-prodcms/media/documents/Psychology2e-WEB.pdf",
    },
    {
        "id": "concepts-biology",
        "title": "Concepts of Biology",
        "subjects": ("biology", "cell", "genetics", "ecosystem", "organism"),
        "url": "https://openstax.org/details/books/concepts-biology",
        "pdf_url": "https://assets.openstax.org/oscms-prodcms/media/documents/ConceptsofBiology-WEB.pdf",
    },
)


# === Entrez (sync, run in the executor) ===

def _esearch_ids(db: str, term: str, retmax: int, retstart: int = 0) -> List[str]:
    handle = Entrez.esearch(db=db, term=term, retmax=retmax, retstart=retstart, sort="relevance")
    record = Entrez.read(handle)
    handle.close()
    return [str(i) for i in record.get("IdList", [])]


def _esummary(db: str, ids: Sequence[str]) -> Dict[str, Dict]:
    """DocSums keyed by id."""
    handle = Entrez.esummary(db=db, id=",".join(ids))
    records = Entrez.read(handle)
    handle.close()
    return {str(r.get("Id")): r for r in records}


async def _run_entrez(func, *args) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, func, *args)


def entrez_authors(authors: Any) -> List[str]:
    names = []
    for a in authors or []:
        name = a if isinstance(a, str) else (a or {}).get("Name") or (a or {}).get("name")
        if name:
            names.append(str(name))
    return names[:MAX_ENTREZ_AUTHORS]


def _text(value: Any) -> Optional[str]:
    return str(value) if value else None


# === Merge ===

def merge_unique(groups: Sequence[List[AcademicResource]]) -> List[AcademicResource]:
    seen = set()
    merged = []
    for group in groups:
        for item in group:
            key = item.doi or item.url or item.external_id
            if key in seen:
                continue
            seen.add(key)
            merged.append(item)
    return merged


def match_openstax(text: str) -> List[Dict]:
    lowered = text.lower()
    return [
        book for book in OPENSTAX_BOOKS
        if lowered in book["title"].lower()
        or any(s in lowered or lowered in s for s in book["subjects"])
    ]


class MedicalBooksSource(BaseSource):
    max_per_page = 100

    def __init__(self, *args, sub_timeout: Optional[float] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.sub_timeout = sub_timeout or settings.SCRAPE_TIMEOUT

    @property
    def name(self) -> str:
        return AcademicSource.MEDICAL_BOOKS.value

    async def _search(self, query: SearchQuery) -> SearchResult:
        per_page = self.clamp_per_page(query.per_page)

        groups = await asyncio.gather(
            self._isolated("booksmedicos", self.search_booksmedicos(query.query, per_page)),
            self._isolated("pmc", self.search_pmc(query.query, per_page, query.pagination.offset(per_page))),
            self._isolated("bookshelf", self.search_bookshelf(query.query, per_page, query.page)),
            self._isolated("openstax", self.search_openstax(query.query)),
        )

        unique = merge_unique(groups)
        return SearchResult(
            items=unique[:query.per_page],
            total=len(unique),
            page=query.page,
            per_page=query.per_page,
            source=self.name,
        )

    async def _isolated(self, label: str, call: Awaitable[List[AcademicResource]]) -> List[AcademicResource]:
        """Await one sub-source; any failure or timeout becomes an empty list."""
        try:
            return await asyncio.wait_for(call, timeout=self.sub_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"medical_books/{label} timed out after {self.sub_timeout}s")
        except Exception as e:
            logger.error(f"medical_books/{label} search failed: {type(e).__name__}: {e}")
        return []

    # === Sub-sources ===

    async def search_pmc(self, text: str, per_page: int, offset: int) -> List[AcademicResource]:
        ids = await _run_entrez(_esearch_ids, "pmc", f"{text} AND free fulltext[filter]", per_page, offset)
        if not ids:
            return []
        summaries = await _run_entrez(_esummary, "pmc", ids)
        return [self.normalize_pmc(i, summaries[i]) for i in ids if i in summaries]

    async def search_bookshelf(self, text: str, per_page: int, page: int = 1) -> List[AcademicResource]:
        # retstart steps by the capped page size
        retmax = min(per_page, BOOKSHELF_MAX)
        ids = await _run_entrez(_esearch_ids, "books", text, retmax, (page - 1) * retmax)
        if not ids:
            return []
        summaries = await _run_entrez(_esummary, "books", ids)
        return [self.normalize_bookshelf(i, summaries[i]) for i in ids if i in summaries]

    async def search_openstax(self, text: str) -> List[AcademicResource]:
        return [self.normalize_openstax(book) for book in match_openstax(text)]

    async def search_booksmedicos(self, text: str, per_page: int) -> List[AcademicResource]:
        headers = {
            "User-Agent": BROWSER_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "es-ES,es;q=0.9,en;q=0.8",
        }
        async with self._client(timeout=self.sub_timeout) as client:
            response = await self._get(client, BOOKSMEDICOS_URL, params={"s": text}, headers=headers)

        items = self.parse_booksmedicos(response.text, min(per_page, BOOKSMEDICOS_MAX))
        logger.info(f"booksmedicos found {len(items)} results for: {text}")
        return items

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        if not external_id.startswith(PMC_PREFIX):
            return None
        pmc_id = external_id[len(PMC_PREFIX):]
        summaries = await _run_entrez(_esummary, "pmc", [pmc_id])
        summary = summaries.get(pmc_id)
        return self.normalize_pmc(pmc_id, summary) if summary else None

    # === Normalization ===

    def normalize_pmc(self, pmc_id: str, doc: Dict) -> AcademicResource:
        url = PMC_ARTICLE_URL.format(id=pmc_id)
        return AcademicResource(
            external_id=f"{PMC_PREFIX}{pmc_id}",
            source=self.name,
            title=_text(doc.get("Title")),
            authors=entrez_authors(doc.get("AuthorList")),
            abstract=_text(doc.get("Source")),
            publication_date=_text(doc.get("PubDate")),
            url=url,
            pdf_url=f"{url}pdf/",
            doi=_text(doc.get("DOI")),
            type=ResourceType.ARTICLE,
            is_open_access=True,
            language="en",
            journal=_text(doc.get("FullJournalName")) or _text(doc.get("Source")),
        )

    def normalize_bookshelf(self, book_id: str, doc: Dict) -> AcademicResource:
        accession = _text(doc.get("BookAccession")) or _text(doc.get("Book")) or book_id
        return AcademicResource(
            external_id=f"ncbi-book-{book_id}",
            source=self.name,
            title=_text(doc.get("Title")),
            authors=entrez_authors(doc.get("AuthorList")),
            abstract=_text(doc.get("Description")) or _text(doc.get("SubTitle")),
            publication_date=_text(doc.get("PubDate")),
            url=BOOKSHELF_URL.format(id=accession),
            type=ResourceType.BOOK,
            is_open_access=True,
            language="en",
            publisher=_text(doc.get("Publisher")) or "NCBI Bookshelf",
        )

    def normalize_openstax(self, book: Dict) -> AcademicResource:
        return AcademicResource(
            external_id=f"openstax-{book['id']}",
            source=self.name,
            title=book["title"],
            authors=["OpenStax"],
            abstract="Free OpenStax textbook for health-science and medical students.",
            url=book["url"],
            pdf_url=book["pdf_url"],
            type=ResourceType.BOOK,
            is_open_access=True,
            language="en",
            publisher="OpenStax",
            license="CC BY 4.0",
            subjects=book["subjects"],
        )

    def parse_booksmedicos(self, html: str, limit: int) -> List[AcademicResource]:
        soup = BeautifulSoup(html, "html.parser")
        items = []
        for article in soup.select("article.post")[:limit]:
            link = article.select_one(".entry-title a[href]")
            if link is None:
                continue
            url = link["href"]
            slug = next((p for p in reversed(url.split("/")) if p), None)
            if not slug:
                continue

            image = article.select_one("img[src]")
            time = article.select_one("time[datetime]")
            categories = [c.get_text(strip=True) for c in article.select('a[rel~="category"]')]
            categories = [c for c in categories if c]
            description = "Spanish medical book available on booksmedicos.org."
            if categories:
                description = f"Categories: {', '.join(categories)}. {description}"

            items.append(AcademicResource(
                external_id=f"booksmedicos-{slug}",
                source=self.name,
                title=link.get_text(strip=True),
                authors=["booksmedicos.org"],
                abstract=description,
                publication_date=time["datetime"].split("T")[0] if time else None,
                url=url,
                thumbnail_url=image["src"] if image else None,
                type=ResourceType.BOOK,
                is_open_access=True,
                language="es",
                publisher="booksmedicos.org",
                categories=categories,
            ))
        return items
