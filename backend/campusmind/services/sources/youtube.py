"""
YouTube data source for educational videos.

Uses the Data API v3 (Education category) when YOUTUBE_API_KEY is set;
otherwise parses the ytInitialData blob embedded in the public results
page. Videos are always open access.
"""
import json
import re
from typing import Dict, List, Optional

from campusmind.core.config import settings
from campusmind.core.exceptions import SourceParseError
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

API_URL = "https://www.googleapis.com/youtube/v3/search"
RESULTS_URL = "https://www.youtube.com/results"
WATCH_URL = "https://www.youtube.com/watch?v="

EDUCATION_CATEGORY_ID = "27"
EDUCATIONAL_TERMS = "tutorial educativo curso clase explicación"

# sp=EgIQAQ== restricts the results page to videos
VIDEO_ONLY_FILTER = "EgIQAQ=="

_INITIAL_DATA = re.compile(r"var ytInitialData = ({.+?});</script>", re.DOTALL)


def educational_query(text: str) -> str:
    return f"{text} {EDUCATIONAL_TERMS}"


def parse_initial_data(html: str, limit: int) -> List[Dict]:
    """Pull videoRenderer entries out of the results page."""
    match = _INITIAL_DATA.search(html)
    if not match:
        return []

    data = json.loads(match.group(1))
    sections = (
        data.get("contents", {})
        .get("twoColumnSearchResultsRenderer", {})
        .get("primaryContents", {})
        .get("sectionListRenderer", {})
        .get("contents", [])
    )
    if not sections:
        return []

    contents = sections[0].get("itemSectionRenderer", {}).get("contents", [])
    videos = [c["videoRenderer"] for c in contents if "videoRenderer" in c]
    return videos[:limit]


def _runs_text(node: Optional[Dict]) -> Optional[str]:
    runs = (node or {}).get("runs") or []
    text = "".join(r.get("text", "") for r in runs)
    return text or None


class YouTubeSource(BaseSource):
    max_per_page = 50

    @property
    def name(self) -> str:
        return AcademicSource.YOUTUBE.value

    async def _search(self, query: SearchQuery) -> SearchResult:
        text = educational_query(query.query)
        per_page = self.clamp_per_page(query.per_page)

        if settings.YOUTUBE_API_KEY:
            return await self._search_api(query, text, per_page)
        return await self._search_page(query, text, per_page)

    async def _search_api(self, query: SearchQuery, text: str, per_page: int) -> SearchResult:
        params = {
            "part": "snippet",
            "q": text,
            "type": "video",
            "videoDuration": "medium",
            "videoDefinition": "high",
            "relevanceLanguage": "es",
            "maxResults": str(per_page),
            "videoCategoryId": EDUCATION_CATEGORY_ID,
            "key": settings.YOUTUBE_API_KEY,
        }

        async with self._client() as client:
            data = await self._get_json(client, API_URL, params=params)

        items = [self.normalize_api_item(i) for i in data.get("items") or [] if (i.get("id") or {}).get("videoId")]
        total = (data.get("pageInfo") or {}).get("totalResults") or len(items)
        return SearchResult(items=items, total=total, page=query.page, per_page=query.per_page, source=self.name)

    async def _search_page(self, query: SearchQuery, text: str, per_page: int) -> SearchResult:
        headers = {
            "User-Agent": BROWSER_USER_AGENT,
            "Accept-Language": "es-ES,es;q=0.9,en;q=0.8",
        }
        async with self._client(timeout=settings.SCRAPE_TIMEOUT) as client:
            response = await self._get(
                client, RESULTS_URL, params={"search_query": text, "sp": VIDEO_ONLY_FILTER}, headers=headers
            )

        try:
            videos = parse_initial_data(response.text, per_page)
        except ValueError as e:
            raise SourceParseError(self.name, str(e)) from e

        items = [self.normalize_renderer(v) for v in videos if v.get("videoId")]
        return SearchResult(items=items, total=len(items), page=query.page, per_page=query.per_page, source=self.name)

    def normalize_api_item(self, item: Dict) -> AcademicResource:
        video_id = item["id"]["videoId"]
        snippet = item.get("snippet") or {}
        thumbnails = snippet.get("thumbnails") or {}
        published_at = snippet.get("publishedAt")

        return AcademicResource(
            external_id=video_id,
            source=self.name,
            title=snippet.get("title"),
            authors=[snippet.get("channelTitle")],
            abstract=snippet.get("description") or None,
            publication_date=published_at.split("T")[0] if published_at else None,
            url=f"{WATCH_URL}{video_id}",
            type=ResourceType.VIDEO,
            is_open_access=True,
            thumbnail_url=(thumbnails.get("high") or {}).get("url") or (thumbnails.get("default") or {}).get("url"),
        )

    def normalize_renderer(self, video: Dict) -> AcademicResource:
        video_id = video["videoId"]
        thumbnails = (video.get("thumbnail") or {}).get("thumbnails") or []

        return AcademicResource(
            external_id=video_id,
            source=self.name,
            title=_runs_text(video.get("title")),
            authors=[_runs_text(video.get("ownerText"))],
            abstract=_runs_text(video.get("descriptionSnippet")),
            # Relative text ("hace 2 años"), not a date: kept out of publication_date
            duration=(video.get("lengthText") or {}).get("simpleText"),
            url=f"{WATCH_URL}{video_id}",
            type=ResourceType.VIDEO,
            is_open_access=True,
            thumbnail_url=thumbnails[0].get("url") if thumbnails else None,
        )
