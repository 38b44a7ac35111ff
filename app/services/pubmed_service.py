"""
services/pubmed_service.py

PubMed lookup via NCBI E-utilities, two round trips:
  1. esearch.fcgi  → list of PMIDs (bounded by retmax)
  2. esummary.fcgi → title / authors / journal / date for those PMIDs

Best-effort only: any failure returns None and the answer is generated
without references.
"""

from typing import Optional

import httpx

from app.core.config import Settings
from app.core.logger import get_logger
from app.models.response import LiteratureRecord

logger = get_logger(__name__)

ARTICLE_URL = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"


class PubMedClient:
    def __init__(
        self,
        base_url: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/",
        max_results: int = 3,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.max_results = max_results
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "PubMedClient":
        return cls(
            base_url=settings.PUBMED_BASE_URL,
            max_results=settings.PUBMED_MAX_RESULTS,
            timeout=settings.PUBMED_TIMEOUT,
        )

    async def search(
        self, query: str, max_results: Optional[int] = None
    ) -> Optional[list[LiteratureRecord]]:
        retmax = self.max_results if max_results is None else max_results
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                ids = await self._search_ids(client, query, retmax)
                if not ids:
                    logger.info(f"PubMed: no results for '{query[:60]}'")
                    return None

                summaries = await self._fetch_summaries(client, ids)
                records = [self._to_record(pmid, summaries[pmid]) for pmid in ids]

        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"PubMed API error: {type(e).__name__}: {e}")
            return None

        logger.info(f"📚 PubMed returned {len(records)} articles for '{query[:60]}'")
        return records

    async def _search_ids(
        self, client: httpx.AsyncClient, query: str, retmax: int
    ) -> list[str]:
        response = await client.get(
            "esearch.fcgi",
            params={"db": "pubmed", "term": query, "retmode": "json", "retmax": retmax},
        )
        response.raise_for_status()
        ids = response.json()["esearchresult"]["idlist"]
        return [str(pmid) for pmid in ids][:retmax]

    async def _fetch_summaries(
        self, client: httpx.AsyncClient, ids: list[str]
    ) -> dict:
        response = await client.get(
            "esummary.fcgi",
            params={"db": "pubmed", "id": ",".join(ids), "retmode": "json"},
        )
        response.raise_for_status()
        return response.json()["result"]

    @staticmethod
    def _to_record(pmid: str, article: dict) -> LiteratureRecord:
        authors = ", ".join(a["name"] for a in article.get("authors") or [])
        return LiteratureRecord(
            pmid=pmid,
            title=article["title"],
            authors=authors or "Unknown",
            journal=article.get("fulljournalname"),
            pub_date=article.get("pubdate"),
            abstract=article.get("abstract"),
            url=ARTICLE_URL.format(pmid=pmid),
        )
