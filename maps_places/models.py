"""Modelos de dados compartilhados pelo resolvedor, pelo extrator e pelo orquestrador."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Place(BaseModel):
    """
    Registro de um local encontrado no Google Maps.

    A ordem dos campos e os aliases (5_stars ... 1_star) definem o formato do
    places.json. As contagens por estrela não são conferidas contra review_count.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    category: str = ""
    address: str = ""
    website: str = ""
    phone: str = ""
    review_count: int = Field(default=0, ge=0)
    stars: float = 0.0
    five_stars: int = Field(default=0, ge=0, alias="5_stars")
    four_stars: int = Field(default=0, ge=0, alias="4_stars")
    three_stars: int = Field(default=0, ge=0, alias="3_stars")
    two_stars: int = Field(default=0, ge=0, alias="2_stars")
    one_star: int = Field(default=0, ge=0, alias="1_star")
    reviews: List[str] = Field(default_factory=list)
    latlon: str = ""


class CrawlStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class CrawlResult(BaseModel):
    """Resultado de uma tarefa de crawl: um local, 'não encontrado' ou uma falha."""

    query: str
    status: CrawlStatus
    place: Optional[Place] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, query: str, place: Place) -> "CrawlResult":
        return cls(query=query, status=CrawlStatus.OK, place=place)

    @classmethod
    def not_found(cls, query: str) -> "CrawlResult":
        return cls(query=query, status=CrawlStatus.NOT_FOUND)

    @classmethod
    def failed(cls, query: str, reason: str) -> "CrawlResult":
        return cls(query=query, status=CrawlStatus.FAILED, error=reason)


class FailedQuery(BaseModel):
    query: str
    reason: str


class CrawlSummary(BaseModel):
    places: List[Place] = Field(default_factory=list)
    not_found: List[str] = Field(default_factory=list)
    failed: List[FailedQuery] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: List[CrawlResult]) -> "CrawlSummary":
        summary = cls()
        for result in results:
            if result.status == CrawlStatus.OK and result.place is not None:
                summary.places.append(result.place)
            elif result.status == CrawlStatus.NOT_FOUND:
                summary.not_found.append(result.query)
            else:
                summary.failed.append(FailedQuery(query=result.query, reason=result.error or "erro desconhecido"))
        return summary


class ResolverState(str, Enum):
    SEARCHING = "searching"
    NAVIGATING = "navigating"
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    ABORTED = "aborted"


class ResolveOutcome(BaseModel):
    query: str
    state: ResolverState
    url: str
    iterations: int = 0

    @property
    def resolved(self) -> bool:
        return self.state == ResolverState.RESOLVED
