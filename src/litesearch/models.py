from pydantic import BaseModel, Field
from typing import Any

from .search import (
    SearchRequest,
    SearchResponse,
    SortField,
    decode_source,
    parse_predicate,
)


class SortFieldModel(BaseModel):
    """One sort key of a search request"""

    field: str = Field(description="Attribute name, or `_score` for relevance")
    asc: bool = Field(default=True, description="Ascending order when true")


class SearchRequestModel(BaseModel):
    """Search request in its JSON wire form"""

    query: dict[str, Any] | None = Field(
        default=None, description="Query tree; omitted or empty matches everything"
    )
    sort: list[SortFieldModel] = Field(default_factory=list, description="Ordered sort keys")
    size: int | None = Field(default=None, description="Maximum number of hits")
    min_score: float | None = Field(
        default=None, description="Minimum similarity score for vector queries"
    )

    def to_request(self) -> SearchRequest:
        return SearchRequest(
            query=parse_predicate(self.query),
            sort=tuple(SortField(field=item.field, asc=item.asc) for item in self.sort),
            size=self.size,
            min_score=self.min_score,
        )


class HitModel(BaseModel):
    """A single search hit"""

    id: str
    source: Any = Field(description="The stored document")
    score: float | None = None


class SearchResponseModel(BaseModel):
    """Search response in its JSON wire form"""

    hits: list[HitModel]
    max_score: float | None = None

    @classmethod
    def from_response(cls, response: SearchResponse) -> "SearchResponseModel":
        return cls(
            hits=[
                HitModel(id=hit.id, source=decode_source(hit.source), score=hit.score)
                for hit in response.hits
            ],
            max_score=response.max_score,
        )


class BulkItem(BaseModel):
    """One line of a bulk request"""

    id: str = Field(description="Document id")
    doc: Any = Field(description="Document body")
