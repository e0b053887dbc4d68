from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict

Dir = Literal["asc", "desc"]

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def parse_positive_int(raw: Any, default: int) -> int:
    text = str(raw if raw is not None else "").strip()
    if not text:
        return default
    try:
        value = int(text)
    except ValueError:
        return default
    return value if value >= 1 else default


def parse_sort_dir(raw: Any) -> Dir:
    # Only the exact literal selects descending order.
    return "desc" if raw == "desc" else "asc"


class ListQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: str = ""
    sort_field: Optional[str] = None
    sort_dir: Dir = "asc"
    filters: Dict[str, str] = {}

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(cls, params: Mapping[str, Any], filter_names: Sequence[str] = ()) -> "ListQuery":
        filters = {}
        for name in filter_names:
            raw = params.get(name)
            if raw is not None:
                filters[name] = str(raw)
        return cls(
            page=parse_positive_int(params.get("page"), DEFAULT_PAGE),
            limit=parse_positive_int(params.get("limit"), DEFAULT_LIMIT),
            search=str(params.get("query") or ""),
            sort_field=(str(params.get("sort") or "").strip() or None),
            sort_dir=parse_sort_dir(params.get("dir")),
            filters=filters,
        )


class PageResult(BaseModel):
    items: List[Dict[str, Any]] = []
    total: int = 0
    is_empty_overall: bool = False

    def envelope(self, query: ListQuery, meta_key: str = "meta") -> Dict[str, Any]:
        return {
            "data": self.items,
            meta_key: {"total": self.total, "page": query.page, "limit": query.limit},
            "empty": self.is_empty_overall,
        }
