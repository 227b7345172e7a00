# models.py: materials and categories

import re
from dataclasses import dataclass, replace

DEFAULT_CATEGORY = "Other"

# Display priority; also the editor's option list.
CATEGORY_ORDER = (
    "Documentation",
    "UREC Forms",
    "Questionnaire",
    "System Design",
    "Github Repository",
    "To Do's",
    "Meeting Notes",
    DEFAULT_CATEGORY,
)


@dataclass(frozen=True)
class Category:
    """A category value: either one of CATEGORY_ORDER or free text.

    Blank values collapse to DEFAULT_CATEGORY so bucketing is total.
    """

    name: str

    @classmethod
    def parse(cls, value) -> "Category":
        name = (value or "").strip()
        return cls(name or DEFAULT_CATEGORY)

    @property
    def rank(self):
        """Index in CATEGORY_ORDER, or None for free-text categories."""
        try:
            return CATEGORY_ORDER.index(self.name)
        except ValueError:
            return None

    @property
    def is_free_text(self) -> bool:
        return self.rank is None

    def sort_key(self):
        # known categories first in fixed order, then free text alphabetically
        rank = self.rank
        if rank is None:
            return (1, len(CATEGORY_ORDER), self.name.lower(), self.name)
        return (0, rank, "", "")

    def __str__(self):
        return self.name


@dataclass
class Material:
    id: str
    title: str
    category: str = DEFAULT_CATEGORY
    link: str = ""
    created_at: str = ""
    sort_order: int | None = None

    @property
    def bucket(self) -> str:
        return Category.parse(self.category).name

    @classmethod
    def from_record(cls, rec: dict) -> "Material":
        order = rec.get("sort_order")
        return cls(
            id=str(rec["id"]),
            title=rec.get("title") or "",
            category=Category.parse(rec.get("type")).name,
            link=rec.get("link") or "",
            created_at=rec.get("created_at") or "",
            sort_order=int(order) if order is not None else None,
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.category,
            "link": self.link,
            "created_at": self.created_at,
            "sort_order": self.sort_order,
        }

    def with_order(self, sort_order) -> "Material":
        return replace(self, sort_order=sort_order)


def normalize_link(u: str) -> str:
    if not u: return ""
    u = u.strip()
    if not u: return ""
    if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://", u):
        u = "https://" + u
    return u
