# dashboard.py: the coordinating component behind the dashboard page
#
# Owns the in-memory material list for one account and the status line.
# Backend failures end up in ``status``; they are never raised to callers.

import logging

from .config import DEFAULT_MAX_COLUMNS
from .errors import FetchError, WriteError
from .models import Category, normalize_link
from .ordering import (
    apply_orders, build_layout, group_by_category, next_sort_order, plan_drop,
    sorted_groups,
)

logger = logging.getLogger(__name__)


class Dashboard:
    def __init__(self, store, account_id, max_columns: int = DEFAULT_MAX_COLUMNS):
        self.store = store
        self.account_id = account_id
        self.max_columns = max_columns
        self.materials = []
        self.status = None
        self.loaded = False

    # ---- reads ----
    def refresh(self) -> bool:
        try:
            self.materials = self.store.list(self.account_id)
        except FetchError as e:
            self.status = e.message
            return False
        finally:
            self.loaded = True
        return True

    def find(self, material_id):
        return next((m for m in self.materials if m.id == material_id), None)

    def groups(self):
        return sorted_groups(group_by_category(self.materials))

    def layout(self):
        return build_layout(self.materials, self.max_columns)

    @property
    def empty(self) -> bool:
        return self.loaded and not self.materials

    # ---- add / edit / delete ----
    def save(self, title, category, link, material_id=None) -> bool:
        """Create a material, or edit ``material_id``. Refetches on success."""
        self.status = None
        title = (title or "").strip()
        link = normalize_link(link)
        category = Category.parse(category).name
        if not title or not link:
            self.status = "Title and link are required."
            return False

        try:
            if material_id:
                existing = self.find(material_id)
                if existing is None:
                    self.status = "Material not found."
                    return False
                fields = {"title": title, "category": category, "link": link}
                if existing.bucket != category:
                    # recategorised: goes to the end of its new group
                    fields["sort_order"] = next_sort_order(self.materials, category)
                self.store.update(material_id, self.account_id, fields)
            else:
                self.store.create(self.account_id, title, category, link,
                                  sort_order=next_sort_order(self.materials, category))
        except WriteError as e:
            self.status = e.message
            return False

        self.refresh()
        return True

    def delete(self, material_id, confirmed: bool = False) -> bool:
        """Delete ``material_id``. Nothing is sent unless ``confirmed``."""
        if not confirmed:
            return False
        try:
            self.store.delete(material_id, self.account_id)
        except WriteError as e:
            self.status = e.message
            return False
        self.refresh()
        return True

    # ---- drag & drop ----
    def drop(self, source_id, target_id, category):
        """Reorder ``category`` by dropping ``source_id`` onto ``target_id``.

        Local state changes first and is kept even if the writes fail;
        the next refresh() reconciles. Returns the ``(id, sort_order)``
        pairs that changed.
        """
        updates = plan_drop(self.materials, source_id, target_id, category)
        if not updates:
            return []
        self.materials = apply_orders(self.materials, updates)
        logger.info("Reordered %r: %d material(s) renumbered", Category.parse(category).name, len(updates))
        try:
            self.store.bulk_set_order(self.account_id, updates)
        except WriteError as e:
            self.status = e.message
        return updates
