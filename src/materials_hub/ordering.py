# ordering.py: grouping, per-category ordering, column layout, drag & drop
#
# Pure functions over lists of Material. Nothing here talks to the
# backend; dashboard.py applies the results and persists them.

import sys
from dataclasses import dataclass, field

from .models import Category

UNORDERED = sys.maxsize


# ----------------------------
# Within-group ordering
# ----------------------------
def sorted_by_order(items):
    """Order a category's materials for display.

    ``sort_order`` ascending with unordered items last, then newest
    ``created_at`` first. Timestamps are ISO-8601 strings, so string
    comparison is chronological.
    """
    # two stable passes: secondary key first
    out = sorted(items, key=lambda m: m.created_at or "", reverse=True)
    out.sort(key=lambda m: UNORDERED if m.sort_order is None else m.sort_order)
    return out

def in_category(materials, category):
    name = Category.parse(category).name
    return [m for m in materials if m.bucket == name]

def next_sort_order(materials, category) -> int:
    """Order for a material appended to ``category``: max + 1, or 0 if empty."""
    group = in_category(materials, category)
    if not group:
        return 0
    return max(m.sort_order or 0 for m in group) + 1


# ----------------------------
# Partitioning
# ----------------------------
def group_by_category(materials):
    groups = {}
    for m in materials:
        groups.setdefault(m.bucket, []).append(m)
    return groups

def sorted_groups(groups):
    """[(category, items)] in display priority, items in display order."""
    keys = sorted(groups, key=lambda k: Category.parse(k).sort_key())
    return [(k, sorted_by_order(groups[k])) for k in keys]


# ----------------------------
# Column balancing
# ----------------------------
@dataclass
class Column:
    groups: list = field(default_factory=list)  # [(category, items)]
    count: int = 0

    @property
    def categories(self):
        return [name for name, _items in self.groups]

def column_count(group_count: int, max_columns: int) -> int:
    return min(max_columns, max(1, group_count))

def balance_columns(entries, max_columns: int):
    """Greedy assignment of whole groups to columns.

    ``entries`` must already be in priority order. Each group goes to the
    column with the smallest running item count, lowest index on ties.
    Deterministic for a given input order; no backtracking.
    """
    columns = [Column() for _ in range(column_count(len(entries), max_columns))]
    for name, items in entries:
        target = min(range(len(columns)), key=lambda i: (columns[i].count, i))
        columns[target].groups.append((name, items))
        columns[target].count += len(items)
    return columns

def build_layout(materials, max_columns: int):
    return balance_columns(sorted_groups(group_by_category(materials)), max_columns)


# ----------------------------
# Drag & drop reorder
# ----------------------------
def move_item(items, source_id, target_id):
    """Move ``source_id`` into the slot held by ``target_id``.

    Splice semantics: remove the source, reinsert it at the target's
    original index. Returns a new list, or None when either id is absent.
    """
    ids = [m.id for m in items]
    if source_id not in ids or target_id not in ids:
        return None
    source_index = ids.index(source_id)
    target_index = ids.index(target_id)
    out = list(items)
    moved = out.pop(source_index)
    out.insert(target_index, moved)
    return out

def renumber(items):
    """Full renumbering: each item's order becomes its 0-based position."""
    return [(m.id, index) for index, m in enumerate(items)]

def plan_drop(materials, source_id, target_id, category):
    """Work out the ``(id, sort_order)`` pairs a drop changes.

    Only the target ``category`` is reordered and nobody's category
    changes. Dropping onto itself or using an id that is no longer in
    the category yields no changes.
    """
    if source_id == target_id:
        return []
    group = sorted_by_order(in_category(materials, category))
    reordered = move_item(group, source_id, target_id)
    if reordered is None:
        return []
    current = {m.id: m.sort_order for m in group}
    return [(mid, order) for mid, order in renumber(reordered) if current[mid] != order]

def apply_orders(materials, updates):
    """New list with ``updates`` applied; untouched materials are kept as-is."""
    orders = dict(updates)
    return [m.with_order(orders[m.id]) if m.id in orders else m for m in materials]
