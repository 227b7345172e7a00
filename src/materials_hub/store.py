# store.py: CRUD over the backend "materials" table, scoped to one account

import logging
from concurrent.futures import ThreadPoolExecutor

from .backend import BackendClient
from .errors import FetchError, WriteError
from .models import Category, Material

logger = logging.getLogger(__name__)

TABLE = "materials"
SELECT = "id,title,type,link,created_at,sort_order"
LIST_ORDER = "sort_order.asc.nullslast,created_at.desc"
EDITABLE = ("title", "type", "link", "sort_order")
MAX_PARALLEL_WRITES = 8


class MaterialStore:
    """Materials belonging to ``account_id`` callers, via the REST table API.

    Every mutation filters on both the material id and the account id,
    so a caller can never touch another account's rows.
    """

    def __init__(self, settings, access_token, http=None):
        self.settings = settings
        self.access_token = access_token
        self.backend = BackendClient(settings, http)

    def _call(self, method, error_cls, **kwargs):
        return self.backend.table(method, TABLE, token=self.access_token, error_cls=error_cls, **kwargs)

    @staticmethod
    def _scope(material_id, account_id):
        return {"id": f"eq.{material_id}", "user_id": f"eq.{account_id}"}

    def list(self, account_id):
        resp = self._call("GET", FetchError, params={
            "select": SELECT, "user_id": f"eq.{account_id}", "order": LIST_ORDER,
        })
        try:
            rows = resp.json() or []
            return [Material.from_record(r) for r in rows]
        except (ValueError, KeyError, TypeError) as e:
            raise FetchError(f"Unreadable materials response: {e}") from e

    def create(self, account_id, title, category, link, sort_order=None) -> Material:
        payload = {
            "title": title,
            "type": Category.parse(category).name,
            "link": link,
            "user_id": account_id,
            "sort_order": sort_order,
        }
        resp = self._call("POST", WriteError, json=payload,
                          params={"select": SELECT},
                          headers={"Prefer": "return=representation"})
        try:
            rows = resp.json()
            rec = rows[0] if isinstance(rows, list) else rows
            material = Material.from_record(rec)
        except (ValueError, KeyError, TypeError, IndexError) as e:
            raise WriteError(f"Unreadable insert response: {e}") from e
        logger.info("Created material %s in %r", material.id, material.category)
        return material

    def update(self, material_id, account_id, fields) -> None:
        payload = {k: v for k, v in fields.items() if k in EDITABLE}
        if "category" in fields:
            payload["type"] = Category.parse(fields["category"]).name
        if not payload:
            return
        resp = self._call("PATCH", WriteError, json=payload,
                          params={**self._scope(material_id, account_id), "select": "id"},
                          headers={"Prefer": "return=representation"})
        try:
            matched = resp.json()
        except ValueError:
            matched = None
        if matched == []:
            raise WriteError("Material not found.", material_id=material_id)

    def delete(self, material_id, account_id) -> None:
        self._call("DELETE", WriteError, params=self._scope(material_id, account_id))
        logger.info("Deleted material %s", material_id)

    def bulk_set_order(self, account_id, items) -> None:
        """Write ``[(id, sort_order)]`` pairs concurrently.

        Every pair is attempted even if some fail. Failures are collected
        and reported as one WriteError carrying the first message (in
        submission order) plus the full ``failures`` list.
        """
        items = list(items)
        if not items:
            return

        def write(pair):
            mid, order = pair
            try:
                self.update(mid, account_id, {"sort_order": order})
                return None
            except WriteError as e:
                return (mid, e.message)

        workers = min(MAX_PARALLEL_WRITES, len(items))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(write, items))
        failures = [r for r in results if r is not None]
        if failures:
            logger.warning("Order update failed for %d of %d materials", len(failures), len(items))
            raise WriteError(failures[0][1], failures=failures)
