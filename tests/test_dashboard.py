"""
Dashboard coordinator: add/edit/delete with order assignment, optimistic drops.
"""

import pytest

from materials_hub.dashboard import Dashboard
from materials_hub.store import MaterialStore

from conftest import USER_ID


@pytest.fixture
def dash(settings, backend):
    token = backend.issue_tokens()["access_token"]
    return Dashboard(MaterialStore(settings, token, backend), USER_ID)


def orders(dash, category):
    return [(m.title, m.sort_order) for name, items in dash.groups() if name == category for m in items]


class TestSave:

    def test_first_material_in_category_gets_zero(self, dash, backend):
        backend.seed("Existing", "Documentation", sort_order=4)
        dash.refresh()
        assert dash.save("Board", "Meeting Notes", "https://board")
        assert orders(dash, "Meeting Notes") == [("Board", 0)]

    def test_appends_to_existing_category(self, dash, backend):
        backend.seed("A", "Documentation", sort_order=0)
        backend.seed("B", "Documentation", sort_order=4)
        dash.refresh()
        assert dash.save("C", "Documentation", "https://c")
        assert orders(dash, "Documentation")[-1] == ("C", 5)

    def test_link_scheme_added(self, dash, backend):
        dash.refresh()
        dash.save("Repo", "Github Repository", "github.com/me/repo")
        assert backend.rows[0]["link"] == "https://github.com/me/repo"

    def test_blank_category_is_other(self, dash, backend):
        dash.refresh()
        dash.save("Misc", "  ", "https://misc")
        assert backend.rows[0]["type"] == "Other"

    def test_required_fields(self, dash, backend):
        dash.refresh()
        assert not dash.save("  ", "Documentation", "https://x")
        assert dash.status == "Title and link are required."
        assert backend.calls_to("POST", "/rest/v1/materials") == []

    def test_edit_same_category_keeps_order(self, dash, backend):
        row = backend.seed("A", "Documentation", sort_order=2)
        dash.refresh()
        assert dash.save("A2", "Documentation", "https://a2", material_id=row["id"])
        assert backend.row(row["id"])["sort_order"] == 2
        assert backend.row(row["id"])["title"] == "A2"

    def test_edit_new_category_moves_to_end(self, dash, backend):
        backend.seed("N0", "Meeting Notes", sort_order=0)
        backend.seed("N1", "Meeting Notes", sort_order=1)
        row = backend.seed("A", "Documentation", sort_order=0)
        dash.refresh()
        assert dash.save("A", "Meeting Notes", row["link"], material_id=row["id"])
        assert orders(dash, "Meeting Notes") == [("N0", 0), ("N1", 1), ("A", 2)]

    def test_edit_unknown_material(self, dash):
        dash.refresh()
        assert not dash.save("X", "Documentation", "https://x", material_id="nope")
        assert dash.status == "Material not found."

    def test_write_error_becomes_status(self, dash, backend):
        dash.refresh()
        backend.network_down = True
        assert not dash.save("X", "Documentation", "https://x")
        assert dash.status.startswith("Network error")


class TestDelete:

    def test_requires_confirmation(self, dash, backend):
        row = backend.seed("A", "Documentation")
        dash.refresh()
        assert not dash.delete(row["id"])
        assert backend.calls_to("DELETE", "/rest/v1/materials") == []
        assert len(backend.rows) == 1

    def test_confirmed_delete_refetches(self, dash, backend):
        row = backend.seed("A", "Documentation")
        dash.refresh()
        assert dash.delete(row["id"], confirmed=True)
        assert dash.materials == []
        assert dash.empty


class TestRefresh:

    def test_fetch_error_is_status_not_exception(self, dash, backend):
        backend.fail_list = True
        assert not dash.refresh()
        assert dash.status == "service unavailable"
        assert dash.materials == []


class TestDrop:

    def seed_four(self, backend):
        return [backend.seed(t, "Documentation", sort_order=i) for i, t in enumerate("ABCD")]

    def test_drop_persists_renumbering(self, dash, backend):
        rows = self.seed_four(backend)
        dash.refresh()
        updates = dash.drop(rows[2]["id"], rows[0]["id"], "Documentation")
        assert len(updates) == 3
        assert orders(dash, "Documentation") == [("C", 0), ("A", 1), ("B", 2), ("D", 3)]
        assert [backend.row(r["id"])["sort_order"] for r in rows] == [1, 2, 0, 3]
        assert dash.status is None

    def test_failed_persist_keeps_local_order(self, dash, backend):
        rows = self.seed_four(backend)
        dash.refresh()
        backend.fail_ids = {rows[0]["id"]}
        dash.drop(rows[2]["id"], rows[0]["id"], "Documentation")
        assert orders(dash, "Documentation") == [("C", 0), ("A", 1), ("B", 2), ("D", 3)]
        assert dash.status == f"update failed for {rows[0]['id']}"
        # the other writes still went through
        assert backend.row(rows[1]["id"])["sort_order"] == 2
        assert backend.row(rows[0]["id"])["sort_order"] == 0

    def test_drop_onto_self_sends_nothing(self, dash, backend):
        rows = self.seed_four(backend)
        dash.refresh()
        assert dash.drop(rows[1]["id"], rows[1]["id"], "Documentation") == []
        assert backend.calls_to("PATCH", "/rest/v1/materials") == []

    def test_stale_drop_is_silent(self, dash, backend):
        rows = self.seed_four(backend)
        dash.refresh()
        assert dash.drop("deleted-elsewhere", rows[0]["id"], "Documentation") == []
        assert dash.status is None

    def test_drop_never_changes_category(self, dash, backend):
        rows = self.seed_four(backend)
        other = backend.seed("R", "Github Repository", sort_order=0)
        dash.refresh()
        assert dash.drop(other["id"], rows[0]["id"], "Documentation") == []
        assert dash.find(other["id"]).category == "Github Repository"
