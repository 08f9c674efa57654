"""Tests for saved filter presets and the dashboard layout."""

import pytest

from winmix.models.matches import MatchFilters
from winmix.presets.layout import DEFAULT_WIDGETS, DashboardLayout, move_widget
from winmix.presets.saved_filters import SavedFilterStore


class TestSavedFilters:
    def test_blank_name_rejected(self, tmp_path):
        store = SavedFilterStore(tmp_path)
        assert store.save("   ", MatchFilters(home_team="Arsenal")) is False
        assert store.list() == []

    def test_save_trims_and_persists(self, tmp_path):
        assert SavedFilterStore(tmp_path).save("  Arsenal BTTS ", MatchFilters(home_team="Arsenal", btts_computed=True))
        items = SavedFilterStore(tmp_path).list()
        assert len(items) == 1
        assert items[0].name == "Arsenal BTTS"
        assert items[0].filters.btts_computed is True

    def test_ids_are_unique(self, tmp_path):
        store = SavedFilterStore(tmp_path)
        for i in range(5):
            store.save(f"f{i}", MatchFilters())
        ids = [f.id for f in store.list()]
        assert len(set(ids)) == 5

    def test_update_and_get(self, tmp_path):
        store = SavedFilterStore(tmp_path)
        store.save("old", MatchFilters())
        fid = store.list()[0].id
        store.update(fid, " new ", MatchFilters(result_computed="D"))
        saved = store.get(fid)
        assert saved.name == "new"
        assert saved.filters.result_computed == "D"
        assert store.get("missing") is None

    def test_delete_and_clear(self, tmp_path):
        store = SavedFilterStore(tmp_path)
        store.save("a", MatchFilters())
        store.save("b", MatchFilters())
        first = store.list()[0].id
        store.delete(first)
        assert [f.name for f in store.list()] == ["b"]
        store.clear()
        assert store.list() == []

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        store = SavedFilterStore(tmp_path)
        store.path.write_text("{not json", encoding="utf-8")
        assert store.list() == []


class TestDashboardLayout:
    def test_defaults(self, tmp_path):
        layout = DashboardLayout(tmp_path)
        assert [w.id for w in layout.widgets] == ["statistics", "probability", "charts", "results"]
        assert [w.position for w in layout.widgets] == [0, 1, 2, 3]

    def test_move_renumbers_and_persists(self, tmp_path):
        DashboardLayout(tmp_path).move("charts", 0)
        widgets = DashboardLayout(tmp_path).widgets
        assert [w.id for w in widgets] == ["charts", "statistics", "probability", "results"]
        assert [w.position for w in widgets] == [0, 1, 2, 3]

    def test_move_past_end_appends(self):
        widgets = move_widget(DEFAULT_WIDGETS, "statistics", 10)
        assert [w.id for w in widgets] == ["probability", "charts", "results", "statistics"]
        assert widgets[-1].position == 3

    def test_negative_position_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            move_widget(DEFAULT_WIDGETS, "results", -1)
        layout = DashboardLayout(tmp_path)
        with pytest.raises(ValueError):
            layout.move("results", -1)
        assert not layout.path.exists()

    def test_move_does_not_touch_defaults(self):
        move_widget(DEFAULT_WIDGETS, "results", 0)
        assert DEFAULT_WIDGETS[0].id == "statistics"
        assert DEFAULT_WIDGETS[3].position == 3

    def test_toggle_and_visible_widgets(self, tmp_path):
        layout = DashboardLayout(tmp_path)
        layout.toggle_visibility("probability")
        assert [w.id for w in layout.visible_widgets()] == ["statistics", "charts", "results"]
        layout.toggle_visibility("probability")
        assert len(layout.visible_widgets()) == 4

    def test_unknown_widget(self, tmp_path):
        layout = DashboardLayout(tmp_path)
        with pytest.raises(KeyError):
            layout.move("nope", 0)
        with pytest.raises(KeyError):
            layout.toggle_visibility("nope")

    def test_reset(self, tmp_path):
        layout = DashboardLayout(tmp_path)
        layout.move("results", 0)
        layout.toggle_visibility("charts")
        widgets = layout.reset()
        assert [w.id for w in widgets] == [w.id for w in DEFAULT_WIDGETS]
        assert all(w.visible for w in layout.widgets)

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        layout = DashboardLayout(tmp_path)
        layout.path.write_text("[{\"id\": 1}]", encoding="utf-8")
        assert [w.id for w in layout.widgets] == [w.id for w in DEFAULT_WIDGETS]
