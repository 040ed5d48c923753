"""
Test: achievement catalog seeding from CSV/TSV.
"""
from pathlib import Path

from app.models.store import Store
from app.utils.csv_loader import bootstrap_achievements_from_csv

CATALOG_CSV = Path(__file__).resolve().parent.parent / "data" / "achievements.csv"


class TestBootstrapAchievements:
    def test_shipped_catalog_loads_every_key(self, db):
        assert bootstrap_achievements_from_csv(db, CATALOG_CSV) == 9
        ids = {a.id for a in Store(db).list_achievements()}
        assert "ach-expert" in ids
        assert "ach-coletor-xp" in ids

    def test_second_run_inserts_nothing(self, db):
        bootstrap_achievements_from_csv(db, CATALOG_CSV)
        assert bootstrap_achievements_from_csv(db, CATALOG_CSV) == 0
        assert Store(db).count_achievements() == 9

    def test_bad_rows_are_skipped(self, db, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_text(
            "key,Title,description,XP\n"
            "ach-ok,Fine,,25\n"
            "ach-zero,Zero reward,,0\n"
            "ach-nan,Not a number,,lots\n"
            ",No key,,10\n"
            "ach-ok,Duplicate,,30\n",
            encoding="utf-8",
        )
        assert bootstrap_achievements_from_csv(db, path) == 2
        ok = Store(db).get_achievement("ach-ok")
        assert ok.title == "Fine"
        assert ok.icon == "award"

    def test_tab_separated(self, db, tmp_path):
        path = tmp_path / "catalog.tsv"
        path.write_text("id\ttitle\txp\ticon\nach-tab\tTabbed\t15.0\tstar\n", encoding="utf-8")
        assert bootstrap_achievements_from_csv(db, path) == 1
        assert Store(db).get_achievement("ach-tab").xp == 15

    def test_missing_file(self, db, tmp_path):
        assert bootstrap_achievements_from_csv(db, tmp_path / "nope.csv") == 0
