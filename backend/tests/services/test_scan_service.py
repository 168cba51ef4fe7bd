import shutil
import threading

import pytest

from kcd2_conflict_checker.scanner.directory import ScanCancelledError
from kcd2_conflict_checker.scanner.names import NameCache
from kcd2_conflict_checker.services.scan_service import ModScanner
from kcd2_conflict_checker.services.whitelist import apply_whitelist


class FakeWorkshop:
    """Stands in for ``WorkshopClient``; counts lookups and context entries."""

    def __init__(self, names: dict[str, str]):
        self.names = names
        self.calls: list[str] = []
        self.entered = 0
        self.closed = 0

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, *exc):
        self.closed += 1

    def fetch_item_title(self, item_id: str) -> str | None:
        self.calls.append(item_id)
        return self.names.get(item_id)


@pytest.fixture
def workshop():
    return FakeWorkshop({"3400000001": "Hardcore Plus", "3400000002": "Better Swords"})


@pytest.fixture
def scanner(workshop) -> ModScanner:
    return ModScanner(lookup_factory=lambda: workshop)


def _workshop_root(steam_dir):
    return steam_dir / "steamapps" / "workshop" / "content" / "1771300"


class TestRunFullScan:
    def test_two_local_mods_same_path(self, game_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "ModA" / "Data" / "ModA.pak", {"data/items.xml": b"a"})
        make_pak(game_dir / "Mods" / "ModB" / "Data" / "ModB.pak", {"Data/Items.xml": b"b"})

        report = scanner.run_full_scan(str(game_dir))

        assert report.conflicts == {"data/items.xml": ["[Local] ModA", "[Local] ModB"]}
        assert report.scanned_mods == ["[Local] ModA", "[Local] ModB"]
        assert report.unique_mod_names == ["[Local] ModA", "[Local] ModB"]

    def test_whitelisting_one_side_hides_conflict(self, game_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "ModA" / "ModA.pak", {"data/items.xml": b"a"})
        make_pak(game_dir / "Mods" / "ModB" / "ModB.pak", {"Data/Items.xml": b"b"})

        report = scanner.run_full_scan(str(game_dir))
        result = apply_whitelist(report.conflicts, {"[Local] ModA"})

        assert result.reported == {}
        assert result.suppressed_count == 1

    def test_metadata_only_mod_not_counted(self, game_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "MetaMod" / "meta.pak", {"license__.xml": b"<l/>"})

        report = scanner.run_full_scan(str(game_dir))

        assert report.scanned_mods == []
        assert report.conflicts == {}
        assert report.unique_mod_names == []

    def test_unreadable_package_scanned_but_not_a_unique_mod(self, game_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "ModA" / "ModA.pak", {"data/items.xml": b"a"})
        broken = game_dir / "Mods" / "Broken" / "Broken.pak"
        broken.parent.mkdir(parents=True)
        broken.write_bytes(b"not a zip")

        report = scanner.run_full_scan(str(game_dir))

        assert report.scanned_mods == ["[Local] Broken", "[Local] ModA"]
        assert report.unique_mod_names == ["[Local] ModA"]
        assert report.conflicts == {}

    def test_missing_mods_folder(self, tmp_path, scanner):
        report = scanner.run_full_scan(str(tmp_path / "nowhere"))
        assert report.is_empty

    def test_ptf_folder_ignored(self, game_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "ModA" / "ModA.pak", {"data/items.xml": b"a"})
        make_pak(game_dir / "Mods" / "PTF_Hotfix" / "fix.pak", {"data/items.xml": b"b"})

        report = scanner.run_full_scan(str(game_dir))

        assert report.conflicts == {}
        assert report.scanned_mods == ["[Local] ModA"]

    def test_workshop_mods_named_from_steam(
        self, game_dir, steam_dir, make_pak, scanner, workshop
    ):
        make_pak(game_dir / "Mods" / "hardcore" / "hardcore.pak", {"libs/rpg.xml": b"l"})
        make_pak(_workshop_root(steam_dir) / "3400000001" / "hc.pak", {"libs/rpg.xml": b"w"})

        report = scanner.run_full_scan(str(game_dir), str(steam_dir))

        assert report.conflicts == {
            "libs/rpg.xml": ["[Local] hardcore", "[Workshop] Hardcore Plus"]
        }
        assert "[Workshop] Hardcore Plus (hc)" in report.scanned_mods
        assert workshop.calls == ["3400000001"]
        assert workshop.entered == workshop.closed == 1

    def test_name_cache_survives_rescans(self, game_dir, steam_dir, make_pak, scanner, workshop):
        make_pak(_workshop_root(steam_dir) / "3400000002" / "BetterSwords.pak", {"a.xml": b""})

        first = scanner.run_full_scan(str(game_dir), str(steam_dir))
        second = scanner.run_full_scan(str(game_dir), str(steam_dir))

        assert first.scanned_mods == second.scanned_mods == ["[Workshop] Better Swords"]
        assert workshop.calls == ["3400000002"]

    def test_unknown_workshop_item_falls_back(self, game_dir, steam_dir, make_pak, scanner):
        make_pak(_workshop_root(steam_dir) / "999" / "thing.pak", {"a.xml": b""})

        report = scanner.run_full_scan(str(game_dir), str(steam_dir))

        assert report.unique_mod_names == ["[Workshop] Workshop 999"]

    def test_without_steam_path_workshop_skipped(self, game_dir, make_pak, workshop):
        entered: list[int] = []

        def factory():
            entered.append(1)
            return workshop

        scanner = ModScanner(lookup_factory=factory)
        make_pak(game_dir / "Mods" / "ModA" / "ModA.pak", {"a.xml": b""})

        report = scanner.run_full_scan(str(game_dir), "")

        assert report.scanned_mods == ["[Local] ModA"]
        assert entered == []

    def test_idempotent(self, game_dir, steam_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "ModA" / "ModA.pak", {"x.xml": b"", "y.xml": b""})
        make_pak(game_dir / "Mods" / "ModB" / "ModB.pak", {"x.xml": b""})
        make_pak(_workshop_root(steam_dir) / "3400000001" / "a.pak", {"y.xml": b""})

        first = scanner.run_full_scan(str(game_dir), str(steam_dir))
        second = scanner.run_full_scan(str(game_dir), str(steam_dir))

        assert first.conflicts == second.conflicts
        assert first.unique_mod_names == second.unique_mod_names
        assert first.scanned_mods == second.scanned_mods

    def test_index_rebuilt_from_scratch(self, game_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "ModA" / "ModA.pak", {"x.xml": b""})
        make_pak(game_dir / "Mods" / "ModB" / "ModB.pak", {"x.xml": b""})
        assert scanner.run_full_scan(str(game_dir)).conflicts

        shutil.rmtree(game_dir / "Mods" / "ModB")
        report = scanner.run_full_scan(str(game_dir))

        assert report.conflicts == {}
        assert scanner.latest is report

    def test_cancelled_scan_keeps_previous_report(self, game_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "ModA" / "ModA.pak", {"x.xml": b""})
        previous = scanner.run_full_scan(str(game_dir))
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(ScanCancelledError):
            scanner.run_full_scan(str(game_dir), cancel_event=cancel)

        assert scanner.latest is previous

    def test_progress_finishes_with_done(self, game_dir, scanner):
        events: list[tuple[str, str, int]] = []
        scanner.run_full_scan(str(game_dir), on_progress=lambda *a: events.append(a))
        assert events[-1][0] == "done"
        assert events[-1][2] == 100


class TestDiscoverModNames:
    def test_combines_local_and_workshop_sorted(self, game_dir, steam_dir, make_pak, scanner):
        make_pak(game_dir / "Mods" / "zMod" / "z.pak", {"a.xml": b""})
        make_pak(game_dir / "Mods" / "aMod" / "a.pak", {"a.xml": b""})
        make_pak(game_dir / "Mods" / "ptfStuff" / "p.pak", {"a.xml": b""})
        make_pak(_workshop_root(steam_dir) / "3400000002" / "s.pak", {"a.xml": b""})

        names = scanner.discover_mod_names(str(game_dir), str(steam_dir))

        assert names == ["[Local] aMod", "[Local] zMod", "[Workshop] Better Swords"]

    def test_shares_name_cache_with_scans(self, game_dir, steam_dir, make_pak, workshop):
        cache = NameCache()
        cache.insert("3400000002", "Cached Name")
        scanner = ModScanner(cache=cache, lookup_factory=lambda: workshop)
        make_pak(_workshop_root(steam_dir) / "3400000002" / "s.pak", {"a.xml": b""})

        assert scanner.discover_mod_names(str(game_dir), str(steam_dir)) == [
            "[Workshop] Cached Name"
        ]
        assert workshop.calls == []
