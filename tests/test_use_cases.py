"""End-to-end scenarios: authoring a world, checking it, rewiring it."""

from worldweave import Worldweave


class TestDungeonLayout:
    """A small dungeon: fixed hub rooms with swappable corridors."""

    def _dungeon(self) -> Worldweave:
        ww = Worldweave(name="dungeon")
        ww.passage("entrance", "hall")
        ww.two_way("hall", "library")
        ww.two_way("hall", "armory")
        ww.two_way("library", "vault")
        ww.two_way("armory", "barracks")
        ww.one_way("vault", "pit")
        ww.one_way("barracks", "throne")
        ww.passage("pit", "throne")
        return ww

    def test_docstring_example(self):
        ww = Worldweave(name="caves")
        ww.two_way(1, 2)
        ww.one_way(0, 1)
        ww.one_way(2, 3)
        assert ww.check().completable
        ww.build(iterations=500, seed=3)
        assert ww.check().completable

    def test_author_check_build(self, tmp_path):
        ww = self._dungeon()
        assert ww.check().completable
        assert ww.check().root_nodes == ["entrance"]

        report = ww.build(iterations=400, seed=21)
        assert report.attempts > 0
        assert ww.check().completable

        stats = ww.stats()
        assert stats.edge_count == 12
        assert stats.two_way_count == 4
        assert stats.one_way_count == 2
        assert stats.fixed_count == 2

        path = tmp_path / "dungeon.json"
        ww.save(path)
        assert Worldweave.load(path).passages() == ww.passages()

    def test_fixed_passages_survive(self):
        ww = self._dungeon()
        ww.build(iterations=300, seed=5)
        fixed = {(p.source, p.target) for p in ww.passages() if p.kind == "fixed"}
        assert fixed == {("entrance", "hall"), ("pit", "throne")}

    def test_different_seeds_diverge(self):
        layouts = set()
        for seed in range(6):
            ww = self._dungeon()
            ww.build(iterations=300, seed=seed)
            layout = sorted((str(p.source), str(p.target), p.kind) for p in ww.passages())
            layouts.add(tuple(layout))
        assert len(layouts) > 1
