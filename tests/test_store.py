"""Tests for VertexStore: label identity, degree counting, boolean results."""

from graph_sketch.models.vertex import Vertex


class TestAddVertex:
    def test_adds_distinct_labels(self, store):
        assert store.add_vertex(Vertex(id=1, label="A"))
        assert store.add_vertex(Vertex(id=2, label="B"))
        assert store.count() == 2
        assert "A" in store and "B" in store

    def test_same_label_bumps_degree_and_keeps_original(self, store):
        original = Vertex(id=1, label="A")
        store.add_vertex(original)

        assert store.add_vertex(Vertex(id=3, label="A"))
        assert store.count() == 1
        assert store.get_by_label("A") is original
        assert original.degree == 2

    def test_degree_counts_every_mention(self, store):
        store.add_vertex(Vertex(id=1, label="A"))
        for i in range(4):
            store.add_vertex(Vertex(id=10 + i, label="A"))
        assert store.get_by_label("A").degree == 5

    def test_disabled_vertex_rejected(self, store):
        vertex = Vertex(id=5, label="A", enabled=False)
        assert store.add_vertex(vertex) is False
        assert store.count() == 0

    def test_disabled_duplicate_does_not_bump_degree(self, store):
        store.add_vertex(Vertex(id=1, label="A"))
        store.add_vertex(Vertex(id=2, label="A", enabled=False))
        assert store.get_by_label("A").degree == 1

    def test_same_id_different_label_is_new_vertex(self, store):
        store.add_vertex(Vertex(id=2, label="B"))
        store.add_vertex(Vertex(id=2, label="C"))
        assert store.count() == 2


class TestRemoveByLabel:
    def test_remove_existing(self, store):
        store.add_vertex(Vertex(id=1, label="A"))
        store.add_vertex(Vertex(id=2, label="B"))
        assert store.remove_by_label("B") is True
        assert store.count() == 1
        assert store.get_by_label("B") is None

    def test_remove_missing_returns_false(self, store):
        store.add_vertex(Vertex(id=1, label="A"))
        assert store.remove_by_label("O") is False
        assert store.count() == 1

    def test_remove_twice(self, store):
        store.add_vertex(Vertex(id=1, label="B"))
        assert store.remove_by_label("B") is True
        assert store.remove_by_label("B") is False


class TestSetState:
    def test_set_state_in_place(self, store):
        vertex = Vertex(id=1, label="B")
        store.add_vertex(vertex)
        assert store.set_state("B", False) is True
        assert vertex.enabled is False

    def test_set_state_missing_label(self, store):
        store.add_vertex(Vertex(id=1, label="A"))
        assert store.set_state("D", False) is False
        assert all(v.enabled for v in store.get_all())


class TestLookups:
    def test_get_by_label(self, store):
        store.add_vertex(Vertex(id=2, label="B"))
        assert store.get_by_label("B").id == 2
        assert store.get_by_label("F") is None

    def test_get_all_is_a_copy(self, store):
        store.add_vertex(Vertex(id=1, label="A"))
        everything = store.get_all()
        everything.clear()
        assert store.count() == 1

    def test_iteration_and_labels_in_insertion_order(self, store):
        for i, label in enumerate("CAB", start=1):
            store.add_vertex(Vertex(id=i, label=label))
        assert store.labels() == ["C", "A", "B"]
        assert [v.label for v in store] == ["C", "A", "B"]
        assert len(store) == 3

    def test_contains_accepts_vertex_or_label(self, store):
        store.add_vertex(Vertex(id=1, label="A"))
        assert Vertex(id=99, label="A") in store
        assert "A" in store
        assert "Z" not in store

    def test_next_id_is_monotonic(self, store):
        ids = [store.next_id() for _ in range(3)]
        store.add_vertex(Vertex(id=ids[-1], label="A"))
        store.remove_by_label("A")
        assert store.next_id() > ids[-1]
        assert ids == sorted(set(ids))
