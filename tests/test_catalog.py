"""Tests for the bundled catalog of labs."""

import pytest

from incrlab import GenerateParams, LabParams, SampleParams, UnimplementedScenario, all_labs, find_lab, run_labs
from incrlab._catalog import list_elements

SMALL = LabParams(
    SampleParams(generate_params=GenerateParams(size=6, gauge=2), demand=3),
    change_batch_loop_count=4,
)

STUBS = {"hammer-s17-hw0-filter", "hammer-s17-hw0-split", "hammer-s17-hw0-reverse"}


class TestRegistry:
    """Tests for the lab registry."""

    def test_names_are_unique(self) -> None:
        names = [lab.name for lab in all_labs()]
        assert len(names) == len(set(names))

    def test_find_lab(self) -> None:
        assert find_lab("list-eager-map").name == "list-eager-map"

    def test_find_unknown_lab(self) -> None:
        with pytest.raises(KeyError):
            find_lab("no-such-lab")


class TestLabsAgree:
    """Every implemented lab produces the same outputs under both backends."""

    @pytest.mark.parametrize("name", [lab.name for lab in all_labs() if lab.name not in STUBS])
    def test_valid(self, name: str) -> None:
        results = find_lab(name).run(SMALL)

        assert len(results) == 5
        assert results.all_valid is True

    @pytest.mark.parametrize("name", sorted(STUBS))
    def test_stub(self, name: str) -> None:
        with pytest.raises(UnimplementedScenario):
            find_lab(name).run(SMALL)

    def test_whole_catalog_runs_as_a_batch(self) -> None:
        outcomes = run_labs(all_labs(), SMALL)

        assert {o.name for o in outcomes if not o.ok} == STUBS


class TestExamples:
    """Outputs of the hand-written scenarios."""

    def test_clean_dirty_values(self) -> None:
        params = LabParams(SampleParams(), change_batch_loop_count=3)

        results = find_lab("eg-clean-dirty").run(params)

        # a: 2, -2, 3, 2 -> c = min(a * a, 100)
        assert [s.incremental.output for s in results.samples] == [4, 4, 9, 4]

    def test_clean_dirty_cleans_without_reevaluating(self) -> None:
        params = LabParams(SampleParams(), change_batch_loop_count=1)

        step = find_lab("eg-clean-dirty").run(params).samples[1]
        counts = step.incremental.compute_output.counts

        assert counts.force_hit == 1
        assert counts.clean_edge == 1
        assert counts.force_miss == 0

    def test_named_list_insertion(self) -> None:
        params = LabParams(SampleParams(), change_batch_loop_count=1)

        results = find_lab("eg-oopsla2015-sec2").run(params)

        first, second = results.samples
        assert _named_heads(first.baseline.output) == [0, 1, 9]
        assert _named_heads(second.baseline.output) == [0, 1, 4, 9]
        assert _named_heads(second.incremental.output) == [0, 1, 4, 9]

    def test_vec_max(self) -> None:
        params = LabParams(SampleParams(generate_params=GenerateParams(size=5)), change_batch_loop_count=0)

        sample = find_lab("vec-max").run(params).samples[0]

        assert sample.baseline.output == max(sample.baseline.input)

    def test_insert_grows_the_list(self) -> None:
        params = LabParams(SampleParams(generate_params=GenerateParams(size=5, gauge=2)), change_batch_loop_count=3)

        results = find_lab("list-insert-eager-map").run(params)

        assert [len(list_elements(s.baseline.input)) for s in results.samples] == [5, 6, 7, 8]
        assert results.all_valid is True


def _named_heads(lst: object) -> list[int]:
    heads = []
    while hasattr(lst, "head"):
        heads.append(lst.head)  # type: ignore[attr-defined]
        lst = lst.tail  # type: ignore[attr-defined]
    return heads
