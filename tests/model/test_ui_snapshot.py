"""Tests for UI snapshot types and records."""

import pytest

from callwatch.mock import screens
from callwatch.model import (
    Confidence,
    ControlState,
    ExtractedRecord,
    NodeRef,
    Region,
    UINode,
    UISnapshot,
)
from callwatch.model.control_state import UNTIMED_STATES


@pytest.fixture
def snapshot() -> UISnapshot:
    return screens.list_screen(
        [
            screens.call_item("서울역", "인천공항", 45000, index=0),
            screens.call_item("강남역", "김포공항", 38000, index=1),
        ]
    )


class TestRegion:
    def test_from_bounds(self) -> None:
        region = Region.from_bounds(10, 20, 110, 70)

        assert region == Region(10, 20, 100, 50)
        assert region.center == (60, 45)

    def test_contains_point_excludes_far_edges(self) -> None:
        region = Region(0, 0, 10, 10)

        assert region.contains_point(0, 0)
        assert not region.contains_point(10, 5)

    def test_empty(self) -> None:
        assert Region().is_empty()
        assert not Region(0, 0, 1, 1).is_empty()


class TestUINode:
    def test_parses_accessibility_aliases(self) -> None:
        """Nodes can be built straight from the accessibility dump."""
        node = UINode.model_validate(
            {
                "resourceId": "app:id/ok",
                "contentDescription": "확인",
                "className": "android.widget.Button",
                "clickable": True,
                "children": [{"text": "확인"}],
            }
        )

        assert node.identifier == "app:id/ok"
        assert node.description == "확인"
        assert node.is_actionable
        assert node.children[0].text == "확인"

    def test_disabled_node_not_actionable(self) -> None:
        assert not UINode(clickable=True, enabled=False).is_actionable


class TestUISnapshot:
    """Tests for UISnapshot."""

    def test_find_by_identifier_within_subtree(self, snapshot: UISnapshot) -> None:
        container = snapshot.find_by_class([screens.RECYCLER_VIEW])
        second = container.children[1]

        fare = snapshot.find_by_identifier(f"{screens.APP_ID}/tv_fare", start=second)

        assert fare.text == "요금 38,000원"

    def test_text_search_is_case_insensitive(self) -> None:
        snapshot = UISnapshot(UINode(children=(UINode(description="Refresh List"),)))

        assert snapshot.has_text("refresh")
        assert not snapshot.has_text("reload")

    def test_actionable_ancestor(self, snapshot: UISnapshot) -> None:
        label = snapshot.find_all_by_text("김포공항")[0]

        row = snapshot.actionable_ancestor(label)

        assert row.identifier == f"{screens.APP_ID}/vg_item"
        assert snapshot.parent_of(label) is row

    def test_node_at_point_returns_deepest_actionable(self, snapshot: UISnapshot) -> None:
        container = snapshot.find_by_class([screens.RECYCLER_VIEW])
        second = container.children[1]

        assert snapshot.node_at_point(*second.bounds.center) is second
        assert snapshot.node_at_point(5, 2300) is None

    def test_ref_resolves_in_equal_snapshot(self, snapshot: UISnapshot) -> None:
        """A reference survives a re-capture of an unchanged screen."""
        row = snapshot.find_by_class([screens.RECYCLER_VIEW]).children[1]
        ref = snapshot.ref(row)
        recaptured = screens.list_screen(
            [
                screens.call_item("서울역", "인천공항", 45000, index=0),
                screens.call_item("강남역", "김포공항", 38000, index=1),
            ]
        )

        resolved = recaptured.resolve(ref)

        assert resolved is not None
        assert resolved.bounds == row.bounds

    def test_ref_fails_when_row_gone(self, snapshot: UISnapshot) -> None:
        row = snapshot.find_by_class([screens.RECYCLER_VIEW]).children[1]
        ref = snapshot.ref(row)
        shorter = screens.list_screen([screens.call_item("강남역", "김포공항", 38000, index=0)])

        assert shorter.resolve(ref) is None

    def test_ref_of_foreign_node_raises(self, snapshot: UISnapshot) -> None:
        with pytest.raises(ValueError):
            snapshot.ref(UINode(text="elsewhere"))

    def test_resolve_checks_identifier(self, snapshot: UISnapshot) -> None:
        row = snapshot.find_by_class([screens.RECYCLER_VIEW]).children[0]
        ref = snapshot.ref(row)
        wrong = NodeRef(path=ref.path, identifier="other:id/row", bounds=ref.bounds)

        assert snapshot.resolve(wrong) is None


class TestExtractedRecord:
    def test_key_and_summary(self) -> None:
        record = ExtractedRecord(
            "서울역", "인천공항", 45000, category="일반 예약", scheduled_time="01.10(목) 14:30"
        )

        assert record.key == "서울역->인천공항@45000@01.10(목) 14:30"
        assert record.summary() == "서울역 -> 인천공항 45,000 01.10(목) 14:30 [일반 예약]"

    def test_debug_ignored_for_equality(self) -> None:
        first = ExtractedRecord("서울역", "인천공항", 45000, debug={"strategy": "a"})
        second = ExtractedRecord("서울역", "인천공항", 45000, debug={"strategy": "b"})

        assert first == second

    def test_confidence_ordering(self) -> None:
        assert Confidence.LOW < Confidence.HIGH < Confidence.VERY_HIGH
        assert max([Confidence.HIGH, Confidence.VERY_HIGH, Confidence.LOW]) is Confidence.VERY_HIGH


class TestControlState:
    def test_error_states(self) -> None:
        errors = {state for state in ControlState if state.is_error}

        assert errors == {
            ControlState.ERROR_ALREADY_TAKEN,
            ControlState.ERROR_TIMEOUT,
            ControlState.ERROR_UNKNOWN,
        }

    def test_untimed_states(self) -> None:
        assert ControlState.ERROR_TIMEOUT not in UNTIMED_STATES
        assert ControlState.ACCEPTED in UNTIMED_STATES
