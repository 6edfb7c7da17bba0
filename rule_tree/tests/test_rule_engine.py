"""
Unit tests for the rule tree evaluation engine.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
import structlog
from structlog.testing import capture_logs

from rule_tree.builders import and_, or_, n_of, string_equals, int_equals, int_range, boolean
from rule_tree.constraints import Boolean, IntEquals, IntRange, StringEquals
from rule_tree.engine import check, number_of_status
from rule_tree.models import And, Leaf, NumberOf, Or, Rule, RuleResult
from rule_tree.status import Status


@pytest.fixture
def facts():
    """Facts shared by most tests."""
    return {"foo": "1", "bar": "bar", "baz": "true"}


class TestLeafRules:
    """Test cases for leaf evaluation."""

    def test_present_field(self, facts):
        """Test a leaf whose field is present."""
        result = check(string_equals("bar = 'bar'", "bar", "bar"), facts)

        assert result == RuleResult("bar = 'bar'", Status.MET, ())

    def test_name_is_description(self, facts):
        """Test the result is named after the leaf description."""
        result = check(int_equals("foo = 2", "foo", 2), facts)

        assert result.name == "foo = 2"
        assert result.status is Status.NOT_MET
        assert result.children == ()

    @pytest.mark.parametrize("constraint", [
        StringEquals("bar"), IntEquals(1), IntRange(0, 5), Boolean(True), Boolean(False)
    ])
    def test_absent_field_is_unknown(self, facts, constraint):
        """Test a missing field is UNKNOWN for every constraint."""
        result = check(Leaf("quux", "quux", constraint), facts)

        assert result.status is Status.UNKNOWN

    @pytest.mark.parametrize("constraint", [
        StringEquals("bar"), IntEquals(1), IntRange(0, 5), Boolean(True), Boolean(False)
    ])
    def test_present_field_is_never_unknown(self, constraint):
        """Test a present field is never UNKNOWN."""
        result = check(Leaf("quux", "quux", constraint), {"quux": "garbage"})

        assert result.status is not Status.UNKNOWN

    def test_empty_value_is_present(self):
        """Test an empty value still counts as present."""
        result = check(boolean("flag", "flag", False), {"flag": ""})

        assert result.status is Status.MET

    def test_malformed_integer_is_not_met(self, facts):
        """Test non-numeric values fail integer leaves."""
        assert check(int_equals("bar = 2", "bar", 2), facts).status is Status.NOT_MET
        assert check(int_range("1 <= bar <= 3", "bar", 1, 3), facts).status is Status.NOT_MET


class TestAndRules:
    """Test cases for And."""

    def test_met_and_met(self, facts):
        """Test Met & Met == Met."""
        root = and_([int_equals("foo = 1", "foo", 1), string_equals("bar = 'bar'", "bar", "bar")])

        assert check(root, facts).status is Status.MET

    def test_met_and_not_met(self, facts):
        """Test Met & NotMet == NotMet."""
        root = and_([int_equals("foo = 2", "foo", 2), string_equals("bar = 'bar'", "bar", "bar")])

        assert check(root, facts).status is Status.NOT_MET

    def test_met_and_unknown(self, facts):
        """Test Met & Unknown == Unknown."""
        root = and_([int_equals("quux = 2", "quux", 2), string_equals("bar = 'bar'", "bar", "bar")])

        assert check(root, facts).status is Status.UNKNOWN

    def test_not_met_and_unknown(self, facts):
        """Test NotMet & Unknown == NotMet."""
        root = and_([int_equals("quux = 2", "quux", 2), string_equals("bar = 'baz'", "bar", "baz")])

        assert check(root, facts).status is Status.NOT_MET

    def test_unknown_and_unknown(self, facts):
        """Test Unknown & Unknown == Unknown."""
        root = and_([int_equals("quux = 2", "quux", 2), string_equals("fizz = 'bar'", "fizz", "bar")])

        assert check(root, facts).status is Status.UNKNOWN

    def test_empty_is_met(self, facts):
        """Test And without children is Met."""
        assert check(And(()), facts) == RuleResult("And", Status.MET, ())

    def test_no_short_circuit(self, facts):
        """Test every child is reported after a failure."""
        root = and_([
            int_equals("foo = 2", "foo", 2),
            string_equals("bar = 'bar'", "bar", "bar"),
            boolean("missing", "missing", True),
        ])
        result = check(root, facts)

        assert result.name == "And"
        assert [child.status for child in result.children] == [
            Status.NOT_MET, Status.MET, Status.UNKNOWN
        ]


class TestOrRules:
    """Test cases for Or."""

    def test_met_or_met(self, facts):
        """Test Met | Met == Met."""
        root = or_([int_equals("foo = 1", "foo", 1), string_equals("bar = 'bar'", "bar", "bar")])

        assert check(root, facts).status is Status.MET

    def test_not_met_or_met(self, facts):
        """Test NotMet | Met == Met."""
        root = or_([int_equals("foo = 2", "foo", 2), string_equals("bar = 'bar'", "bar", "bar")])

        assert check(root, facts).status is Status.MET

    def test_unknown_or_met(self, facts):
        """Test Unknown | Met == Met."""
        root = or_([int_equals("quux = 2", "quux", 2), string_equals("bar = 'bar'", "bar", "bar")])

        assert check(root, facts).status is Status.MET

    def test_unknown_or_not_met(self, facts):
        """Test Unknown | NotMet == Unknown."""
        root = or_([int_equals("quux = 2", "quux", 2), string_equals("bar = 'baz'", "bar", "baz")])

        assert check(root, facts).status is Status.UNKNOWN

    def test_unknown_or_unknown(self, facts):
        """Test Unknown | Unknown == Unknown."""
        root = or_([int_equals("quux = 2", "quux", 2), string_equals("fizz = 'bar'", "fizz", "bar")])

        assert check(root, facts).status is Status.UNKNOWN

    def test_empty_is_not_met(self, facts):
        """Test Or without children is NotMet."""
        assert check(Or(()), facts) == RuleResult("Or", Status.NOT_MET, ())


class TestNumberOfRules:
    """Test cases for NumberOf."""

    def test_two_met_one_not_met(self, facts):
        """Test 2 Met, 1 NotMet reaches a threshold of 2."""
        root = n_of(2, [
            int_equals("foo = 1", "foo", 1),
            string_equals("bar = 'bar'", "bar", "bar"),
            boolean("baz is false", "baz", False),
        ])
        result = check(root, facts)

        assert result.status is Status.MET
        assert result.name == "At least 2 of"
        assert result.children[2].status is Status.NOT_MET

    def test_one_met_one_not_met_one_unknown(self, facts):
        """Test 1 Met, 1 NotMet, 1 Unknown is Unknown."""
        root = n_of(2, [
            int_equals("foo = 1", "foo", 1),
            string_equals("quux = 'bar'", "quux", "bar"),
            boolean("baz is false", "baz", False),
        ])

        assert check(root, facts).status is Status.UNKNOWN

    def test_too_many_failed(self, facts):
        """Test 2 NotMet of 3 cannot reach a threshold of 2."""
        root = n_of(2, [
            int_equals("quux = 2", "quux", 2),
            string_equals("bar = 'baz'", "bar", "baz"),
            boolean("baz is false", "baz", False),
        ])

        assert check(root, facts).status is Status.NOT_MET

    def test_threshold_failures_with_enough_remaining(self, facts):
        """Test failures equal to the threshold stay Unknown while it is reachable."""
        root = n_of(2, [
            string_equals("bar = 'baz'", "bar", "baz"),
            boolean("baz is false", "baz", False),
            int_equals("a", "a", 1),
            int_equals("b", "b", 1),
            int_equals("c", "c", 1),
        ])

        assert check(root, facts).status is Status.UNKNOWN

    def test_zero_threshold_always_met(self, facts):
        """Test a threshold of zero is always Met."""
        root = n_of(0, [int_equals("foo = 2", "foo", 2)])

        assert check(root, facts).status is Status.MET

    def test_zero_of_none_is_met(self, facts):
        """Test zero of no children is Met."""
        assert check(NumberOf(0, ()), facts) == RuleResult("At least 0 of", Status.MET, ())

    def test_one_of_none_is_not_met(self, facts):
        """Test one of no children is NotMet."""
        assert check(NumberOf(1, ()), facts).status is Status.NOT_MET

    def test_threshold_above_child_count_is_permissive(self, facts):
        """Test an oversized threshold evaluates without raising."""
        root = NumberOf(5, (int_equals("foo = 1", "foo", 1),))

        assert check(root, facts).status is Status.NOT_MET

    @pytest.mark.parametrize("threshold,statuses,expected", [
        (1, [Status.MET], Status.MET),
        (1, [Status.UNKNOWN], Status.UNKNOWN),
        (1, [Status.NOT_MET], Status.NOT_MET),
        (2, [Status.MET, Status.UNKNOWN, Status.UNKNOWN], Status.UNKNOWN),
        (3, [Status.MET, Status.MET, Status.NOT_MET], Status.NOT_MET),
        (3, [Status.MET, Status.MET, Status.MET], Status.MET),
    ])
    def test_number_of_status(self, threshold, statuses, expected):
        """Test the quorum formula directly."""
        assert number_of_status(threshold, statuses) is expected


class TestTreeEvaluation:
    """Test cases for whole trees."""

    @pytest.fixture
    def tree(self):
        """Name and favourite-number tree."""
        return and_([
            string_equals("Name is John Doe", "name", "John Doe"),
            or_([
                int_equals("Favorite number is 5", "fav_number", 5),
                int_range("Thinking of a number between 5 and 10", "thinking_of", 5, 10),
            ]),
        ])

    @pytest.fixture
    def person(self):
        """Facts about John Doe."""
        return {"name": "John Doe", "fav_number": "5"}

    def test_explanation_tree(self, tree, person):
        """Test the result tree mirrors the rule tree."""
        result = tree.check(person)

        assert result == RuleResult("And", Status.MET, (
            RuleResult("Name is John Doe", Status.MET),
            RuleResult("Or", Status.MET, (
                RuleResult("Favorite number is 5", Status.MET),
                RuleResult("Thinking of a number between 5 and 10", Status.UNKNOWN),
            )),
        ))

    def test_deterministic(self, tree, person):
        """Test repeated checks give equal results."""
        assert check(tree, person) == check(tree, person)

    def test_does_not_mutate_facts(self, tree, person):
        """Test facts are left untouched."""
        before = dict(person)
        check(tree, person)

        assert person == before

    def test_concurrent_checks(self, tree, person):
        """Test one tree checked from many threads."""
        fact_sets = [person, {"name": "Jane"}, {}] * 20
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda f: check(tree, f), fact_sets))

        assert results == [check(tree, f) for f in fact_sets]

    def test_deep_tree(self):
        """Test a tree deeper than the recursion limit."""
        root = boolean("leaf", "flag", True)
        for _ in range(5000):
            root = And((root,))

        result = check(root, {"flag": "TRUE"})

        assert result.status is Status.MET
        depth = 0
        while result.children:
            result = result.children[0]
            depth += 1
        assert depth == 5000
        assert result.name == "leaf"

    def test_unknown_rule_type(self):
        """Test a foreign Rule subclass is rejected."""
        class Not(Rule):
            pass

        with pytest.raises(TypeError):
            check(Not(), {})

    def test_logs_check(self, tree, person):
        """Test one debug event is emitted per check."""
        with capture_logs() as logs:
            check(tree, person)

        assert logs == [{
            "event": "Rule tree checked",
            "log_level": "debug",
            "rule": "And",
            "status": "met",
            "nodes": 5,
        }]

    def test_silent_without_logging_configured(self, tree, person, capsys):
        """Test check writes nothing to the console by default."""
        structlog.reset_defaults()

        check(tree, person)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
