#!/usr/bin/env python3

# Copyright 2025 Espressif Systems (Shanghai) PTE LTD
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import pytest

from zap_conformance.configs.constants import CONFORMANCE_RESULTS, ConformanceResult
from zap_conformance.conformance.boolean_parser import (
    evaluate_boolean,
    evaluate_with_parentheses,
)
from zap_conformance.conformance.classifier import (
    evaluate_conformance_expression,
    split_top_level,
)
from zap_conformance.conformance.errors import ConformanceParseError
from zap_conformance.conformance.predicates import (
    check_if_expression_has_term,
    check_missing_terms,
    filter_related_desc_elements,
)
from zap_conformance.conformance.terms import get_terms_from_expression

logging.basicConfig(level=logging.INFO, format="%(message)s")


class TestGetTermsFromExpression:
    """Test the get_terms_from_expression function."""

    def test_terms_in_order(self):
        """Test terms are extracted left to right, operators skipped."""
        assert get_terms_from_expression("A & (!B | C)") == ["A", "B", "C"]

    def test_duplicates_are_kept(self):
        """Test repeated terms are returned each time they appear."""
        assert get_terms_from_expression("LT | LT & !DF") == ["LT", "LT", "DF"]

    def test_identifiers_with_digits_and_underscores(self):
        """Test terms may contain digits and underscores after the first letter."""
        terms = get_terms_from_expression("[Feature_1 & OnOff2], desc")
        assert terms == ["Feature_1", "OnOff2", "desc"]

    def test_empty_expression(self):
        """Test empty and None expressions yield an empty list."""
        assert get_terms_from_expression("") == []
        assert get_terms_from_expression(None) == []
        assert get_terms_from_expression("& | ! ( ) [ ] ,") == []


class TestBooleanEvaluation:
    """Test the boolean expression evaluator."""

    def test_and_or_not(self):
        """Test basic boolean operators."""
        element_map = {"A": True, "B": False}
        assert evaluate_boolean("A & !B", element_map) is True
        assert evaluate_boolean("A & B", element_map) is False
        assert evaluate_boolean("B | A", element_map) is True
        assert evaluate_boolean("!A | B", element_map) is False

    def test_and_binds_tighter_than_or(self):
        """Test 'A | B & C' is read as 'A | (B & C)'."""
        element_map = {"A": True, "B": False, "C": False}
        assert evaluate_boolean("A | B & C", element_map) is True
        assert evaluate_boolean("B & C | A", element_map) is True

    def test_double_negation(self):
        """Test repeated NOT operators."""
        assert evaluate_boolean("!!A", {"A": True}) is True
        assert evaluate_boolean("!!!A", {"A": True}) is False

    def test_long_negation_chain(self):
        """Test a long chain of NOT operators is evaluated without recursion."""
        assert evaluate_boolean("!" * 5000 + "A", {"A": True}) is True
        assert evaluate_boolean("!" * 5001 + "A", {"A": True}) is False
        assert evaluate_conformance_expression("!" * 5000 + "A", {"A": True}) == "mandatory"
        assert evaluate_conformance_expression("!" * 5001 + "A", {"A": True}) == "notSupported"

    def test_negation_chain_without_operand(self):
        """Test a NOT chain with nothing to negate raises a parse error."""
        with pytest.raises(ConformanceParseError):
            evaluate_boolean("A & " + "!" * 5000, {"A": True})

    def test_unknown_terms_are_false(self):
        """Test terms missing from the element map evaluate to False."""
        assert evaluate_boolean("Unknown", {}) is False
        assert evaluate_boolean("!Unknown", {}) is True

    def test_truthy_values(self):
        """Test non boolean values in the element map use their truthiness."""
        assert evaluate_boolean("A & B", {"A": 1, "B": "yes"}) is True
        assert evaluate_boolean("A", {"A": 0}) is False

    def test_parentheses(self):
        """Test parenthesized groups are evaluated first."""
        element_map = {"A": True, "B": False, "C": True}
        assert evaluate_with_parentheses("A & (!B | C)", element_map) is True
        assert evaluate_with_parentheses("!(A | B)", element_map) is False
        assert evaluate_with_parentheses("(A | B) & !(B | !C)", element_map) is True

    def test_nested_parentheses(self):
        """Test nested groups are resolved innermost first."""
        element_map = {"A": True, "B": False, "C": True, "D": True}
        assert evaluate_with_parentheses("A & (B | (C & D))", element_map) is True
        assert evaluate_with_parentheses("((A))", element_map) is True
        assert evaluate_with_parentheses("!((B))", element_map) is True

    def test_group_value_is_not_read_as_term(self):
        """Test a resolved group is not looked up again in the element map."""
        assert evaluate_with_parentheses("(A)", {"A": True}) is True
        assert evaluate_with_parentheses("(A)", {"A": True, "true": False}) is True

    def test_unbalanced_parentheses(self):
        """Test unbalanced parentheses raise a parse error."""
        with pytest.raises(ConformanceParseError):
            evaluate_with_parentheses("(A & B", {})
        with pytest.raises(ConformanceParseError):
            evaluate_with_parentheses("A & B)", {})

    def test_group_next_to_term_is_rejected(self):
        """Test a group directly followed by a term is malformed."""
        with pytest.raises(ConformanceParseError):
            evaluate_with_parentheses("(A)B", {"A": True, "B": True})

    @pytest.mark.parametrize("expression", ["A &", "& A", "A B", "A $ B", "", "()"])
    def test_malformed_expressions(self, expression):
        """Test malformed expressions raise a parse error."""
        with pytest.raises(ConformanceParseError):
            evaluate_with_parentheses(expression, {"A": True, "B": True})

    def test_parse_error_names_expression_and_element(self):
        """Test the parse error carries the expression and the element."""
        with pytest.raises(ConformanceParseError) as exc_info:
            evaluate_with_parentheses("(A | B", {}, element="OnTime")
        assert exc_info.value.expression == "(A | B"
        assert exc_info.value.element == "OnTime"
        assert "OnTime" in str(exc_info.value)


class TestSplitTopLevel:
    """Test the split_top_level function."""

    def test_split_otherwise(self):
        """Test top level commas separate alternatives."""
        assert split_top_level("A & B, [!C]") == ["A & B", " [!C]"]

    def test_commas_inside_brackets(self):
        """Test commas inside brackets or parentheses are not split."""
        assert split_top_level("[A, B], M") == ["[A, B]", " M"]
        assert split_top_level("(A, B), O") == ["(A, B)", " O"]

    def test_no_comma(self):
        """Test an expression without comma is a single part."""
        assert split_top_level("LT") == ["LT"]

    @pytest.mark.parametrize("expression", ["[A", "A]", "(A", "[(A])", "A), B"])
    def test_unbalanced_brackets(self, expression):
        """Test unbalanced or mismatched brackets raise a parse error."""
        with pytest.raises(ConformanceParseError):
            split_top_level(expression)


class TestEvaluateConformanceExpression:
    """Test the evaluate_conformance_expression function."""

    def test_abbreviations(self):
        """Test conformance abbreviations."""
        assert evaluate_conformance_expression("M", {}) == "mandatory"
        assert evaluate_conformance_expression("O", {}) == "optional"
        assert evaluate_conformance_expression("P", {}) == "provisional"
        assert evaluate_conformance_expression("D", {}) == "notSupported"
        assert evaluate_conformance_expression("X", {}) == "notSupported"
        assert evaluate_conformance_expression(" M ", {}) == "mandatory"

    def test_optional_bracket(self):
        """Test '[expr]' is optional when expr is true."""
        assert evaluate_conformance_expression("[A]", {"A": True}) == "optional"
        assert evaluate_conformance_expression("[A]", {"A": False}) == "notSupported"
        assert evaluate_conformance_expression("[A & (B | C)]", {"A": True, "C": True}) == "optional"

    def test_mandatory_condition(self):
        """Test a boolean expression is mandatory when true."""
        assert evaluate_conformance_expression("A | B", {"B": True}) == "mandatory"
        assert evaluate_conformance_expression("A | B", {}) == "notSupported"

    def test_otherwise_first_part_true(self):
        """Test the first true alternative wins."""
        element_map = {"A": True, "B": True, "C": False}
        assert evaluate_conformance_expression("A & B, [!C]", element_map) == "mandatory"

    def test_otherwise_falls_through(self):
        """Test a false mandatory part falls through to the next alternative."""
        element_map = {"A": False, "B": True, "C": False}
        assert evaluate_conformance_expression("A & B, [!C]", element_map) == "optional"

    def test_otherwise_with_abbreviations(self):
        """Test otherwise conformance ending with an abbreviation."""
        assert evaluate_conformance_expression("LT, O", {"LT": False}) == "optional"
        assert evaluate_conformance_expression("LT, X", {"LT": False}) == "notSupported"
        assert evaluate_conformance_expression("P, M", {}) == "provisional"
        assert evaluate_conformance_expression("!LT, D", {"LT": True}) == "notSupported"

    def test_text_around_bracket_is_checked(self):
        """Test unrecognized characters next to an optional bracket raise."""
        with pytest.raises(ConformanceParseError):
            evaluate_conformance_expression("[A] $ B", {"A": True})
        with pytest.raises(ConformanceParseError):
            evaluate_conformance_expression("# [A]", {"A": True})
        assert evaluate_conformance_expression(" [A] ", {"A": True}) == "optional"
        assert evaluate_conformance_expression("B, [A]", {"A": True}) == "optional"

    def test_bracket_part_is_final(self):
        """Test an optional part decides the result even when false."""
        assert evaluate_conformance_expression("[A], M", {"A": False}) == "notSupported"

    def test_desc(self):
        """Test desc anywhere makes the whole expression descriptive."""
        assert evaluate_conformance_expression("desc & A", {"A": True}) == "desc"
        assert evaluate_conformance_expression("M, [desc]", {}) == "desc"
        assert evaluate_conformance_expression("desc", {}) == ConformanceResult.DESC

    def test_empty_expression(self):
        """Test empty expressions are not supported."""
        assert evaluate_conformance_expression("", {}) == "notSupported"
        assert evaluate_conformance_expression("   ", {}) == "notSupported"
        assert evaluate_conformance_expression(None, {}) == "notSupported"

    def test_empty_alternative_is_skipped(self):
        """Test an empty alternative is skipped."""
        assert evaluate_conformance_expression("A,, O", {"A": False}) == "optional"

    def test_malformed_expression(self):
        """Test malformed expressions raise instead of returning a default."""
        with pytest.raises(ConformanceParseError):
            evaluate_conformance_expression("[A & B", {})
        with pytest.raises(ConformanceParseError):
            evaluate_conformance_expression("A &, O", {})

    def test_result_is_always_known_outcome(self):
        """Test results belong to the closed set of outcomes."""
        element_map = {"A": True, "B": False}
        for expression in ["M", "O", "P", "D", "X", "desc", "A", "B", "[A]", "[B]",
                           "A, O", "B, [A]", "B, P", "", "!A & B, X"]:
            assert evaluate_conformance_expression(expression, element_map) in CONFORMANCE_RESULTS


class TestConformancePredicates:
    """Test the supporting predicates."""

    def test_missing_terms(self):
        """Test terms absent from the element map are reported."""
        assert check_missing_terms("A & B", {"A": True}) == ["B"]

    def test_missing_terms_ignores_abbreviations(self):
        """Test abbreviations are never missing."""
        assert check_missing_terms("M, [A], desc, O, P, D, X", {"A": False}) == []

    def test_present_false_term_is_not_missing(self):
        """Test a term mapped to False is known, not missing."""
        assert check_missing_terms("A | B", {"A": False, "B": False}) == []

    def test_expression_has_term(self):
        """Test term membership."""
        assert check_if_expression_has_term("LT & !DF", "DF") is True
        assert check_if_expression_has_term("LT & !DF", "D") is False
        assert check_if_expression_has_term("", "LT") is False

    def test_filter_related_desc_elements(self):
        """Test only desc elements referencing the features are kept."""
        elements = [
            {"name": "OnTime", "conformance": "LT & desc"},
            {"name": "OffWaitTime", "conformance": "LT"},
            {"name": "StartUpOnOff", "conformance": "desc"},
            {"name": "GlobalSceneControl", "conformance": "[DF], desc"},
            {"name": "NoConformance"},
        ]
        related = filter_related_desc_elements(elements, ["LT", "DF"])
        assert [element["name"] for element in related] == ["OnTime", "GlobalSceneControl"]
        assert filter_related_desc_elements(elements, []) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
