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
from typing import List, Tuple

from zap_conformance.configs.constants import (
    CONFORMANCE_DEPRECATED,
    CONFORMANCE_DESC,
    CONFORMANCE_DISALLOWED,
    CONFORMANCE_MANDATORY,
    CONFORMANCE_OPTIONAL,
    CONFORMANCE_PROVISIONAL,
    ConformanceResult,
)
from zap_conformance.conformance.boolean_parser import evaluate_with_parentheses, tokenize
from zap_conformance.conformance.errors import ConformanceParseError
from zap_conformance.conformance.terms import get_terms_from_expression

logger = logging.getLogger(__name__)

BRACKET_PAIRS = {")": "(", "]": "["}


def split_top_level(expression, element=None) -> List[str]:
    """Split an otherwise conformance on commas outside of any brackets.

    Args:
        expression: Conformance expression
        element: Element owning the expression, for error messages

    Returns:
        List of parts, untrimmed, in order

    Raises:
        ConformanceParseError: unbalanced or mismatched brackets
    """
    parts = []
    stack = []
    start = 0
    for index, char in enumerate(expression):
        if char in "([":
            stack.append(char)
        elif char in BRACKET_PAIRS:
            if not stack or stack[-1] != BRACKET_PAIRS[char]:
                raise ConformanceParseError(
                    f"Unbalanced '{char}'", expression, element, index
                )
            stack.pop()
        elif char == "," and not stack:
            parts.append(expression[start:index])
            start = index + 1
    if stack:
        raise ConformanceParseError(f"Unbalanced '{stack[-1]}'", expression, element)
    parts.append(expression[start:])
    return parts


def _find_optional_bracket(part, expression, element=None) -> Tuple[int, int]:
    """Locate the first '[' of a part and its matching ']'."""
    start = part.index("[")
    depth = 0
    for index in range(start, len(part)):
        if part[index] == "[":
            depth += 1
        elif part[index] == "]":
            depth -= 1
            if depth == 0:
                return start, index
    raise ConformanceParseError("Unbalanced '['", expression, element)


def _check_bracket_surroundings(part, start, end, expression, element=None):
    """Reject unrecognized characters around the optional bracket of a part.

    Only the first bracket pair is evaluated; the rest of the part must still
    be made of terms, operators and brackets.
    """
    remainder = part[:start] + " " + part[end + 1:]
    for char in "()[]":
        remainder = remainder.replace(char, " ")
    tokenize(remainder, {}, expression, element)


def evaluate_conformance_expression(expression, element_map, element=None) -> str:
    """Evaluate a conformance expression against the enabled elements.

    A term can be an attribute, command, event, feature or conformance
    abbreviation. Operators are AND (&), OR (|) and NOT (!). '[expr]' is
    optional conformance when expr is true. Commas separate otherwise
    conformance alternatives which are tried left to right.
    Examples: 'A & (!B | C)', 'A & B, [!C]'

    Args:
        expression: Conformance expression
        element_map: Dictionary mapping term names to enabled state
        element: Element owning the expression, for error messages

    Returns:
        'mandatory', 'optional', 'provisional', 'notSupported' or 'desc'

    Raises:
        ConformanceParseError: expression is malformed
    """
    if not expression or not expression.strip():
        logger.debug(f"Empty conformance for element {element}, not supported")
        return ConformanceResult.NOT_SUPPORTED.value

    parts = split_top_level(expression, element)

    # desc anywhere means the conformance is too complex to resolve
    for part in parts:
        if CONFORMANCE_DESC in get_terms_from_expression(part):
            return ConformanceResult.DESC.value

    for part in parts:
        if "[" in part:
            start, end = _find_optional_bracket(part, expression, element)
            _check_bracket_surroundings(part, start, end, expression, element)
            if evaluate_with_parentheses(part[start + 1:end], element_map, element):
                return ConformanceResult.OPTIONAL.value
            return ConformanceResult.NOT_SUPPORTED.value

        part = part.strip()
        if not part:
            continue
        if part == CONFORMANCE_MANDATORY:
            return ConformanceResult.MANDATORY.value
        if part == CONFORMANCE_OPTIONAL:
            return ConformanceResult.OPTIONAL.value
        if part in (CONFORMANCE_DEPRECATED, CONFORMANCE_DISALLOWED):
            return ConformanceResult.NOT_SUPPORTED.value
        if part == CONFORMANCE_PROVISIONAL:
            return ConformanceResult.PROVISIONAL.value
        if evaluate_with_parentheses(part, element_map, element):
            return ConformanceResult.MANDATORY.value
        # mandatory condition is false, fall through to the next alternative

    return ConformanceResult.NOT_SUPPORTED.value
