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

"""
Boolean evaluation of conformance sub-expressions.

Terms are replaced with their enabled state from the element map and the
result is reduced with a small recursive descent parser:

    or_expr  := and_expr ('|' and_expr)*
    and_expr := unary ('&' unary)*
    unary    := '!' unary | literal

Parenthesized groups are resolved innermost first by
evaluate_with_parentheses() and spliced back as the literals 1 and 0, which
can never be read as a term.
"""

import logging
from typing import List, Tuple

from zap_conformance.conformance.errors import ConformanceParseError
from zap_conformance.conformance.terms import TERM_REGEX

logger = logging.getLogger(__name__)

TOKEN_AND = "&"
TOKEN_OR = "|"
TOKEN_NOT = "!"
TOKEN_TRUE = "1"
TOKEN_FALSE = "0"

OPERATOR_TOKENS = (TOKEN_AND, TOKEN_OR, TOKEN_NOT)


def tokenize(expr, element_map, source=None, element=None) -> List[Tuple[str, int]]:
    """Split a flat boolean expression into tokens.

    Every term is replaced with TOKEN_TRUE or TOKEN_FALSE according to the
    element map. Terms absent from the map evaluate to False.

    Args:
        expr: Flat expression without parentheses
        element_map: Dictionary mapping term names to enabled state
        source: Expression to name in error messages
        element: Element owning the expression, for error messages

    Returns:
        List of (token, position) tuples
    """
    source = expr if source is None else source
    tokens = []
    index = 0
    while index < len(expr):
        char = expr[index]
        if char.isspace():
            index += 1
            continue
        if char in OPERATOR_TOKENS or char in (TOKEN_TRUE, TOKEN_FALSE):
            tokens.append((char, index))
            index += 1
            continue
        if char in "()":
            raise ConformanceParseError(
                f"Unexpected '{char}'", source, element
            )
        match = TERM_REGEX.match(expr, index)
        if not match:
            raise ConformanceParseError(
                f"Unrecognized character '{char}'", source, element
            )
        term = match.group(0)
        tokens.append((TOKEN_TRUE if element_map.get(term) else TOKEN_FALSE, index))
        index = match.end()
    return tokens


class BooleanParser:
    """Recursive descent parser over already substituted boolean tokens."""

    def __init__(self, tokens, source, element=None):
        self.tokens = tokens
        self.source = source
        self.element = element
        self.pos = 0

    def parse(self) -> bool:
        if not self.tokens:
            raise ConformanceParseError("Empty expression", self.source, self.element)
        result = self._parse_or()
        if self.pos < len(self.tokens):
            token = self.tokens[self.pos][0]
            raise ConformanceParseError(
                f"Unexpected token '{token}', expected an operator",
                self.source,
                self.element,
            )
        return result

    def _peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][0]
        return None

    def _parse_or(self) -> bool:
        result = self._parse_and()
        while self._peek() == TOKEN_OR:
            self.pos += 1
            right = self._parse_and()
            result = result or right
        return result

    def _parse_and(self) -> bool:
        result = self._parse_unary()
        while self._peek() == TOKEN_AND:
            self.pos += 1
            right = self._parse_unary()
            result = result and right
        return result

    def _parse_unary(self) -> bool:
        # NOT chains are counted, not recursed, so their length is unbounded
        negations = 0
        while self._peek() == TOKEN_NOT:
            self.pos += 1
            negations += 1

        token = self._peek()
        if token in (TOKEN_TRUE, TOKEN_FALSE):
            self.pos += 1
            value = token == TOKEN_TRUE
            return value if negations % 2 == 0 else not value
        if token is None:
            raise ConformanceParseError(
                "Missing operand at end of expression", self.source, self.element
            )
        raise ConformanceParseError(
            f"Missing operand before '{token}'", self.source, self.element
        )


def evaluate_boolean(expr, element_map, element=None, source=None) -> bool:
    """Evaluate a flat boolean expression against the element map.

    Args:
        expr: Expression made of terms, '&', '|' and '!'
        element_map: Dictionary mapping term names to enabled state
        element: Element owning the expression, for error messages
        source: Expression to name in error messages (defaults to expr)

    Returns:
        Boolean value of the expression

    Raises:
        ConformanceParseError: expression is malformed
    """
    source = expr if source is None else source
    tokens = tokenize(expr, element_map, source, element)
    return BooleanParser(tokens, source, element).parse()


def evaluate_with_parentheses(expr, element_map, element=None) -> bool:
    """Evaluate a boolean expression that may contain parenthesized groups.

    The innermost group is evaluated first and replaced with its value until
    no parentheses remain.

    Args:
        expr: Boolean expression
        element_map: Dictionary mapping term names to enabled state
        element: Element owning the expression, for error messages

    Returns:
        Boolean value of the expression

    Raises:
        ConformanceParseError: unbalanced parentheses or malformed expression
    """
    source = expr
    logger.debug(f"Evaluating boolean expression '{expr}'")
    while "(" in expr or ")" in expr:
        stack = []
        group = None
        for index, char in enumerate(expr):
            if char == "(":
                stack.append(index)
            elif char == ")":
                if not stack:
                    raise ConformanceParseError(
                        "Unbalanced ')'", source, element
                    )
                group = (stack.pop(), index)
                break
        if group is None:
            raise ConformanceParseError("Unbalanced '('", source, element)

        start, end = group
        value = evaluate_boolean(expr[start + 1:end], element_map, element, source)
        literal = TOKEN_TRUE if value else TOKEN_FALSE
        # padded so the literal never fuses with a neighbouring term
        expr = f"{expr[:start]} {literal} {expr[end + 1:]}"
    return evaluate_boolean(expr, element_map, element, source)
