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
from typing import List

from zap_conformance.configs.constants import (
    CONFORMANCE_ABBREVIATIONS,
    CONFORMANCE_DESC,
)
from zap_conformance.conformance.terms import get_terms_from_expression

logger = logging.getLogger(__name__)


def check_missing_terms(expression, element_map) -> List[str]:
    """Get terms that are neither in the element map nor an abbreviation.

    A conformance depending on terms with unknown values cannot be resolved
    automatically, so callers use this to refuse changes.

    Args:
        expression: Conformance expression
        element_map: Dictionary mapping term names to enabled state

    Returns:
        List of missing terms
    """
    missing_terms = []
    for term in get_terms_from_expression(expression):
        if term not in element_map and term not in CONFORMANCE_ABBREVIATIONS:
            missing_terms.append(term)
    return missing_terms


def check_if_expression_has_term(expression, term) -> bool:
    """Check if the conformance expression references the given term."""
    return term in get_terms_from_expression(expression)


def filter_related_desc_elements(elements, feature_codes) -> list:
    """Get elements with desc conformance referencing any of the features.

    Args:
        elements: List of element dictionaries with a 'conformance' key
        feature_codes: List of feature codes

    Returns:
        Elements whose conformance contains 'desc' and one of the feature codes
    """
    related = []
    for element in elements:
        terms = get_terms_from_expression(element.get("conformance"))
        if CONFORMANCE_DESC not in terms:
            continue
        if any(code in terms for code in feature_codes):
            related.append(element)
    return related
