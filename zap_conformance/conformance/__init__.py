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

from .boolean_parser import evaluate_boolean, evaluate_with_parentheses
from .classifier import evaluate_conformance_expression, split_top_level
from .errors import ConformanceParseError, ConformanceResolutionError
from .predicates import (
    check_if_expression_has_term,
    check_missing_terms,
    filter_related_desc_elements,
)
from .resolver import fix_feature_conformance_recursively
from .terms import get_terms_from_expression

__all__ = [
    "evaluate_boolean",
    "evaluate_with_parentheses",
    "evaluate_conformance_expression",
    "split_top_level",
    "ConformanceParseError",
    "ConformanceResolutionError",
    "check_if_expression_has_term",
    "check_missing_terms",
    "filter_related_desc_elements",
    "fix_feature_conformance_recursively",
    "get_terms_from_expression",
]
