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

"""
ZAP Conformance Tool

A Python package for evaluating Matter/Zigbee conformance expressions and
propagating feature enablement changes through dependent conformances.
"""

# Public API exports
from .configs.constants import ConformanceResult
from .conformance.classifier import evaluate_conformance_expression
from .conformance.errors import ConformanceParseError, ConformanceResolutionError
from .conformance.predicates import (
    check_missing_terms,
    check_if_expression_has_term,
    filter_related_desc_elements,
)
from .conformance.resolver import fix_feature_conformance_recursively
from .conformance.terms import get_terms_from_expression
from .features.feature_update import check_element_conformance

__all__ = [
    "ConformanceResult",
    "ConformanceParseError",
    "ConformanceResolutionError",
    "evaluate_conformance_expression",
    "check_missing_terms",
    "check_if_expression_has_term",
    "filter_related_desc_elements",
    "fix_feature_conformance_recursively",
    "get_terms_from_expression",
    "check_element_conformance",
]
