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

import enum

# Conformance abbreviations used inside conformance expressions
CONFORMANCE_MANDATORY = "M"
CONFORMANCE_OPTIONAL = "O"
CONFORMANCE_DEPRECATED = "D"
CONFORMANCE_DISALLOWED = "X"
CONFORMANCE_PROVISIONAL = "P"
CONFORMANCE_DESC = "desc"

CONFORMANCE_ABBREVIATIONS = [
    CONFORMANCE_MANDATORY,
    CONFORMANCE_OPTIONAL,
    CONFORMANCE_DEPRECATED,
    CONFORMANCE_DISALLOWED,
    CONFORMANCE_PROVISIONAL,
    CONFORMANCE_DESC,
]


class ConformanceResult(str, enum.Enum):
    """Outcome of classifying a conformance expression."""

    MANDATORY = "mandatory"
    OPTIONAL = "optional"
    PROVISIONAL = "provisional"
    NOT_SUPPORTED = "notSupported"
    DESC = "desc"

    def __str__(self):
        return self.value


CONFORMANCE_RESULTS = [result.value for result in ConformanceResult]

# Identifier pattern of a term (attribute, command, event or feature code)
TERM_PATTERN = r"[A-Za-z][A-Za-z0-9_]*"

# FeatureMap attribute is a 32 bit bitmap
FEATURE_MAP_BIT_WIDTH = 32

DEFAULT_OUTPUT_DIR = "out"
DEFAULT_RESOLVED_FEATURES_FILE = "resolved_features.json"
DEFAULT_FEATURE_UPDATE_FILE = "feature_update.json"
