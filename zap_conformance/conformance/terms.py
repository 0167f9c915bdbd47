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

import re
from typing import List

from zap_conformance.configs.constants import TERM_PATTERN

TERM_REGEX = re.compile(TERM_PATTERN)


def get_terms_from_expression(expression) -> List[str]:
    """Get all terms referenced by a conformance expression.

    A term is an attribute, command, event or feature code, or one of the
    conformance abbreviations. Operators, brackets and punctuation are skipped.

    Args:
        expression: Conformance expression string

    Returns:
        List of terms in left to right order, duplicates included
    """
    if not expression:
        return []
    return TERM_REGEX.findall(expression)
