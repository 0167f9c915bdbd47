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
from typing import Dict, List, Optional

from zap_conformance.configs.constants import ConformanceResult
from zap_conformance.conformance.classifier import evaluate_conformance_expression
from zap_conformance.conformance.errors import ConformanceResolutionError
from zap_conformance.conformance.terms import get_terms_from_expression

logger = logging.getLogger(__name__)


def fix_feature_conformance_recursively(
    feature_conformance: Dict[str, str],
    element_map: Dict[str, bool],
    updated_keys: Optional[List[str]] = None,
    updated_features: Optional[Dict[str, bool]] = None,
    max_passes: Optional[int] = None,
) -> dict:
    """Propagate feature changes through dependent feature conformances.

    Features whose conformance references an already updated key are
    re-evaluated; a feature that became mandatory is enabled and one that
    became not supported is disabled. Passes repeat until nothing changes.
    Each key is updated at most once, so the number of changing passes is
    bounded by the number of features.

    element_map, updated_keys and updated_features are modified in place.

    Args:
        feature_conformance: Dictionary mapping feature codes to conformance
        element_map: Dictionary mapping term names to enabled state
        updated_keys: Codes already updated, usually seeded with the
            feature toggled by the user
        updated_features: Dictionary of updated features and their new state
        max_passes: Maximum number of passes, defaults to the number of
            features plus one

    Returns:
        Dictionary with 'updatedFeatures' and 'updatedKeys'

    Raises:
        ConformanceResolutionError: propagation did not settle within max_passes
        ConformanceParseError: a feature conformance is malformed
    """
    if updated_keys is None:
        updated_keys = []
    if updated_features is None:
        updated_features = {}
    if max_passes is None:
        max_passes = len(feature_conformance) + 1

    passes = 0
    changed = True
    while changed:
        if passes >= max_passes:
            raise ConformanceResolutionError(
                f"Feature conformance did not settle after {passes} passes, "
                f"updated features: {updated_keys}",
                updated_keys,
                passes,
            )
        passes += 1
        changed = False
        logger.debug(f"Feature conformance pass {passes}, updated keys: {updated_keys}")

        for key, expression in feature_conformance.items():
            if key in updated_keys:
                continue

            terms = get_terms_from_expression(expression)
            if not any(term in updated_keys for term in terms):
                continue

            conformance = evaluate_conformance_expression(expression, element_map, key)
            logger.debug(f"Conformance for {key}: {conformance}: {expression}")

            if conformance == ConformanceResult.MANDATORY and not element_map.get(key):
                logger.debug(f"Enabling feature {key} required by conformance")
                element_map[key] = True
                updated_keys.append(key)
                updated_features[key] = True
                changed = True
            elif conformance == ConformanceResult.NOT_SUPPORTED and element_map.get(key):
                logger.debug(f"Disabling feature {key} not supported by conformance")
                element_map[key] = False
                updated_keys.append(key)
                updated_features[key] = False
                changed = True

    return {"updatedFeatures": updated_features, "updatedKeys": updated_keys}
