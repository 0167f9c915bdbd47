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
from typing import Dict, List

from zap_conformance.configs.constants import FEATURE_MAP_BIT_WIDTH
from zap_conformance.utils.helpers import convert_to_int

logger = logging.getLogger(__name__)


def get_enabled_bits_from_feature_map_value(feature_map_value) -> List[int]:
    """Get the bit positions set in a FeatureMap attribute value.

    Args:
        feature_map_value: FeatureMap value as int, decimal or hex string

    Returns:
        Sorted list of set bit positions
    """
    value = convert_to_int(feature_map_value)
    if value is None:
        return []
    return [bit for bit in range(FEATURE_MAP_BIT_WIDTH) if value & (1 << bit)]


def build_feature_map(features, enabled_feature_ids) -> Dict[str, bool]:
    """Map each feature code to whether its featureId is enabled."""
    enabled = set(enabled_feature_ids)
    return {feature["code"]: feature.get("featureId") in enabled for feature in features}


def build_feature_map_from_value(features, feature_map_value) -> Dict[str, bool]:
    """Map each feature code to whether its bit is set in the FeatureMap value."""
    enabled_bits = get_enabled_bits_from_feature_map_value(feature_map_value)
    feature_map = {}
    for feature in features:
        bit = convert_to_int(feature.get("bit"))
        feature_map[feature["code"]] = bit is not None and bit in enabled_bits
    return feature_map


def build_feature_conformance(features, device_type_features=None) -> Dict[str, str]:
    """Map each feature code to its conformance expression.

    A device type can override the conformance of a cluster feature; the
    override applies when the featureId matches, and the clusterRef too when
    both rows carry one.

    Args:
        features: List of cluster feature dictionaries
        device_type_features: List of device type feature dictionaries

    Returns:
        Dictionary mapping feature codes to conformance
    """
    feature_conformance = {}
    for feature in features:
        conformance = feature.get("conformance") or ""
        for device_type_feature in device_type_features or []:
            if device_type_feature.get("featureId") != feature.get("featureId"):
                continue
            cluster_ref = feature.get("clusterRef")
            device_cluster_ref = device_type_feature.get("clusterRef")
            if cluster_ref is not None and device_cluster_ref is not None:
                if cluster_ref != device_cluster_ref:
                    continue
            logger.debug(
                f"Device type overrides conformance of feature {feature['code']}: "
                f"{device_type_feature.get('conformance')}"
            )
            conformance = device_type_feature.get("conformance") or ""
            break
        feature_conformance[feature["code"]] = conformance
    return feature_conformance


def toggle_feature_map_bits(feature_map_value, bits) -> int:
    """Flip the given bits of a FeatureMap value.

    Raises:
        ValueError: value is not a valid FeatureMap value or a bit is out of range
    """
    value = convert_to_int(feature_map_value)
    if value is None:
        raise ValueError(f"Invalid FeatureMap value '{feature_map_value}'")
    for bit in bits:
        if not 0 <= bit < FEATURE_MAP_BIT_WIDTH:
            raise ValueError(f"FeatureMap bit {bit} out of range")
        value ^= 1 << bit
    return value
