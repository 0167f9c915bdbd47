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
Element updates required by a feature toggle.

When a feature of a cluster is enabled or disabled, attributes, commands,
events and other features whose conformance references it may become
mandatory or not supported. check_element_conformance() computes those
updates together with the warnings to show before the change is applied.
"""

import logging
from typing import Dict, List, Optional

from zap_conformance.configs.constants import ConformanceResult
from zap_conformance.conformance.classifier import evaluate_conformance_expression
from zap_conformance.conformance.predicates import (
    check_if_expression_has_term,
    check_missing_terms,
    filter_related_desc_elements,
)
from zap_conformance.conformance.resolver import fix_feature_conformance_recursively
from zap_conformance.features.feature_map import (
    build_feature_conformance,
    build_feature_map_from_value,
    toggle_feature_map_bits,
)
from zap_conformance.reporting.report import generate_feature_update_report
from zap_conformance.utils.helpers import (
    convert_to_int,
    load_json_file,
    write_to_json_file,
    write_to_text_file,
)

logger = logging.getLogger(__name__)

ELEMENT_TYPES = ["attributes", "commands", "events"]

# Key holding the enabled state of each element type
ELEMENT_ENABLED_KEYS = {
    "attributes": "included",
    "commands": "isEnabled",
    "events": "included",
}


def is_element_enabled(element, element_type) -> bool:
    """Check if an attribute, command or event is enabled."""
    return bool(element.get(ELEMENT_ENABLED_KEYS[element_type]))


def build_element_map(elements, feature_map) -> Dict[str, bool]:
    """Combine the feature map with the enabled state of cluster elements.

    Args:
        elements: Dictionary with 'attributes', 'commands' and 'events' lists
        feature_map: Dictionary mapping feature codes to enabled state

    Returns:
        Dictionary mapping feature codes and element names to enabled state
    """
    element_map = dict(feature_map)
    for element_type in ELEMENT_TYPES:
        for element in elements.get(element_type, []):
            name = element.get("name")
            if name:
                element_map[name] = is_element_enabled(element, element_type)
    return element_map


def _describe_feature(feature_data, endpoint_id=None) -> str:
    description = "Check Feature Compliance"
    if endpoint_id is not None:
        description += f" on endpoint: {endpoint_id},"
    cluster = feature_data.get("cluster")
    if cluster:
        description += f" cluster: {cluster},"
    description += f" feature: {feature_data.get('name')} ({feature_data.get('code')})"
    bit = feature_data.get("bit")
    if bit is not None:
        description += f" (bit {bit} in featureMap attribute)"
    return description


def generate_feature_warnings(
    feature_data, element_map, all_elements, endpoint_id=None
) -> dict:
    """Get warnings for toggling a feature and whether the change must be refused.

    Args:
        feature_data: Feature dictionary with 'code', 'name', 'conformance'
            and 'enabled' set to the requested state
        element_map: Dictionary mapping term names to enabled state
        all_elements: Attributes, commands and events of the cluster
        endpoint_id: Endpoint identifier used in messages

    Returns:
        Dictionary with 'displayWarning', 'warningMessage' and 'disableChange'
    """
    code = feature_data.get("code")
    enabled = bool(feature_data.get("enabled"))
    action = "enabled" if enabled else "disabled"
    conformance = feature_data.get("conformance") or ""
    prefix = _describe_feature(feature_data, endpoint_id)
    warnings = []
    disable_change = False

    # a feature without conformance carries no restriction
    result = None
    if conformance.strip():
        result = evaluate_conformance_expression(conformance, element_map, code)
    missing_terms = check_missing_terms(conformance, element_map)

    if result == ConformanceResult.DESC:
        disable_change = True
        warnings.append(
            f"{prefix} cannot be {action} as its conformance is too complex "
            f"to resolve automatically: {conformance}"
        )
    elif missing_terms:
        disable_change = True
        warnings.append(
            f"{prefix} cannot be {action} as its conformance depends on "
            f"elements with unknown values: {', '.join(missing_terms)}"
        )
    elif result == ConformanceResult.MANDATORY and not enabled:
        warnings.append(f"{prefix} is mandatory and should be enabled")
    elif result == ConformanceResult.NOT_SUPPORTED and enabled:
        warnings.append(f"{prefix} is not supported and should be disabled")

    if not disable_change:
        desc_elements = filter_related_desc_elements(all_elements, [code])
        if desc_elements:
            names = ", ".join(element.get("name", "Unknown") for element in desc_elements)
            warnings.append(
                f"{prefix} is {action}, the following elements have descriptive "
                f"conformance depending on it and need to be updated manually: {names}"
            )

    for warning in warnings:
        logger.warning(warning)

    return {
        "displayWarning": bool(warnings),
        "warningMessage": warnings,
        "disableChange": disable_change,
    }


def get_elements_to_update(
    elements, element_map, feature_codes: Optional[List[str]] = None
) -> Dict[str, list]:
    """Get elements whose enabled state conflicts with their conformance.

    Elements with descriptive conformance or depending on unknown terms are
    left untouched.

    Args:
        elements: Dictionary with 'attributes', 'commands' and 'events' lists
        element_map: Dictionary mapping term names to enabled state
        feature_codes: Only consider elements referencing one of these
            features, all elements when None

    Returns:
        Dictionary mapping element type to elements, each copied with a
        'value' key holding the required enabled state
    """
    updates = {}
    for element_type in ELEMENT_TYPES:
        to_update = []
        for element in elements.get(element_type, []):
            conformance = element.get("conformance")
            if not conformance:
                continue
            if feature_codes is not None and not any(
                check_if_expression_has_term(conformance, code) for code in feature_codes
            ):
                continue

            name = element.get("name")
            missing_terms = check_missing_terms(conformance, element_map)
            if missing_terms:
                logger.debug(
                    f"Skipping {name}: conformance '{conformance}' depends on "
                    f"unknown terms {missing_terms}"
                )
                continue

            result = evaluate_conformance_expression(conformance, element_map, name)
            enabled = is_element_enabled(element, element_type)
            if result == ConformanceResult.MANDATORY and not enabled:
                to_update.append({**element, "value": True})
            elif result == ConformanceResult.NOT_SUPPORTED and enabled:
                to_update.append({**element, "value": False})
        updates[element_type] = to_update
    return updates


def check_element_conformance(
    elements,
    feature_map,
    feature_data=None,
    feature_conformance=None,
    endpoint_id=None,
) -> dict:
    """Check which elements and features must change for a feature toggle.

    Without feature_data every element of the cluster is checked against the
    current feature map, which is what a freshly selected cluster needs.

    Args:
        elements: Dictionary with 'attributes', 'commands' and 'events' lists
        feature_map: Dictionary mapping feature codes to current enabled state
        feature_data: Toggled feature with 'code', 'name', 'conformance' and
            'enabled' holding the requested state
        feature_conformance: Dictionary mapping feature codes to conformance,
            used to cascade the toggle to other features
        endpoint_id: Endpoint identifier used in messages

    Returns:
        Dictionary with 'attributesToUpdate', 'commandsToUpdate',
        'eventsToUpdate', 'featuresToUpdate', 'displayWarning',
        'warningMessage' and 'disableChange'
    """
    element_map = build_element_map(elements, feature_map)
    result = {
        "attributesToUpdate": [],
        "commandsToUpdate": [],
        "eventsToUpdate": [],
        "featuresToUpdate": {},
        "displayWarning": False,
        "warningMessage": [],
        "disableChange": False,
    }

    feature_codes = None
    if feature_data is not None:
        code = feature_data.get("code")
        element_map[code] = bool(feature_data.get("enabled"))
        all_elements = [
            element
            for element_type in ELEMENT_TYPES
            for element in elements.get(element_type, [])
        ]
        result.update(
            generate_feature_warnings(feature_data, element_map, all_elements, endpoint_id)
        )
        if result["disableChange"]:
            logger.info(f"Change of feature {code} refused")
            return result

        feature_codes = [code]
        if feature_conformance:
            resolved = fix_feature_conformance_recursively(
                feature_conformance, element_map, [code]
            )
            result["featuresToUpdate"] = resolved["updatedFeatures"]
            feature_codes = resolved["updatedKeys"]
            logger.debug(f"Features updated by conformance: {resolved['updatedFeatures']}")

    updates = get_elements_to_update(elements, element_map, feature_codes)
    result["attributesToUpdate"] = updates["attributes"]
    result["commandsToUpdate"] = updates["commands"]
    result["eventsToUpdate"] = updates["events"]
    return result


def check_feature_update(cluster_data, feature_code, enabled) -> dict:
    """Check a feature toggle against cluster data produced by the query layer.

    Args:
        cluster_data: Dictionary with 'features', 'attributes', 'commands',
            'events', 'featureMapValue' and optionally 'cluster',
            'endpointId' and 'deviceTypeFeatures'
        feature_code: Code of the toggled feature
        enabled: Requested state of the feature

    Returns:
        Result of check_element_conformance with 'featureMapValue' set to the
        FeatureMap value after the change, unchanged when the change is refused

    Raises:
        ValueError: feature_code is not a feature of the cluster
    """
    features = cluster_data.get("features", [])
    feature = next((f for f in features if f.get("code") == feature_code), None)
    if feature is None:
        raise ValueError(
            f"Feature {feature_code} not found in cluster "
            f"{cluster_data.get('cluster', 'Unknown')}"
        )

    feature_map_value = convert_to_int(cluster_data.get("featureMapValue")) or 0
    feature_map = build_feature_map_from_value(features, feature_map_value)
    feature_conformance = build_feature_conformance(
        features, cluster_data.get("deviceTypeFeatures")
    )
    feature_data = {
        **feature,
        "cluster": cluster_data.get("cluster", feature.get("cluster")),
        "conformance": feature_conformance.get(feature_code, ""),
        "enabled": enabled,
    }

    result = check_element_conformance(
        cluster_data,
        feature_map,
        feature_data,
        feature_conformance,
        cluster_data.get("endpointId"),
    )

    if not result["disableChange"]:
        changed_codes = list(result["featuresToUpdate"])
        if feature_map.get(feature_code) != bool(enabled):
            changed_codes.insert(0, feature_code)
        bits = [
            convert_to_int(f.get("bit"))
            for f in features
            if f.get("code") in changed_codes and convert_to_int(f.get("bit")) is not None
        ]
        feature_map_value = toggle_feature_map_bits(feature_map_value, bits)
    result["featureMapValue"] = feature_map_value
    return result


def check_feature_update_file(
    file_path, feature_code, enabled, output_path, report_path=None
) -> bool:
    """Check a feature toggle described by a JSON file and save the result.

    Args:
        file_path: Path to the cluster data JSON file
        feature_code: Code of the toggled feature
        enabled: Requested state of the feature
        output_path: Path of the result JSON file
        report_path: Path of the text report, no report when None

    Returns:
        True if the change is allowed, False otherwise
    """
    try:
        logger.info(f"Reading cluster data file: {file_path}")
        cluster_data = load_json_file(file_path)

        result = check_feature_update(cluster_data, feature_code, enabled)
        write_to_json_file(output_path, result)
        logger.info(f"Feature update result saved to: {output_path}")

        if report_path:
            feature = next(
                f for f in cluster_data["features"] if f.get("code") == feature_code
            )
            feature_data = {
                **feature,
                "cluster": cluster_data.get("cluster", "Unknown"),
                "enabled": enabled,
            }
            write_to_text_file(
                report_path, generate_feature_update_report(result, feature_data)
            )
            logger.info(f"Feature update report saved to: {report_path}")

        return not result["disableChange"]
    except Exception as e:
        raise ValueError(f"Feature update check error: {str(e)}") from e
