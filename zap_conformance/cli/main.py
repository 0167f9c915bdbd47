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

A command-line utility for evaluating Matter/Zigbee conformance expressions
and resolving feature dependencies of a cluster.

This tool provides the following major capabilities:
  • evaluate: classify a conformance expression against enabled elements
  • missing-terms: list terms of an expression with unknown values
  • resolve-features: cascade feature changes through feature conformance
  • check-feature-update: compute element updates and warnings for a
    feature toggle
"""

import click
import sys
import logging
import os
from zap_conformance.configs.constants import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_RESOLVED_FEATURES_FILE,
    DEFAULT_FEATURE_UPDATE_FILE,
    ConformanceResult,
)
from zap_conformance.conformance.errors import (
    ConformanceParseError,
    ConformanceResolutionError,
)
from zap_conformance.utils.helpers import load_json_file, parse_bool


def setup_logging(verbose):
    """Configure logging behavior based on verbosity."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s: %(filename)s:%(lineno)d - %(message)s",
        )
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(levelname)s: %(filename)s:%(lineno)d - %(message)s",
        )


def parse_element_options(ctx, param, value):
    """Parse repeated NAME=BOOL options into an element map."""
    element_map = {}
    for item in value:
        name, separator, state = item.partition("=")
        if not separator or not name.strip():
            raise click.BadParameter(f"Expected NAME=BOOL, got '{item}'")
        try:
            element_map[name.strip()] = parse_bool(state)
        except ValueError as e:
            raise click.BadParameter(str(e))
    return element_map


def load_json_or_fail(file_path):
    """Load a JSON input file, exiting with an error message on failure."""
    try:
        return load_json_file(file_path)
    except Exception as e:
        fail(str(e))


def parse_bool_values(values, source):
    """Parse the enabled states of a JSON object with parse_bool."""
    parsed = {}
    for name, state in values.items():
        try:
            parsed[name] = parse_bool(state)
        except ValueError as e:
            raise click.BadParameter(f"{e} for '{name}' in {source}")
    return parsed


def build_element_map(elements, elements_file):
    """Merge the elements file with the --element options."""
    element_map = {}
    if elements_file:
        data = load_json_or_fail(elements_file)
        if not isinstance(data, dict):
            raise click.BadParameter(
                f"Elements file must contain a JSON object: {elements_file}"
            )
        element_map.update(parse_bool_values(data, elements_file))
    element_map.update(elements)
    return element_map


def fail(message):
    click.echo(click.style(message, fg="red", bold=True))
    sys.exit(1)


element_option = click.option(
    "--element",
    "-e",
    "elements",
    multiple=True,
    callback=parse_element_options,
    help="Enabled state of a term as NAME=BOOL, may be repeated",
)
elements_file_option = click.option(
    "--elements-file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON object mapping term names to enabled state",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable detailed debug logging",
)


@click.group()
def cli():
    """ZAP Conformance Tool

    A command-line utility for evaluating conformance expressions and
    resolving feature dependencies of Matter/Zigbee clusters.

    \b
    Common Use Cases:
      # Classify a conformance expression
      zap-conformance evaluate "A & B, [!C]" -e A=1 -e B=0

      # Cascade a feature change through the cluster feature conformance
      zap-conformance resolve-features features.json --updated-key LT

      # Check the elements to update when enabling a feature
      zap-conformance check-feature-update cluster.json --feature LT --enable
    """
    pass


@cli.command(name="evaluate")
@click.argument("expression")
@element_option
@elements_file_option
@verbose_option
def evaluate_command(expression, elements, elements_file, verbose):
    """Classify a conformance expression

    Prints one of mandatory, optional, provisional, notSupported or desc.
    Terms without a value are treated as disabled.
    """
    setup_logging(verbose)

    from zap_conformance.conformance.classifier import evaluate_conformance_expression

    element_map = build_element_map(elements, elements_file)
    try:
        result = evaluate_conformance_expression(expression, element_map)
    except ConformanceParseError as e:
        fail(f"Error parsing conformance: {e}")

    color = "yellow" if result == ConformanceResult.DESC else "green"
    click.echo(click.style(result, fg=color, bold=True))


@cli.command(name="missing-terms")
@click.argument("expression")
@element_option
@elements_file_option
@verbose_option
def missing_terms_command(expression, elements, elements_file, verbose):
    """List terms of a conformance expression without a known value"""
    setup_logging(verbose)

    from zap_conformance.conformance.predicates import check_missing_terms

    element_map = build_element_map(elements, elements_file)
    missing_terms = check_missing_terms(expression, element_map)
    for term in missing_terms:
        click.echo(term)
    if not missing_terms:
        click.echo(click.style("NO MISSING TERMS", fg="green", bold=True))


@cli.command(name="resolve-features")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--updated-key",
    "updated_keys",
    multiple=True,
    help="Code of a feature already changed, may be repeated",
)
@click.option(
    "--output-path",
    type=click.Path(),
    help="Path to save the resolved features JSON",
)
@verbose_option
def resolve_features_command(file_path, updated_keys, output_path, verbose):
    """Cascade feature changes through feature conformance

    FILE_PATH is a JSON file with 'featureConformance' (feature code to
    conformance) and 'featureMap' (feature code to enabled state), and
    optionally 'updatedKeys'.
    """
    setup_logging(verbose)

    from zap_conformance.conformance.resolver import fix_feature_conformance_recursively
    from zap_conformance.utils.helpers import write_to_json_file

    if not output_path:
        output_path = os.path.join(
            os.getcwd(), DEFAULT_OUTPUT_DIR, DEFAULT_RESOLVED_FEATURES_FILE
        )

    data = load_json_or_fail(file_path)
    if not isinstance(data, dict):
        raise click.BadParameter(f"Features file must contain a JSON object: {file_path}")
    feature_map = parse_bool_values(data.get("featureMap", {}), file_path)
    keys = list(data.get("updatedKeys", [])) + [
        key for key in updated_keys if key not in data.get("updatedKeys", [])
    ]
    try:
        resolved = fix_feature_conformance_recursively(
            data.get("featureConformance", {}), feature_map, keys
        )
    except (ConformanceParseError, ConformanceResolutionError) as e:
        fail(f"Error resolving features: {e}")

    resolved["featureMap"] = feature_map
    write_to_json_file(output_path, resolved)
    for code, state in resolved["updatedFeatures"].items():
        click.echo(f"{code}: {'enable' if state else 'disable'}")
    click.echo(click.style("FEATURE RESOLUTION COMPLETED", fg="green", bold=True))


@cli.command(name="check-feature-update")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--feature", "feature_code", required=True, help="Code of the toggled feature")
@click.option(
    "--enable/--disable",
    "enabled",
    required=True,
    help="Requested state of the feature",
)
@click.option(
    "--output-path",
    type=click.Path(),
    help="Path to save the feature update JSON",
)
@click.option(
    "--report-path",
    type=click.Path(),
    help="Path to save a text report of the feature update",
)
@verbose_option
def check_feature_update_command(
    file_path, feature_code, enabled, output_path, report_path, verbose
):
    """Check the element updates required by a feature toggle

    FILE_PATH is a JSON file with the cluster 'features', 'attributes',
    'commands', 'events' and 'featureMapValue'.
    """
    setup_logging(verbose)

    from zap_conformance.features.feature_update import check_feature_update_file

    if not output_path:
        output_path = os.path.join(
            os.getcwd(), DEFAULT_OUTPUT_DIR, DEFAULT_FEATURE_UPDATE_FILE
        )

    try:
        allowed = check_feature_update_file(
            file_path, feature_code, enabled, output_path, report_path
        )
    except ValueError as e:
        fail(str(e))

    if allowed:
        click.echo(click.style("FEATURE UPDATE ALLOWED", fg="green", bold=True))
    else:
        click.echo(click.style("FEATURE UPDATE REFUSED", fg="red", bold=True))
        sys.exit(1)


def main():
    """Main entry point for zap-conformance."""
    cli()


if __name__ == "__main__":
    main()
