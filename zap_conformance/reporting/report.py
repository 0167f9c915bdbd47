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
import sys
import io

ELEMENT_SECTIONS = [
    ("featuresToUpdate", "Feature"),
    ("attributesToUpdate", "Attribute"),
    ("commandsToUpdate", "Command"),
    ("eventsToUpdate", "Event"),
]


def generate_feature_update_report(result, feature_data=None):
    """Generate the feature update report.

    Args:
        result: Result of check_element_conformance
        feature_data: The toggled feature

    Returns:
        Formatted feature update report as string
    """
    old_stdout = sys.stdout
    sys.stdout = captured_output = io.StringIO()

    try:
        print_feature_update_summary(result, feature_data)
        report_text = captured_output.getvalue()
    finally:
        sys.stdout = old_stdout

    return report_text


def print_table(headers, rows, title=None):
    """Print a formatted table

    Args:
        headers: The headers of the table
        rows: The rows of the table
        title: The title of the table

    """
    if title:
        print(f"\n{title}")
        print("=" * len(title))

    col_widths = [
        max(len(str(header)), max(len(str(row[i])) for row in rows) if rows else 0)
        for i, header in enumerate(headers)
    ]

    header_row = " | ".join(
        str(header).ljust(col_widths[i]) for i, header in enumerate(headers)
    )
    print(header_row)
    print("-" * len(header_row))

    for row in rows:
        row_str = " | ".join(
            str(row[i]).ljust(col_widths[i]) for i in range(len(headers))
        )
        print(row_str)
    print()


def _update_rows(result):
    rows = []
    for key, element_type in ELEMENT_SECTIONS:
        updates = result.get(key) or []
        if isinstance(updates, dict):
            # featuresToUpdate maps feature code to its new state
            for code, value in updates.items():
                rows.append([element_type, code, "Enable" if value else "Disable"])
            continue
        for element in updates:
            action = "Enable" if element.get("value") else "Disable"
            rows.append([element_type, element.get("name", "Unknown"), action])
    return rows


def print_feature_update_summary(result, feature_data=None):
    """Print the elements to update and the warnings of a feature toggle.

    Args:
        result: Result of check_element_conformance
        feature_data: The toggled feature
    """
    if not result:
        print("No feature update data available")
        return

    print("=" * 80)
    print("FEATURE UPDATE REPORT")
    print("=" * 80)

    if feature_data:
        state = "Enable" if feature_data.get("enabled") else "Disable"
        print_table(
            ["Cluster", "Feature", "Code", "Requested"],
            [
                [
                    feature_data.get("cluster", "Unknown"),
                    feature_data.get("name", "Unknown"),
                    feature_data.get("code", "Unknown"),
                    state,
                ]
            ],
            "REQUESTED CHANGE",
        )

    status = "REFUSED" if result.get("disableChange") else "ALLOWED"
    print(f"Change status: {status}")

    rows = _update_rows(result)
    if rows:
        print_table(["Type", "Name", "Action"], rows, "ELEMENTS TO UPDATE")
    else:
        print("\nNo elements need to be updated\n")

    warnings = result.get("warningMessage") or []
    if warnings:
        print("WARNINGS")
        print("=" * 8)
        for warning in warnings:
            print(f"   • {warning}")
    print("=" * 80)
