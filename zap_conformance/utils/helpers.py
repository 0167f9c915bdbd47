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

import json
import logging
import os
from typing import Any, Optional

logger = logging.getLogger(__name__)

TRUE_STRINGS = ("1", "true", "yes", "on", "enabled")
FALSE_STRINGS = ("0", "false", "no", "off", "disabled")


def convert_to_int(value) -> Optional[int]:
    """Convert value to integer.

    Accepts integers and decimal or 0x prefixed strings. 0 is a valid value.

    Args:
        value: The value to convert
    Returns:
        The converted value, None if it cannot be converted
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        text = str(value).strip()
        if not text:
            return None
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text, 10)
    except ValueError as e:
        logger.error(f"Error converting value to integer: {e}")
        return None


def parse_bool(value) -> bool:
    """Parse a boolean from a CLI or JSON value.

    Raises:
        ValueError: value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in TRUE_STRINGS:
        return True
    if text in FALSE_STRINGS:
        return False
    raise ValueError(f"Invalid boolean value '{value}'")


def load_json_file(file_path: str) -> Any:
    """Load and parse a JSON file with error handling"""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except Exception as e:
        raise Exception(f"Error reading JSON file {file_path}: {str(e)}") from e


def write_to_json_file(file_path: str, data: Any) -> bool:
    """Write data to a JSON file"""
    try:
        parent_dir = os.path.dirname(os.path.abspath(file_path))
        os.makedirs(parent_dir, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=4, sort_keys=True)
        return True
    except Exception as e:
        raise Exception(f"Error writing to {file_path}: {str(e)}") from e


def write_to_text_file(file_path: str, text: str) -> bool:
    """Write text to a file, creating the parent directory"""
    try:
        parent_dir = os.path.dirname(os.path.abspath(file_path))
        os.makedirs(parent_dir, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(text)
        return True
    except Exception as e:
        raise Exception(f"Error writing to {file_path}: {str(e)}") from e
