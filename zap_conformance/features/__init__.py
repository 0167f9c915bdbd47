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

from .feature_map import (
    build_feature_conformance,
    build_feature_map,
    build_feature_map_from_value,
    get_enabled_bits_from_feature_map_value,
    toggle_feature_map_bits,
)
from .feature_update import check_element_conformance

__all__ = [
    "build_feature_conformance",
    "build_feature_map",
    "build_feature_map_from_value",
    "get_enabled_bits_from_feature_map_value",
    "toggle_feature_map_bits",
    "check_element_conformance",
]
