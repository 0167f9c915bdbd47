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


class ConformanceParseError(ValueError):
    """Raised when a conformance expression cannot be parsed."""

    def __init__(self, message, expression=None, element=None, position=None):
        self.message = message
        self.expression = expression
        self.element = element
        self.position = position
        super().__init__(self._format())

    def _format(self):
        text = self.message
        if self.expression is not None:
            text += f" in conformance expression '{self.expression}'"
        if self.position is not None:
            text += f" at position {self.position}"
        if self.element:
            text += f" of element '{self.element}'"
        return text


class ConformanceResolutionError(RuntimeError):
    """Raised when feature conformance propagation does not settle."""

    def __init__(self, message, updated_keys=None, passes=None):
        self.updated_keys = list(updated_keys or [])
        self.passes = passes
        super().__init__(message)
