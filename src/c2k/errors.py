# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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
Exceptions raised while loading and translating compose projects.

The core only raises; callers (CLI, embedding services) decide how to report.
"""


class TranslationError(Exception):
    """Base error for a failed translation."""
    pass


class ComposeLoadError(TranslationError):
    """The compose file could not be read, parsed or validated."""
    pass


class PortSpecError(TranslationError):
    """
    A port specification could not be parsed.

    :param spec: The raw port specification string.
    :param part: Which side failed, ``"host"`` or ``"container"``.
    """
    def __init__(self, spec: str, part: str):
        self.spec = spec
        self.part = part
        super().__init__(f"Invalid {part} port of {spec}")
