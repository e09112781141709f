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
Utilities for string interpolation using environment variables.
"""
import logging
import re
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)

# Group 1: escaped "$$"
# Group 2: braced name, group 3: modifier (":-", "-", ":+", "+"), group 4: its value
# Group 5: bare $NAME
_PATTERN = re.compile(
    r'\$(?:(\$)'
    r'|\{([A-Za-z_][A-Za-z0-9_]*)(?:(:?[-+])([^}]*))?\}'
    r'|([A-Za-z_][A-Za-z0-9_]*))'
)

class EnvironmentInterpolator:
    """
    Utility for interpolating environment variables in strings.
    Supports $VAR, ${VAR}, ${VAR:-default}, ${VAR-default}, ${VAR:+value},
    ${VAR+value} and $$ as a literal dollar sign.
    """
    @staticmethod
    def interpolate(template: str, context: Dict[str, str], missing: Optional[Set[str]] = None) -> str:
        """
        Interpolates environment variables in the template string using the provided context.

        Unset variables without a default resolve to an empty string, with one
        warning per variable name.

        :param template: The string containing placeholders.
        :param context: The environment variables context.
        :param missing: Names already reported as unset; shared across calls to warn once.
        :return: The interpolated string.
        """
        if missing is None:
            missing = set()

        def replace(match):
            """
            Internal replacement function for re.sub.
            """
            if match.group(1):
                return '$'

            var_name = match.group(2) or match.group(5)
            modifier = match.group(3)
            alt_value = match.group(4) or ''
            value = context.get(var_name)

            if modifier == ':-':
                return value if value else alt_value
            if modifier == '-':
                return value if value is not None else alt_value
            if modifier == ':+':
                return alt_value if value else ''
            if modifier == '+':
                return alt_value if value is not None else ''

            if value is not None:
                return value
            if var_name not in missing:
                missing.add(var_name)
                logger.warning("The %s variable is not set. Substituting a blank string.", var_name)
            return ''

        return _PATTERN.sub(replace, template)

    @staticmethod
    def interpolate_values(data: Any, context: Dict[str, str]) -> Any:
        """
        Interpolates every string scalar of a loaded document. Mapping keys
        and non-string scalars are left as they are, so substituted text can
        never change the structure of the document.

        :param data: The loaded YAML document.
        :param context: The environment variables context.
        :return: A copy of the document with strings interpolated.
        """
        missing: Set[str] = set()

        def walk(node):
            if isinstance(node, str):
                return EnvironmentInterpolator.interpolate(node, context, missing)
            if isinstance(node, dict):
                return {k: walk(v) for k, v in node.items()}
            if isinstance(node, list):
                return [walk(v) for v in node]
            return node

        return walk(data)
