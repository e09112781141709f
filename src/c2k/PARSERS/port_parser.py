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
Parser for compose port specifications ("container" or "host:container").
"""
import re
from typing import Iterable, List
from ..MODELS.application_model import PortBinding, Protocol
from ..errors import PortSpecError

MAX_PORT = 65535

_DIGITS = re.compile(r'[0-9]+')

def _to_port(value: str, spec: str, part: str) -> int:
    """
    Parses one side of a port specification.

    :param value: The extracted substring.
    :param spec: The raw specification, for error reporting.
    :param part: "host" or "container".
    :return: The port number.
    :raises PortSpecError: If the value is not a decimal port number.
    """
    value = value.strip()
    if not _DIGITS.fullmatch(value):
        raise PortSpecError(spec, part)
    port = int(value)
    if port > MAX_PORT:
        raise PortSpecError(spec, part)
    return port

def parse_port_spec(spec: str) -> PortBinding:
    """
    Parses a single port specification.

    The first colon splits host from container port; anything after a
    second colon stays with the container port and makes it invalid.
    The protocol is always TCP.

    :param spec: e.g. "8080:80" or "3000".
    :return: The parsed binding.
    :raises PortSpecError: If either side is not a valid port.
    """
    if ':' in spec:
        host, container = spec.split(':', 1)
        return PortBinding(
            host_port=_to_port(host, spec, 'host'),
            container_port=_to_port(container, spec, 'container'),
            protocol=Protocol.TCP,
        )
    return PortBinding(container_port=_to_port(spec, spec, 'container'), protocol=Protocol.TCP)

def parse_port_specs(specs: Iterable[str]) -> List[PortBinding]:
    """
    Parses a list of port specifications. The first invalid entry aborts the
    whole list.

    :param specs: Raw specifications.
    :return: Parsed bindings, in input order.
    :raises PortSpecError: On the first invalid specification.
    """
    return [parse_port_spec(spec) for spec in specs]
