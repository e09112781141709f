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
Models for the normalized application model produced by the translator.
"""
from typing import List, Dict, Optional
from pydantic import BaseModel, Field
from enum import Enum

class Protocol(str, Enum):
    """
    Transport protocol of a port binding.
    """
    TCP = "TCP"
    UDP = "UDP"

class PortBinding(BaseModel):
    """
    Maps an optional host port onto a container port.
    """
    host_port: Optional[int] = None
    container_port: int
    protocol: Protocol = Protocol.TCP

class EnvVar(BaseModel):
    """
    A single environment variable handed to the container.
    """
    name: str
    value: str

class ServiceRecord(BaseModel):
    """
    The normalized form of one compose service.
    """
    # Identity
    image: str = ""
    container_name: Optional[str] = None

    # Runtime
    working_dir: Optional[str] = None
    volumes: List[str] = []  # "source[:target[:mode]]", passed through as-is
    cap_add: List[str] = []
    cap_drop: List[str] = []
    expose: List[str] = []
    privileged: bool = False
    restart: str = ""
    user: str = ""

    # Resources
    cpuset: str = ""
    cpu_shares: int = 0
    cpu_quota: int = 0

    # Networking
    ports: List[PortBinding] = []

    # Environment
    environment: List[EnvVar] = []

    # Metadata
    annotations: Dict[str, str] = {}

class ApplicationModel(BaseModel):
    """
    All normalized services of a project, keyed by service name.
    """
    service_configs: Dict[str, ServiceRecord] = Field(default_factory=dict)

class TranslationResult(BaseModel):
    """
    Outcome of a translation: either a model or the reason it failed.
    """
    model: Optional[ApplicationModel] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True when the translation produced a model."""
        return self.error is None
