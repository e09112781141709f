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
Models for a loaded Docker Compose project, before translation.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NETWORK = "default"

class ServiceNetwork(BaseModel):
    """
    A network a service attaches to.
    """
    name: str
    aliases: List[str] = []

class ComposeService(BaseModel):
    """
    One service as declared in the compose file.

    Keys the translator does not model are kept as extra fields so that
    they can be reported as unsupported.
    """
    model_config = ConfigDict(extra="allow")

    image: str = ""
    container_name: Optional[str] = None
    working_dir: Optional[str] = None

    environment: Dict[str, str] = {}
    ports: List[str] = []
    expose: List[str] = []
    networks: List[ServiceNetwork] = Field(
        default_factory=lambda: [ServiceNetwork(name=DEFAULT_NETWORK)]
    )

    volumes: List[str] = []

    cap_add: List[str] = []
    cap_drop: List[str] = []
    privileged: bool = False
    restart: str = ""
    user: str = ""

    cpuset: str = ""
    cpu_shares: int = 0
    cpu_quota: int = 0

    labels: Dict[str, str] = {}

class ComposeProject(BaseModel):
    """
    A parsed docker-compose.yml file.
    """
    version: Optional[str] = None
    services: Dict[str, ComposeService] = {}
    networks: Dict[str, Any] = {}
    volumes: Dict[str, Any] = {}
