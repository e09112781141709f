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
Detection of compose features that have no counterpart in the application model.

Every condition here only logs a warning; translation carries on.
"""
import logging
from typing import Set
from ..MODELS.compose_project import ComposeProject, ComposeService, DEFAULT_NETWORK

logger = logging.getLogger(__name__)

class UnsupportedFeatureDetector:
    """
    Warns about ignored compose configuration.

    One detector serves one translation run, so each warning is emitted at
    most once per run.
    """
    def __init__(self):
        self.networks_warned = False
        self.warned_keys: Set[str] = set()

    def check_project(self, project: ComposeProject) -> None:
        """
        Warns once each about project-level networks and named volumes.
        """
        if project.networks:
            logger.warning("Unsupported network configuration of compose v2 - ignoring")
        if project.volumes:
            logger.warning("Unsupported volume configuration of compose v2 - ignoring")

    def check_service(self, service: ComposeService) -> None:
        """
        Warns about non-default service networks and unsupported service keys.
        """
        if not self.networks_warned and any(n.name != DEFAULT_NETWORK for n in service.networks):
            logger.warning("Unsupported key networks - ignoring")
            self.networks_warned = True

        for key, value in (service.model_extra or {}).items():
            if key in self.warned_keys or value in (None, "", [], {}, False, 0):
                continue
            logger.warning("Unsupported key %s - ignoring", key)
            self.warned_keys.add(key)
