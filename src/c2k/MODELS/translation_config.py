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
Configuration for a single translation run.
"""
import os
from typing import Dict, Optional
from pydantic import BaseModel

DEFAULT_COMPOSE_FILE = "docker-compose.yml"
DEFAULT_ENV_FILE = ".env"

class TranslationConfig(BaseModel):
    """
    Everything a translation needs from its surroundings.

    Unset fields are resolved from the calling process each time they are
    read, never cached.
    """
    compose_file: str = DEFAULT_COMPOSE_FILE
    working_dir: Optional[str] = None
    env_file: str = DEFAULT_ENV_FILE
    environ: Optional[Dict[str, str]] = None

    def resolved_compose_file(self) -> str:
        return self.compose_file or DEFAULT_COMPOSE_FILE

    def resolved_working_dir(self) -> str:
        return self.working_dir or os.getcwd()

    def resolved_env_file(self) -> str:
        """
        Path of the optional .env file used for variable lookup.
        """
        return os.path.join(self.resolved_working_dir(), self.env_file)

    def resolved_environ(self) -> Dict[str, str]:
        if self.environ is None:
            return dict(os.environ)
        return dict(self.environ)
