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
Managers for handling environment variables and .env file resolution.
"""
import os
from typing import Dict, List, Mapping, Optional
from dotenv import dotenv_values
from ..errors import ComposeLoadError

class EnvironmentManager:
    """
    Builds the variable lookup chain used for interpolation and resolves the
    environment of each service.
    """
    def __init__(self, base_dir: str = ".", environ: Optional[Mapping[str, str]] = None):
        """
        Initializes the environment manager.

        :param base_dir: The base directory for resolving relative paths to env files.
        :param environ: The process environment; the current one if omitted.
        """
        self.base_dir = base_dir
        self.environ = dict(os.environ if environ is None else environ)

    @staticmethod
    def read_env_file(path: str) -> Dict[str, str]:
        """
        Reads a .env file. Keys declared without a value are skipped.

        :param path: Path to the file.
        :return: The variables declared in the file.
        """
        return {k: v for k, v in dotenv_values(path).items() if v is not None}

    def get_lookup_context(self, env_file: str) -> Dict[str, str]:
        """
        Returns the variables available for interpolation: the optional env
        file, overridden by the process environment.

        :param env_file: Path to the .env file; ignored if it does not exist.
        :return: A dictionary of variables.
        """
        context: Dict[str, str] = {}
        if os.path.isfile(env_file):
            context.update(self.read_env_file(env_file))
        context.update(self.environ)
        return context

    def get_merged_environment(self,
                               explicit_env: Dict[str, Optional[str]],
                               env_files: List[str],
                               lookup: Mapping[str, str]) -> Dict[str, str]:
        """
        Merges the env files of a service with its explicit environment.

        Explicit values win over file values. An explicit variable without a
        value is taken from ``lookup`` and left out if the lookup has none.

        :param explicit_env: Variables declared under ``environment``.
        :param env_files: Paths listed under ``env_file``.
        :param lookup: Variables available from the surrounding environment.
        :return: The resolved environment of the service.
        :raises ComposeLoadError: If an env file does not exist.
        """
        merged: Dict[str, str] = {}

        # Later files override earlier ones
        for env_file in env_files:
            file_path = os.path.join(self.base_dir, env_file)
            if not os.path.isfile(file_path):
                raise ComposeLoadError(f"Couldn't find env file: {file_path}")
            merged.update(self.read_env_file(file_path))

        for key, value in explicit_env.items():
            if value is None:
                if key in lookup:
                    merged[key] = lookup[key]
            else:
                merged[key] = value

        return merged
