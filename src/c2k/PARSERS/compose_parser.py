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
Parsers for Docker Compose YAML files.
"""
import os
import re
import yaml
from typing import Dict, Any, List, Optional
from pydantic import ValidationError
from ..MODELS.compose_project import ComposeProject, ComposeService, ServiceNetwork, DEFAULT_NETWORK
from ..MODELS.translation_config import TranslationConfig
from ..MANAGERS.environment_manager import EnvironmentManager
from ..UTILS.string_interpolation import EnvironmentInterpolator
from ..errors import ComposeLoadError

INT_TAG = "tag:yaml.org,2002:int"
FLOAT_TAG = "tag:yaml.org,2002:float"

class ComposeLoader(yaml.SafeLoader):
    """
    SafeLoader without the YAML 1.1 base-60 numbers, so that an unquoted
    port like 22:22 stays a string.
    """

ComposeLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (INT_TAG, FLOAT_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ComposeLoader.add_implicit_resolver(
    INT_TAG,
    re.compile(r'''^(?:[-+]?0b[0-1_]+
    |[-+]?0[0-7_]+
    |[-+]?(?:0|[1-9][0-9_]*)
    |[-+]?0x[0-9a-fA-F_]+)$''', re.X),
    list('-+0123456789'),
)
ComposeLoader.add_implicit_resolver(
    FLOAT_TAG,
    re.compile(r'''^(?:[-+]?(?:[0-9][0-9_]*)\.[0-9_]*(?:[eE][-+][0-9]+)?
    |\.[0-9][0-9_]*(?:[eE][-+][0-9]+)?
    |[-+]?\.(?:inf|Inf|INF)
    |\.(?:nan|NaN|NAN))$''', re.X),
    list('-+0123456789.'),
)

class ComposeParser:
    """
    Parser for docker-compose.yml files.
    """
    def __init__(self, config: Optional[TranslationConfig] = None):
        """
        Initializes the parser.

        :param config: Where to look for the .env file and process environment.
        """
        self.config = config or TranslationConfig()

    def parse(self, compose_path: str = "") -> ComposeProject:
        """
        Parses a compose file from a path.

        :param compose_path: Path to the compose file; the configured file if empty.
        :return: Parsed project.
        :raises ComposeLoadError: If the file cannot be read or is invalid.
        """
        compose_path = compose_path or self.config.resolved_compose_file()
        try:
            with open(compose_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ComposeLoadError(f"Failed to load compose file {compose_path}: {e}") from e
        return self.parse_from_string(content, base_dir=os.path.dirname(os.path.abspath(compose_path)))

    def parse_from_string(self, content: str, base_dir: Optional[str] = None) -> ComposeProject:
        """
        Parses a compose file from a string.

        :param content: YAML content of the compose file.
        :param base_dir: Directory that relative env_file paths are resolved against.
        :return: Parsed project.
        :raises ComposeLoadError: If the content is not a valid compose file.
        """
        env_manager = EnvironmentManager(
            base_dir=base_dir or self.config.resolved_working_dir(),
            environ=self.config.resolved_environ(),
        )
        lookup = env_manager.get_lookup_context(self.config.resolved_env_file())

        try:
            data = yaml.load(content, Loader=ComposeLoader)
        except (yaml.YAMLError, ValueError) as e:
            raise ComposeLoadError(f"Failed to parse compose file: {e}") from e

        # Substitute into parsed values only
        data = EnvironmentInterpolator.interpolate_values(data, lookup)
        if not data:
            data = {}
        if not isinstance(data, dict):
            raise ComposeLoadError("Compose file must be a mapping at the top level")

        # Version 1 files declare services at the top level
        if 'services' in data or 'version' in data:
            version = data.get('version')
            services_spec = data.get('services') or {}
            networks = data.get('networks') or {}
            volumes = data.get('volumes') or {}
        else:
            version = None
            services_spec = data
            networks = {}
            volumes = {}

        if not isinstance(services_spec, dict):
            raise ComposeLoadError("'services' must be a mapping of service names")
        if not isinstance(networks, dict):
            raise ComposeLoadError("'networks' must be a mapping")
        if not isinstance(volumes, dict):
            raise ComposeLoadError("'volumes' must be a mapping")

        services = {}
        for name, spec in services_spec.items():
            services[str(name)] = self._parse_service(str(name), spec or {}, env_manager, lookup)

        try:
            return ComposeProject(
                version=None if version is None else str(version),
                services=services,
                networks={str(k): v for k, v in networks.items()},
                volumes={str(k): v for k, v in volumes.items()},
            )
        except ValidationError as e:
            raise ComposeLoadError(f"Invalid compose file: {e}") from e

    def _parse_service(self, name: str, spec: Any,
                       env_manager: EnvironmentManager,
                       lookup: Dict[str, str]) -> ComposeService:
        """
        Parses a single service definition from a compose file.

        :param name: The name of the service.
        :param spec: The service specification dictionary.
        :param env_manager: Resolves env files and bare variables.
        :param lookup: Variables available for bare environment entries.
        :return: A ComposeService instance.
        """
        if not isinstance(spec, dict):
            raise ComposeLoadError(f"Service {name} must be a mapping")
        fields = {str(k): v for k, v in spec.items()}

        # Environment
        explicit_env = self._parse_environment(name, fields.pop('environment', None))
        env_files = [str(f) for f in self._to_list(fields.pop('env_file', None))]
        fields['environment'] = env_manager.get_merged_environment(explicit_env, env_files, lookup)

        # Ports
        for key in ('ports', 'expose'):
            if key in fields:
                fields[key] = [self._parse_port(name, p) for p in self._to_list(fields[key])]

        # Volumes
        if 'volumes' in fields:
            fields['volumes'] = [self._parse_volume(name, v) for v in self._to_list(fields['volumes'])]

        # Networks
        if 'networks' in fields:
            fields['networks'] = self._parse_networks(name, fields['networks'])

        if 'labels' in fields:
            fields['labels'] = self._parse_labels(name, fields['labels'])

        for key in ('cap_add', 'cap_drop'):
            if key in fields:
                fields[key] = self._to_list(fields[key])

        for key in ('image', 'container_name', 'working_dir', 'restart', 'user', 'cpuset'):
            if fields.get(key) is not None:
                fields[key] = str(fields[key])

        # An empty key means the compose default
        fields = {k: v for k, v in fields.items() if v is not None}

        try:
            return ComposeService(**fields)
        except ValidationError as e:
            raise ComposeLoadError(f"Invalid service {name}: {e}") from e

    def _parse_environment(self, name: str, env_spec: Any) -> Dict[str, Optional[str]]:
        """
        Normalizes an environment list ("KEY=VALUE", "KEY") or mapping.
        Variables without a value map to None.
        """
        environment: Dict[str, Optional[str]] = {}
        if env_spec is None:
            return environment
        if isinstance(env_spec, list):
            for e in env_spec:
                e = str(e)
                if '=' in e:
                    k, v = e.split('=', 1)
                    environment[k] = v
                else:
                    environment[e] = None
        elif isinstance(env_spec, dict):
            for k, v in env_spec.items():
                environment[str(k)] = None if v is None else self._to_str(v)
        else:
            raise ComposeLoadError(f"Service {name}: 'environment' must be a list or a mapping")
        return environment

    def _parse_port(self, name: str, port: Any) -> str:
        """
        Port and expose entries are kept as strings; the translator parses them.
        """
        if isinstance(port, dict):
            raise ComposeLoadError(f"Service {name}: long port syntax is not supported")
        return str(port)

    def _parse_volume(self, name: str, volume: Any) -> str:
        """
        Normalizes a volume entry to "source[:target[:mode]]".
        """
        if isinstance(volume, str):
            return volume
        if isinstance(volume, dict) and 'target' in volume:
            parts = [str(volume['source']), str(volume['target'])] if volume.get('source') else [str(volume['target'])]
            if volume.get('read_only'):
                parts.append('ro')
            return ':'.join(parts)
        raise ComposeLoadError(f"Service {name}: invalid volume {volume!r}")

    def _parse_networks(self, name: str, networks: Any) -> List[ServiceNetwork]:
        """
        Normalizes a list of network names or a mapping of name to options.
        """
        if not networks:
            return [ServiceNetwork(name=DEFAULT_NETWORK)]
        if isinstance(networks, list):
            return [ServiceNetwork(name=str(n)) for n in networks]
        if isinstance(networks, dict):
            result = []
            for net_name, options in networks.items():
                aliases = (options.get('aliases') or []) if isinstance(options, dict) else []
                result.append(ServiceNetwork(name=str(net_name), aliases=[str(a) for a in aliases]))
            return result
        raise ComposeLoadError(f"Service {name}: 'networks' must be a list or a mapping")

    def _parse_labels(self, name: str, labels: Any) -> Dict[str, str]:
        """
        Normalizes a label list ("key=value") or mapping.
        """
        if not labels:
            return {}
        if isinstance(labels, list):
            result = {}
            for label in labels:
                k, _, v = str(label).partition('=')
                result[k] = v
            return result
        if isinstance(labels, dict):
            return {str(k): '' if v is None else self._to_str(v) for k, v in labels.items()}
        raise ComposeLoadError(f"Service {name}: 'labels' must be a list or a mapping")

    def _to_str(self, val: Any) -> str:
        """
        Renders a YAML scalar the way it was most likely written.
        """
        if isinstance(val, bool):
            return 'true' if val else 'false'
        return str(val)

    def _to_list(self, val: Any) -> List[Any]:
        """
        Helper to ensure a value is a list.

        :param val: The value to convert.
        :return: A list.
        """
        if val is None:
            return []
        if isinstance(val, (list, tuple)):
            return list(val)
        return [val]
