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
Conversion of a loaded compose project into the normalized application model.
"""
import logging
from typing import Dict, List, Optional
from ..MODELS.application_model import ApplicationModel, EnvVar, ServiceRecord, TranslationResult
from ..MODELS.compose_project import ComposeProject, ComposeService
from ..MODELS.translation_config import TranslationConfig
from ..PARSERS.compose_parser import ComposeParser
from ..PARSERS.port_parser import parse_port_specs
from ..errors import TranslationError
from .unsupported import UnsupportedFeatureDetector

logger = logging.getLogger(__name__)

def load_env_vars(environment: Dict[str, str]) -> List[EnvVar]:
    """
    Turns a resolved environment mapping into environment entries, sorted by name.
    """
    return [EnvVar(name=k, value=v) for k, v in sorted(environment.items())]

def translate_service(service: ComposeService) -> ServiceRecord:
    """
    Builds the record of one service by copying its supported fields.

    :param service: The compose service.
    :return: The normalized record.
    :raises PortSpecError: If a port specification is invalid.
    """
    return ServiceRecord(
        image=service.image,
        container_name=service.container_name,
        environment=load_env_vars(service.environment),
        ports=parse_port_specs(service.ports),
        working_dir=service.working_dir,
        volumes=list(service.volumes),
        annotations=dict(service.labels),
        cpuset=service.cpuset,
        cpu_shares=service.cpu_shares,
        cpu_quota=service.cpu_quota,
        cap_add=list(service.cap_add),
        cap_drop=list(service.cap_drop),
        expose=list(service.expose),
        privileged=service.privileged,
        restart=service.restart,
        user=service.user,
    )

def translate_project(project: ComposeProject) -> ApplicationModel:
    """
    Translates every service of a project.

    Unsupported configuration is reported through warnings and skipped.

    :param project: The loaded compose project.
    :return: The application model keyed by service name.
    :raises PortSpecError: If any service has an invalid port specification;
        no partial model is returned.
    """
    detector = UnsupportedFeatureDetector()
    detector.check_project(project)

    service_configs = {}
    for name, service in project.services.items():
        detector.check_service(service)
        service_configs[name] = translate_service(service)
        logger.debug("Translated service %s", name)

    return ApplicationModel(service_configs=service_configs)

def convert(config: Optional[TranslationConfig] = None) -> TranslationResult:
    """
    Loads the configured compose file and translates it.

    :param config: Compose file location and environment; defaults apply if omitted.
    :return: The model, or the reason the translation failed.
    """
    config = config or TranslationConfig()
    compose_file = config.resolved_compose_file()
    try:
        project = ComposeParser(config).parse(compose_file)
        model = translate_project(project)
    except TranslationError as e:
        logger.error("Failed to translate %s: %s", compose_file, e)
        return TranslationResult(error=str(e))
    return TranslationResult(model=model)
