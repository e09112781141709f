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
Unit tests for the compose to application model translation.
"""
import logging
import pytest
from c2k.CONVERTERS.to_app_model import convert, load_env_vars, translate_project, translate_service
from c2k.MODELS.application_model import EnvVar, PortBinding, Protocol
from c2k.MODELS.compose_project import ComposeProject, ComposeService, ServiceNetwork
from c2k.MODELS.translation_config import TranslationConfig
from c2k.errors import PortSpecError


def full_service():
    return ComposeService(
        image="nginx:1.25",
        container_name="frontend",
        working_dir="/srv",
        environment={"B": "2", "A": "1"},
        ports=["8080:80", "443"],
        expose=["9000"],
        volumes=["./html:/usr/share/nginx/html:ro", "cache"],
        cap_add=["NET_ADMIN"],
        cap_drop=["ALL"],
        privileged=True,
        restart="always",
        user="nginx",
        cpuset="0-1",
        cpu_shares=512,
        cpu_quota=25000,
        labels={"env": "prod"},
    )


class TestTranslateService:
    """Tests for single service translation."""

    def test_fields_are_copied(self):
        """Test the direct field mapping."""
        record = translate_service(full_service())
        assert record.image == "nginx:1.25"
        assert record.container_name == "frontend"
        assert record.working_dir == "/srv"
        assert record.volumes == ["./html:/usr/share/nginx/html:ro", "cache"]
        assert record.cap_add == ["NET_ADMIN"]
        assert record.cap_drop == ["ALL"]
        assert record.expose == ["9000"]
        assert record.privileged is True
        assert record.restart == "always"
        assert record.user == "nginx"
        assert record.cpuset == "0-1"
        assert record.cpu_shares == 512
        assert record.cpu_quota == 25000

    def test_ports(self):
        """Test that port specs become bindings."""
        record = translate_service(full_service())
        assert record.ports == [
            PortBinding(host_port=8080, container_port=80, protocol=Protocol.TCP),
            PortBinding(host_port=None, container_port=443, protocol=Protocol.TCP),
        ]

    def test_environment_sorted(self):
        """Test that environment entries are sorted by name."""
        record = translate_service(full_service())
        assert record.environment == [EnvVar(name="A", value="1"), EnvVar(name="B", value="2")]

    def test_labels_become_annotations(self):
        """Test that labels are copied verbatim."""
        record = translate_service(full_service())
        assert record.annotations == {"env": "prod"}

    def test_defaults(self):
        """Test a service with nothing but an image."""
        record = translate_service(ComposeService(image="redis"))
        assert record.container_name is None
        assert record.ports == []
        assert record.environment == []
        assert record.annotations == {}
        assert record.privileged is False


def test_load_env_vars():
    assert load_env_vars({}) == []
    assert load_env_vars({"Z": "", "A": "x"}) == [EnvVar(name="A", value="x"), EnvVar(name="Z", value="")]


def test_two_services():
    project = ComposeProject(services={
        "web": ComposeService(image="nginx"),
        "db": ComposeService(image="postgres"),
    })
    model = translate_project(project)
    assert set(model.service_configs) == {"web", "db"}
    assert all(record.annotations == {} for record in model.service_configs.values())


def test_service_names_are_kept_verbatim():
    project = ComposeProject(services={"Web": ComposeService(), "web": ComposeService()})
    assert set(translate_project(project).service_configs) == {"Web", "web"}


def test_translation_is_repeatable(caplog):
    project = ComposeProject(
        services={
            "a": ComposeService(image="x", networks=[ServiceNetwork(name="back")], environment={"K": "v", "J": "w"}),
            "b": ComposeService(image="y", ports=["80"]),
        },
        networks={"back": {}},
    )
    with caplog.at_level(logging.WARNING, logger="c2k"):
        first = translate_project(project)
        second = translate_project(project)
    assert first == second
    networks_warnings = [r for r in caplog.records if r.getMessage() == "Unsupported key networks - ignoring"]
    assert len(networks_warnings) == 2


def test_port_error_aborts_translation():
    project = ComposeProject(services={
        "ok": ComposeService(ports=["80"]),
        "bad": ComposeService(ports=["80:abc"]),
    })
    with pytest.raises(PortSpecError, match="Invalid container port of 80:abc"):
        translate_project(project)


class TestConvert:
    """Tests for loading and translating a compose file."""

    def test_success(self, tmp_path):
        """Test a full load and translate run."""
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text("""
version: "2"
services:
  web:
    image: nginx
    ports: ["8080:80"]
    labels:
      env: prod
  db:
    image: postgres
""")
        result = convert(TranslationConfig(compose_file=str(compose_file), working_dir=str(tmp_path), environ={}))
        assert result.ok
        assert result.error is None
        assert set(result.model.service_configs) == {"web", "db"}
        assert result.model.service_configs["web"].annotations == {"env": "prod"}
        assert result.model.service_configs["web"].ports[0].host_port == 8080

    def test_unquoted_port_pair(self, tmp_path):
        """Test that an unquoted host:container port keeps both sides."""
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text("services:\n  ssh:\n    image: sshd\n    ports:\n      - 22:22\n")
        result = convert(TranslationConfig(compose_file=str(compose_file), environ={}))
        assert result.ok
        assert result.model.service_configs["ssh"].ports == [PortBinding(host_port=22, container_port=22, protocol=Protocol.TCP)]

    def test_default_compose_file(self, tmp_path, monkeypatch):
        """Test that an empty path falls back to docker-compose.yml in the working directory."""
        (tmp_path / "docker-compose.yml").write_text("services:\n  web:\n    image: nginx\n")
        monkeypatch.chdir(tmp_path)
        result = convert(TranslationConfig(compose_file="", environ={}))
        assert result.ok
        assert list(result.model.service_configs) == ["web"]

    def test_port_failure_is_a_result(self, tmp_path, caplog):
        """Test that a bad port yields an error result instead of a partial model."""
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text("services:\n  web:\n    image: nginx\n    ports: [':80']\n")
        with caplog.at_level(logging.ERROR, logger="c2k"):
            result = convert(TranslationConfig(compose_file=str(compose_file), environ={}))
        assert not result.ok
        assert result.model is None
        assert result.error == "Invalid host port of :80"
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_load_failure_is_a_result(self, tmp_path):
        """Test that a missing compose file yields an error result."""
        result = convert(TranslationConfig(compose_file=str(tmp_path / "missing.yml"), environ={}))
        assert not result.ok
        assert result.model is None
        assert "missing.yml" in result.error
