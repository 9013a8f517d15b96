"""Tests for jsonws.loader - declarative service descriptions."""

from __future__ import annotations

import json

import pytest

from jsonws import InvalidArgumentError, TypeRef, UnknownTypeError, get_language_proxy, load_service

RENDER_YAML = """\
name: Render API
version: "2.0"
enums:
  Mode: [A, B]
  Priority: {LOW: 1, HIGH: 10}
types:
  Job:
    fields:
      id: {type: int}
      tags: {type: [string], required: false}
      note: string
methods:
  - name: ping
  - name: vray.start
    params:
      - {name: mode, type: Mode, default: 0, description: Render mode}
    returns: async
    description: Start rendering.
  - name: jobs.list
    params: [filter]
    returns: [Job]
events:
  - {name: vray.progress, type: int}
  - jobs.done
"""


@pytest.fixture
def render_yaml(tmp_path):
    path = tmp_path / "render.yaml"
    path.write_text(RENDER_YAML, encoding="utf-8")
    return path


class TestLoadService:
    """load_service from files and mappings."""

    def test_yaml_file(self, render_yaml) -> None:
        service = load_service(render_yaml)
        snapshot = service.snapshot()

        assert snapshot.friendly_name == "Render API"
        assert snapshot.version == "2.0"
        assert snapshot.enums["Mode"].members == {"A": 0, "B": 1}
        assert snapshot.enums["Priority"].members == {"LOW": 1, "HIGH": 10}
        assert list(snapshot.methods) == ["ping", "vray.start", "jobs.list"]
        assert list(snapshot.events) == ["vray.progress", "jobs.done"]

    def test_fields(self, render_yaml) -> None:
        job = load_service(render_yaml).snapshot().structs["Job"]

        assert job.fields["tags"].type_ref == TypeRef(name="string", is_array=True)
        assert not job.fields["tags"].required
        assert job.fields["note"].type_ref == TypeRef(name="string")

    def test_methods(self, render_yaml) -> None:
        methods = load_service(render_yaml).snapshot().methods

        start = methods["vray.start"]
        assert start.is_async
        assert start.description == "Start rendering."
        assert start.params[0].optional
        assert start.params[0].description == "Render mode"
        assert methods["jobs.list"].returns == TypeRef(name="Job", is_array=True)
        assert methods["jobs.list"].params[0].name == "filter"
        assert methods["ping"].returns is None

    def test_json_file(self, tmp_path) -> None:
        path = tmp_path / "api.json"
        path.write_text(json.dumps({"methods": [{"name": "a.b", "returns": "int"}]}), encoding="utf-8")

        assert "a.b" in load_service(str(path)).snapshot().methods

    def test_mapping(self) -> None:
        service = load_service({"enums": {"Mode": ["A"]}, "methods": [{"name": "m"}]})
        assert "class Proxy(ProxyBase):" in get_language_proxy(service, "Python")

    def test_unknown_type_surfaces(self) -> None:
        with pytest.raises(UnknownTypeError):
            load_service({"methods": [{"name": "m", "returns": "Missing"}]})

    def test_unsupported_suffix(self, tmp_path) -> None:
        path = tmp_path / "api.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(InvalidArgumentError):
            load_service(path)

    def test_not_a_mapping(self, tmp_path) -> None:
        path = tmp_path / "api.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(InvalidArgumentError):
            load_service(path)

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "api.yml"
        path.write_text("methods: [unclosed\n", encoding="utf-8")
        with pytest.raises(InvalidArgumentError):
            load_service(path)

    def test_method_without_name(self) -> None:
        with pytest.raises(InvalidArgumentError):
            load_service({"methods": [{"returns": "int"}]})

    @pytest.mark.parametrize("document", [
        {"types": {"Job": {"fields": {"id": None}}}},
        {"types": {"Job": {"fields": {"id": 3}}}},
        {"types": {"Job": ["id"]}},
        {"types": {"Job": {"fields": ["id"]}}},
        {"methods": ["ping"]},
        {"events": [["vray.progress"]]},
        {"enums": ["Mode"]},
        {"types": ["Job"]},
    ])
    def test_malformed_entries(self, document) -> None:
        """Entries of the wrong shape are reported as InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError, match="must be a mapping"):
            load_service(document)

    def test_type_without_fields(self) -> None:
        service = load_service({"types": {"Empty": None}})
        assert service.snapshot().types["Empty"].fields == {}
