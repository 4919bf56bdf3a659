"""
Tests for the roster store, roster file loading and default adapters
"""

from pathlib import Path

import pytest

from crp_engine.config import AvailabilityStatus, SkillType
from crp_engine.core import ConfigurationException, ResourceNotFoundException, ValidationException
from crp_engine.crp.domain.templates import THREAD_TEMPLATES
from crp_engine.crp.infrastructure import (
    InMemoryEngineerRepository,
    RosterManager,
    SequentialThreadIdGenerator,
    StaticTemplateProvider,
    load_roster_file,
)

from conftest import make_engineer


ROSTER_YAML = """
engineers:
  - id: eng-101
    name: Ada Park
    skills: [Database, Backend]
    availability: Available
    current_workload: 25
    expertise:
      Database: 90
      Backend: 70
    is_lead_engineer: true
  - id: eng-102
    name: Ben Ortiz
    skills: [Frontend]
    availability: Offline
    expertise:
      Frontend: 80
"""


class TestInMemoryEngineerRepository:
    """Test the in-memory roster"""

    def test_queries(self, repository):
        assert len(repository.list_all()) == 8
        assert [e.id for e in repository.list_available()] == [
            "eng-001", "eng-003", "eng-004", "eng-007", "eng-008"
        ]
        assert [e.id for e in repository.list_leads()] == ["eng-001", "eng-004"]
        assert [e.id for e in repository.list_by_skill(SkillType.SECURITY)] == ["eng-004"]
        assert repository.find_by_id("eng-003").name == "Marcus Johnson"
        assert repository.find_by_id("eng-999") is None

    def test_reads_are_snapshots(self, repository):
        snapshot = repository.list_available()
        repository.update_availability("eng-003", AvailabilityStatus.BUSY)

        assert "eng-003" in [e.id for e in snapshot]
        assert "eng-003" not in [e.id for e in repository.list_available()]

    def test_mutating_a_snapshot_does_not_leak(self, repository):
        engineer = repository.find_by_id("eng-001")
        engineer.expertise[SkillType.SECURITY] = 100
        assert repository.find_by_id("eng-001").expertise_in(SkillType.SECURITY) == 0

    def test_update_unknown_engineer(self, repository):
        with pytest.raises(ResourceNotFoundException):
            repository.update_availability("eng-999", AvailabilityStatus.BUSY)

    def test_update_workload(self, repository):
        assert repository.update_workload("eng-001", 65).current_workload == 65
        with pytest.raises(ValidationException):
            repository.update_workload("eng-001", 120)

    def test_duplicate_ids_rejected(self):
        engineers = [make_engineer("eng-1", [], {}), make_engineer("eng-1", [], {})]
        with pytest.raises(ValidationException) as exc_info:
            InMemoryEngineerRepository(engineers)
        assert exc_info.value.details == {"duplicate_ids": ["eng-1"]}

    def test_replace_all(self, repository):
        assert repository.replace_all([make_engineer("eng-1", [], {})]) == 1
        assert [e.id for e in repository.list_all()] == ["eng-1"]


class TestRosterFile:
    """Test YAML roster loading and reloading"""

    def test_load_roster_file(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text(ROSTER_YAML)

        engineers = load_roster_file(path)

        assert [e.id for e in engineers] == ["eng-101", "eng-102"]
        assert engineers[0].expertise == {SkillType.DATABASE: 90, SkillType.BACKEND: 70}
        assert engineers[0].is_lead_engineer is True
        assert engineers[1].availability == AvailabilityStatus.OFFLINE

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text("engineers: [unclosed")
        with pytest.raises(ConfigurationException):
            load_roster_file(path)

    def test_missing_engineers_list(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text("engineers: nobody")
        with pytest.raises(ConfigurationException):
            load_roster_file(path)

    def test_invalid_entry(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text("engineers:\n  - id: eng-1\n    name: X\n    current_workload: 150\n")
        with pytest.raises(ConfigurationException):
            load_roster_file(path)

    def test_shipped_roster_loads(self):
        path = Path(__file__).resolve().parent.parent / "roster.yaml"
        engineers = load_roster_file(path)
        assert len(engineers) == 8
        assert [e.id for e in engineers if e.is_lead_engineer] == ["eng-001", "eng-004"]

    def test_manager_load_and_reload(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text(ROSTER_YAML)
        manager = RosterManager(InMemoryEngineerRepository())

        assert manager.load(path) == 2

        path.write_text("engineers:\n  - id: eng-103\n    name: Cleo\n")
        assert manager.reload() is True
        assert [e.id for e in manager.repository.list_all()] == ["eng-103"]

    def test_broken_reload_keeps_roster(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text(ROSTER_YAML)
        manager = RosterManager(InMemoryEngineerRepository())
        manager.load(path)

        path.write_text("engineers: [unclosed")

        assert manager.reload() is False
        assert len(manager.repository.list_all()) == 2

    def test_duplicate_ids_reload_keeps_roster(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text(ROSTER_YAML)
        manager = RosterManager(InMemoryEngineerRepository())
        manager.load(path)

        path.write_text(
            "engineers:\n"
            "  - {id: eng-001, name: First, skills: [Backend]}\n"
            "  - {id: eng-001, name: Second, skills: [Cloud]}\n"
        )

        assert manager.reload() is False
        assert [e.id for e in manager.repository.list_all()] == ["eng-101", "eng-102"]

    def test_undecodable_reload_keeps_roster(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text(ROSTER_YAML)
        manager = RosterManager(InMemoryEngineerRepository())
        manager.load(path)

        path.write_bytes(b"\xff\xfe")

        assert manager.reload() is False
        assert len(manager.repository.list_all()) == 2

    def test_undecodable_file_is_configuration_error(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_bytes(b"\xff\xfe")

        with pytest.raises(ConfigurationException):
            load_roster_file(path)

    def test_missing_file_gives_empty_roster(self, tmp_path):
        manager = RosterManager(InMemoryEngineerRepository())
        assert manager.load(tmp_path / "missing.yaml") == 0
        assert manager.repository.list_all() == []

    def test_reload_before_load(self):
        assert RosterManager(InMemoryEngineerRepository()).reload() is False

    def test_watching_requires_load(self):
        with pytest.raises(RuntimeError):
            RosterManager(InMemoryEngineerRepository()).start_watching()

    def test_start_and_stop_watching(self, tmp_path):
        path = tmp_path / "roster.yaml"
        path.write_text(ROSTER_YAML)
        manager = RosterManager(InMemoryEngineerRepository())
        manager.load(path)

        manager.start_watching()
        manager.stop_watching()
        manager.stop_watching()


class TestDefaultAdapters:
    """Test the thread id generator and template provider"""

    @pytest.mark.parametrize("ticket_id,sequence,expected", [
        ("TKT-2024-001", 1, "THR-001-1"),
        ("TKT-2024-042-X", 3, "THR-042-3"),
        ("TKT-7", 2, "THR-TKT-7-2"),
        ("T1", 1, "THR-T1-1"),
    ])
    def test_thread_ids(self, ticket_id, sequence, expected):
        assert SequentialThreadIdGenerator().generate(ticket_id, sequence) == expected

    def test_template_provider(self):
        provider = StaticTemplateProvider()
        for skill in SkillType:
            assert provider.get_template(skill) is THREAD_TEMPLATES[skill]
            assert provider.get_keywords(skill)

    def test_keywords_are_copies(self):
        provider = StaticTemplateProvider()
        provider.get_keywords(SkillType.DATABASE).append("mutated")
        assert "mutated" not in provider.get_keywords(SkillType.DATABASE)
