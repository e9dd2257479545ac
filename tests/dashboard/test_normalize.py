from datetime import datetime, timedelta, timezone

from src.core.attachments.schemas import OwnerType
from src.dashboard.attachments import (
    AggregatorInputs,
    Lookups,
    normalize_attachments,
    normalize_tags,
    owner_display_name,
    parse_timestamp,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_inputs(**overrides) -> AggregatorInputs:
    values = dict(
        client_attachments=[],
        project_attachments=[],
        task_attachments=[],
        clients=[],
        projects=[],
        tasks=[],
        users=[],
    )
    values.update(overrides)
    return AggregatorInputs(**values)


class TestNormalize:
    def test_client_attachment_gets_client_name(self):
        inputs = make_inputs(
            client_attachments=[{"id": 1, "file_name": "a.pdf", "client_id": 5}],
            clients=[{"id": 5, "name": "Acme"}],
        )

        unified = normalize_attachments(inputs, now=NOW)

        assert len(unified) == 1
        record = unified[0]
        assert record.owner_name == "Acme"
        assert record.owner_type is OwnerType.CLIENT
        assert record.owner_id == 5
        assert record.uploaded_at == NOW
        assert record.uploaded_at_inferred is True

    def test_missing_project_gets_placeholder_name(self):
        inputs = make_inputs(
            project_attachments=[{"id": 3, "file_name": "cut.mp4", "project_id": 77}],
            projects=[{"id": 1, "name": "Verão", "client_id": 5}],
        )

        unified = normalize_attachments(inputs, now=NOW)

        assert unified[0].owner_name == "Projeto 77"

    def test_task_name_uses_title(self):
        inputs = make_inputs(
            task_attachments=[{"id": 9, "file_name": "notes.txt", "task_id": 4}],
            tasks=[{"id": 4, "title": "Roteiro", "project_id": 1}],
        )
        assert normalize_attachments(inputs, now=NOW)[0].owner_name == "Roteiro"

    def test_not_ready_until_every_input_present(self):
        inputs = make_inputs(
            client_attachments=[{"id": 1, "file_name": "a.pdf", "client_id": 5}],
            users=None,
        )
        assert inputs.missing() == ["users"]
        assert normalize_attachments(inputs, now=NOW) == []

    def test_fields_copied_and_uploader_resolved(self):
        inputs = make_inputs(
            task_attachments=[
                {
                    "id": 2,
                    "task_id": 4,
                    "file_name": "mix.wav",
                    "file_size": 2048,
                    "file_type": "audio/wav",
                    "file_url": "tasks/4/abc_mix.wav",
                    "uploaded_by": 8,
                    "upload_date": "2026-03-01T09:30:00",
                    "description": "Versão 2",
                    "tags": "audio, v2",
                }
            ],
            tasks=[{"id": 4, "title": "Trilha"}],
            users=[{"id": 8, "name": "Bruno Lima"}],
        )

        record = normalize_attachments(inputs, now=NOW)[0]

        assert record.mime_type == "audio/wav"
        assert record.storage_url == "tasks/4/abc_mix.wav"
        assert record.file_size == 2048
        assert record.uploader.name == "Bruno Lima"
        assert record.uploaded_by_id == 8
        assert record.uploaded_at == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert record.uploaded_at_inferred is False
        assert record.description == "Versão 2"
        assert record.tags == ["audio", "v2"]
        assert record.kind == "audio"
        assert record.type_label == "Áudio"

    def test_unknown_uploader_is_none(self):
        inputs = make_inputs(
            client_attachments=[{"id": 1, "file_name": "a.pdf", "client_id": 5, "uploaded_by": 99}],
        )
        record = normalize_attachments(inputs, now=NOW)[0]
        assert record.uploader is None
        assert record.uploaded_by_id == 99

    def test_created_at_preferred_over_upload_date(self):
        inputs = make_inputs(
            client_attachments=[
                {
                    "id": 1,
                    "file_name": "a.pdf",
                    "client_id": 5,
                    "created_at": "2026-02-02T10:00:00+00:00",
                    "upload_date": "2026-01-01T10:00:00+00:00",
                }
            ],
        )
        record = normalize_attachments(inputs, now=NOW)[0]
        assert record.uploaded_at == datetime(2026, 2, 2, 10, tzinfo=timezone.utc)

    def test_sorted_newest_first_with_stable_ties(self):
        day = datetime(2026, 3, 1, tzinfo=timezone.utc)
        inputs = make_inputs(
            client_attachments=[
                {"id": 1, "file_name": "old.pdf", "client_id": 5, "upload_date": day - timedelta(days=3)},
                {"id": 2, "file_name": "tie-client.pdf", "client_id": 5, "upload_date": day},
            ],
            project_attachments=[
                {"id": 3, "file_name": "new.mp4", "project_id": 1, "upload_date": day + timedelta(days=1)},
                {"id": 4, "file_name": "tie-project.pdf", "project_id": 1, "upload_date": day},
            ],
            task_attachments=[
                {"id": 5, "file_name": "tie-task.pdf", "task_id": 2, "upload_date": day},
            ],
        )

        unified = normalize_attachments(inputs, now=NOW)

        assert len(unified) == 5
        assert [a.file_name for a in unified] == [
            "new.mp4",
            "tie-client.pdf",
            "tie-project.pdf",
            "tie-task.pdf",
            "old.pdf",
        ]
        stamps = [a.uploaded_at for a in unified]
        assert stamps == sorted(stamps, reverse=True)

    def test_inputs_not_mutated(self):
        raw = {"id": 1, "file_name": "a.pdf", "client_id": 5, "tags": ["x"]}
        inputs = make_inputs(client_attachments=[raw])
        normalize_attachments(inputs, now=NOW)
        assert raw == {"id": 1, "file_name": "a.pdf", "client_id": 5, "tags": ["x"]}


class TestHelpers:
    def test_parse_timestamp(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("not a date") is None
        assert parse_timestamp("2026-03-01T09:30:00Z") == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)

    def test_normalize_tags(self):
        assert normalize_tags(None) == []
        assert normalize_tags(" a , ,b") == ["a", "b"]
        assert normalize_tags(["x", " y "]) == ["x", "y"]

    def test_owner_display_name_fallbacks(self):
        lookups = Lookups(clients={}, projects={}, tasks={3: {"id": 3, "name": "Legacy"}}, users={})
        assert owner_display_name(OwnerType.TASK, 3, lookups) == "Legacy"
        assert owner_display_name(OwnerType.TASK, 4, lookups) == "Tarefa 4"
        assert owner_display_name(OwnerType.CLIENT, 1, lookups) == "Cliente 1"
