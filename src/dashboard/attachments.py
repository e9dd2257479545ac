"""
Unified attachment view for the file manager.

Client, project and task attachments are fetched independently, merged into
one newest-first list of UnifiedAttachment records, and filtered/searched in
memory. Deletion goes through a Mutation and is always followed by a refetch
of the attachment collection; records are never removed locally.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.core.attachments.schemas import OwnerType
from src.core.exceptions import AppException, ValidationError
from src.dashboard.cache import QueryCache, make_key
from src.dashboard.client import ApiClient
from src.dashboard.file_types import (
    OWNER_LABELS,
    FileCategory,
    category_matches,
    file_kind,
    icon_for,
    label_for,
)
from src.dashboard.mutations import Mutation, MutationStatus, maybe_await
from src.dashboard.notifications import Notifier
from src.shared.schemas import BaseSchema, PaginatedResponse

ATTACHMENTS_PATH = "/attachments/all"

# Resource name -> API path. One grouped read carries the three attachment lists.
RESOURCE_PATHS: dict[str, str] = {
    "attachments": ATTACHMENTS_PATH,
    "clients": "/clients",
    "projects": "/projects",
    "tasks": "/tasks",
    "users": "/users",
}

SOURCE_KEYS: dict[OwnerType, str] = {
    OwnerType.CLIENT: "clients",
    OwnerType.PROJECT: "projects",
    OwnerType.TASK: "tasks",
}

_datetime_adapter = TypeAdapter(datetime)


class OwnerTab(StrEnum):
    ALL = "all"
    CLIENT = "client"
    PROJECT = "project"
    TASK = "task"


class AggregatorStatus(StrEnum):
    LOADING = "loading"
    READY = "ready"


class UserRef(BaseSchema):
    id: int
    name: str


class UnifiedAttachment(BaseSchema):
    """One attachment in the merged list, whatever its owner type."""

    id: int
    owner_type: OwnerType
    owner_id: int
    owner_name: str
    file_name: str
    file_size: int | None = None
    mime_type: str = ""
    storage_url: str = ""
    uploaded_by_id: int | None = None
    uploader: UserRef | None = None
    uploaded_at: datetime
    # True when neither created_at nor upload_date was present and the
    # load time was used instead.
    uploaded_at_inferred: bool = False
    description: str | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def identity(self) -> tuple[OwnerType, int, int]:
        return (self.owner_type, self.owner_id, self.id)

    @property
    def kind(self) -> str:
        return file_kind(self.mime_type, self.file_name).value

    @property
    def icon(self) -> str:
        return icon_for(self.kind)

    @property
    def type_label(self) -> str:
        return label_for(self.kind, self.owner_type)


class FilterCriteria(BaseSchema):
    """File manager filters. Ephemeral UI state, never persisted."""

    search: str = ""
    owner_type: OwnerTab = OwnerTab.ALL
    category: FileCategory = FileCategory.ALL
    client_id: int | None = None
    project_id: int | None = None

    def select_client(self, client_id: int | None) -> "FilterCriteria":
        """Choosing (or clearing) a client always resets the project choice."""
        return self.model_copy(update={"client_id": client_id, "project_id": None})

    def select_project(self, project_id: int | None) -> "FilterCriteria":
        if project_id is not None and self.client_id is None:
            raise ValidationError("Select a client before choosing a project", field="project_id")
        return self.model_copy(update={"project_id": project_id})


@dataclass
class AggregatorInputs:
    """The seven reads the unified view depends on. None means not (yet) available."""

    client_attachments: list[dict] | None = None
    project_attachments: list[dict] | None = None
    task_attachments: list[dict] | None = None
    clients: list[dict] | None = None
    projects: list[dict] | None = None
    tasks: list[dict] | None = None
    users: list[dict] | None = None

    def missing(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing()

    def source(self, owner_type: OwnerType) -> list[dict]:
        return getattr(self, f"{owner_type.value}_attachments") or []


@dataclass(frozen=True)
class Lookups:
    """Id-indexed entity tables used for name and ownership resolution."""

    clients: dict[int, dict]
    projects: dict[int, dict]
    tasks: dict[int, dict]
    users: dict[int, dict]

    @classmethod
    def from_inputs(cls, inputs: AggregatorInputs) -> "Lookups":
        def index(rows: Iterable[dict] | None) -> dict[int, dict]:
            return {row["id"]: row for row in rows or [] if isinstance(row, dict) and "id" in row}

        return cls(
            clients=index(inputs.clients),
            projects=index(inputs.projects),
            tasks=index(inputs.tasks),
            users=index(inputs.users),
        )

    def owner_table(self, owner_type: OwnerType) -> dict[int, dict]:
        return {
            OwnerType.CLIENT: self.clients,
            OwnerType.PROJECT: self.projects,
            OwnerType.TASK: self.tasks,
        }[owner_type]


def parse_timestamp(value: Any) -> datetime | None:
    """datetime or ISO-8601 string to an aware datetime (naive values are taken as UTC)."""
    if value is None or value == "":
        return None
    try:
        parsed = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_tags(raw: Any) -> list[str]:
    """Tags arrive as a JSON list or as a comma-separated string."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [str(tag).strip() for tag in raw if str(tag).strip()]


def owner_display_name(owner_type: OwnerType, owner_id: int, lookups: Lookups) -> str:
    """Owner name from its table, or "<Label> <id>" when the row is missing."""
    row = lookups.owner_table(owner_type).get(owner_id)
    name = None
    if row is not None:
        name = row.get("title") if owner_type is OwnerType.TASK else None
        name = name or row.get("name")
    return name or f"{OWNER_LABELS[owner_type]} {owner_id}"


def normalize_attachment(
    raw: dict,
    owner_type: OwnerType,
    lookups: Lookups,
    now: datetime,
) -> UnifiedAttachment:
    owner_id = raw.get(owner_type.foreign_key)
    uploaded_by = raw.get("uploaded_by")
    user_row = lookups.users.get(uploaded_by) if uploaded_by is not None else None
    uploader = None
    if user_row is not None:
        uploader = UserRef(id=user_row["id"], name=user_row.get("name") or f"User {user_row['id']}")

    uploaded_at = parse_timestamp(raw.get("created_at")) or parse_timestamp(raw.get("upload_date"))

    return UnifiedAttachment(
        id=raw["id"],
        owner_type=owner_type,
        owner_id=owner_id,
        owner_name=owner_display_name(owner_type, owner_id, lookups),
        file_name=raw.get("file_name") or "",
        file_size=raw.get("file_size"),
        mime_type=raw.get("file_type") or "",
        storage_url=raw.get("file_url") or "",
        uploaded_by_id=uploaded_by,
        uploader=uploader,
        uploaded_at=uploaded_at or now,
        uploaded_at_inferred=uploaded_at is None,
        description=raw.get("description"),
        tags=normalize_tags(raw.get("tags")),
    )


def normalize_attachments(
    inputs: AggregatorInputs,
    now: datetime | None = None,
    lookups: Lookups | None = None,
) -> list[UnifiedAttachment]:
    """
    Merge the three attachment lists into one list sorted by uploaded_at, newest first.

    Returns an empty list until every input is present.
    """
    if not inputs.is_complete:
        return []
    now = now or datetime.now(timezone.utc)
    lookups = lookups or Lookups.from_inputs(inputs)

    unified = [
        normalize_attachment(raw, owner_type, lookups, now)
        for owner_type in SOURCE_KEYS
        for raw in inputs.source(owner_type)
    ]
    # Stable sort: equal timestamps keep client, project, task order.
    unified.sort(key=lambda a: a.uploaded_at, reverse=True)
    return unified


def _matches_search(item: UnifiedAttachment, term: str) -> bool:
    return (
        term in item.file_name.lower()
        or term in item.owner_name.lower()
        or (item.description is not None and term in item.description.lower())
        or any(term in tag.lower() for tag in item.tags)
    )


def _belongs_to_client(item: UnifiedAttachment, client_id: int, lookups: Lookups) -> bool:
    if item.owner_type is OwnerType.CLIENT:
        return item.owner_id == client_id
    if item.owner_type is OwnerType.PROJECT:
        project = lookups.projects.get(item.owner_id)
        return project is not None and project.get("client_id") == client_id
    task = lookups.tasks.get(item.owner_id)
    if task is None or task.get("project_id") is None:
        return False
    project = lookups.projects.get(task["project_id"])
    return project is not None and project.get("client_id") == client_id


def _belongs_to_project(item: UnifiedAttachment, project_id: int, lookups: Lookups) -> bool:
    if item.owner_type is OwnerType.PROJECT:
        return item.owner_id == project_id
    if item.owner_type is OwnerType.TASK:
        task = lookups.tasks.get(item.owner_id)
        return task is not None and task.get("project_id") == project_id
    return False


def filter_attachments(
    items: list[UnifiedAttachment],
    criteria: FilterCriteria,
    lookups: Lookups | None,
) -> list[UnifiedAttachment]:
    """
    Narrow the unified list: search, owner tab, category, client scope, project scope.

    Pure: returns a new list and keeps the input order. Without lookup tables
    nothing can be resolved, so the result is empty.
    """
    if lookups is None:
        return []

    result = list(items)

    term = criteria.search.strip().lower()
    if term:
        result = [a for a in result if _matches_search(a, term)]

    if criteria.owner_type is not OwnerTab.ALL:
        result = [a for a in result if a.owner_type.value == criteria.owner_type.value]

    if criteria.category is not FileCategory.ALL:
        result = [a for a in result if category_matches(a.mime_type, criteria.category)]

    if criteria.client_id is not None:
        result = [a for a in result if _belongs_to_client(a, criteria.client_id, lookups)]

        # Project scope is only available once a client is chosen.
        if criteria.project_id is not None:
            result = [a for a in result if _belongs_to_project(a, criteria.project_id, lookups)]

    return result


class AttachmentAggregator:
    """
    Loads the seven inputs, keeps the unified list and orchestrates deletion.

    Status is LOADING until every input has been read successfully, and goes
    back to LOADING on refetch(). Read failures become retryable error
    notifications; nothing here raises to the caller on a failed request.
    """

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache | None = None,
        notifier: Notifier | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.api = api
        self.cache = cache or QueryCache()
        self.notifier = notifier or Notifier()
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.status = AggregatorStatus.LOADING
        self.inputs = AggregatorInputs()
        self._lookups: Lookups | None = None
        self._unified: list[UnifiedAttachment] = []
        self.delete_mutation: Mutation[UnifiedAttachment, Any] = Mutation(
            self._send_delete,
            name="delete attachment",
            on_success=self._on_delete_success,
            on_error=self._on_delete_error,
            logger=self.logger,
        )

    @property
    def is_ready(self) -> bool:
        return self.status is AggregatorStatus.READY

    @property
    def unified(self) -> list[UnifiedAttachment]:
        """The merged list (empty unless ready)."""
        return list(self._unified) if self.is_ready else []

    @property
    def lookups(self) -> Lookups | None:
        return self._lookups

    async def _fetch(self, name: str) -> Any:
        path = RESOURCE_PATHS[name]
        return await self.cache.fetch(make_key(path), lambda: self.api.get(path))

    async def load(self) -> AggregatorStatus:
        """Read every input concurrently (cached reads are not repeated) and rebuild."""
        names = list(RESOURCE_PATHS)
        results = await asyncio.gather(*(self._fetch(name) for name in names), return_exceptions=True)

        inputs = AggregatorInputs()
        for name, result in zip(names, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                message = result.message if isinstance(result, AppException) else str(result)
                self.logger.warning("Loading %s failed: %s", name, message)
                self.notifier.error(f"Failed to load {name}", message, retryable=True)
                continue
            self._assign(inputs, name, result)

        self.inputs = inputs
        self._rebuild()
        return self.status

    @staticmethod
    def _assign(inputs: AggregatorInputs, name: str, data: Any) -> None:
        if name == "attachments":
            grouped = data if isinstance(data, dict) else {}
            inputs.client_attachments = list(grouped.get("clients") or [])
            inputs.project_attachments = list(grouped.get("projects") or [])
            inputs.task_attachments = list(grouped.get("tasks") or [])
        else:
            setattr(inputs, name, list(data or []))

    def _rebuild(self) -> None:
        if not self.inputs.is_complete:
            self.logger.debug("Attachment view not ready, missing: %s", ", ".join(self.inputs.missing()))
            self._lookups = None
            self._unified = []
            self.status = AggregatorStatus.LOADING
            return

        self._lookups = Lookups.from_inputs(self.inputs)
        self._unified = normalize_attachments(self.inputs, now=self.clock(), lookups=self._lookups)
        inferred = sum(1 for a in self._unified if a.uploaded_at_inferred)
        if inferred:
            self.logger.debug("%d attachment(s) without upload timestamp, using load time", inferred)
        self.status = AggregatorStatus.READY

    async def refetch(self, path: str | None = None) -> AggregatorStatus:
        """Invalidate ``path`` (every input when None) and load again."""
        self.status = AggregatorStatus.LOADING
        if path is None:
            for resource_path in RESOURCE_PATHS.values():
                self.cache.invalidate(resource_path)
        else:
            self.cache.invalidate(path)
        return await self.load()

    def view(self, criteria: FilterCriteria | None = None) -> list[UnifiedAttachment]:
        if not self.is_ready:
            return []
        return filter_attachments(self._unified, criteria or FilterCriteria(), self._lookups)

    def page(
        self, criteria: FilterCriteria | None = None, page: int = 1, limit: int = 20
    ) -> PaginatedResponse[UnifiedAttachment]:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        return PaginatedResponse[UnifiedAttachment].from_list(self.view(criteria), page=page, limit=limit)

    def project_options(self, client_id: int | None = None) -> list[dict]:
        """Projects selectable in the project filter: those of the chosen client, or all."""
        projects = self.inputs.projects or []
        if client_id is None:
            return list(projects)
        return [p for p in projects if p.get("client_id") == client_id]

    def find(self, owner_type: OwnerType, owner_id: int, attachment_id: int) -> UnifiedAttachment | None:
        for item in self.unified:
            if item.identity == (owner_type, owner_id, attachment_id):
                return item
        return None

    @staticmethod
    def attachment_path(record: UnifiedAttachment) -> str:
        return f"/attachments/{record.owner_type.segment}/{record.owner_id}/{record.id}"

    def download_url(self, record: UnifiedAttachment) -> str:
        return self.api.url_for(
            f"/attachments/{record.owner_type.segment}/{record.owner_id}/download/{record.id}"
        )

    def _busy(self) -> bool:
        if not self.delete_mutation.is_pending:
            return False
        self.notifier.info("Please wait", "Another attachment is being deleted.")
        return True

    async def delete(
        self,
        record: UnifiedAttachment,
        confirm: Callable[[UnifiedAttachment], Any],
    ) -> bool:
        """
        Delete one attachment after ``confirm(record)`` returns truthy.

        Returns True when the server accepted the delete. The local list is
        only refreshed from the server, never edited in place. While another
        delete is pending (checked again once ``confirm`` resolves) nothing
        is sent.
        """
        if self._busy():
            return False
        if not await maybe_await(confirm(record)):
            self.logger.debug("Delete of %s cancelled by user", record.identity)
            return False
        if self._busy():
            return False
        await self.delete_mutation.run(record)
        return self.delete_mutation.status is MutationStatus.SUCCESS

    async def _send_delete(self, record: UnifiedAttachment) -> Any:
        return await self.api.delete(self.attachment_path(record))

    async def _on_delete_success(self, result: Any, record: UnifiedAttachment) -> None:
        self.logger.info("Deleted attachment %s", record.identity)
        self.notifier.success("Attachment deleted", f'"{record.file_name}" was deleted successfully.')
        await self.refetch(ATTACHMENTS_PATH)

    def _on_delete_error(self, error: Exception, record: UnifiedAttachment) -> None:
        message = error.message if isinstance(error, AppException) else str(error)
        self.notifier.error("Error deleting attachment", message)
