"""
Pipeline entities: kinds, stages, per-kind record contracts and items.

Records arrive from the record store as untyped mappings. A
``PipelineDefinition`` names the fields each pipeline kind reads, and
``PipelineItem.from_record`` interprets a record through it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

FacetExtractor = Callable[[Mapping[str, Any]], set[str]]


class PipelineKind(str, Enum):
    """The three boards sharing the pipeline engine."""

    SCOUTING = "scouting"
    TRANSFER = "transfer"
    TASK = "task"


class Stage(BaseModel):
    """One column of a pipeline board."""

    model_config = {"frozen": True}

    id: str
    label: str
    sort_weight: int
    color_hint: str = "#64748b"
    description: str = ""


@dataclass(frozen=True)
class MigrationRule:
    """Rewrite for one retired stage id.

    ``set_fields`` are plain overwrites applied together with the stage,
    e.g. ``{"archived": True}`` for the retired "archiviert" status.
    """

    stage: str
    set_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def parse(cls, value: MigrationRule | str | Mapping[str, Any]) -> MigrationRule:
        if isinstance(value, MigrationRule):
            return value
        if isinstance(value, str):
            return cls(stage=value)
        if isinstance(value, Mapping):
            if "stage" not in value:
                raise ValueError(f"Migration rule without target stage: {dict(value)}")
            extra = {k: v for k, v in value.items() if k != "stage"}
            return cls(stage=str(value["stage"]), set_fields=extra)
        raise TypeError(f"Unsupported migration rule: {value!r}")

    def patch(self, stage_field: str) -> dict[str, Any]:
        return {stage_field: self.stage, **self.set_fields}


@dataclass(frozen=True)
class PipelineDefinition:
    """Static field contract and stage set of one pipeline kind."""

    kind: PipelineKind
    collection: str
    stage_field: str
    stages: tuple[Stage, ...]
    sort_fields: tuple[str, ...]
    legacy_stages: Mapping[str, MigrationRule] = field(default_factory=dict)
    offset_field: str | None = None
    due_field: str | None = None
    owner_field: str | None = None
    completed_field: str | None = None
    archivable: bool = False
    bumps_updated_at: bool = False
    # Each entry is joined with spaces before matching ("first_name last_name")
    search_fields: tuple[tuple[str, ...], ...] = ()
    facets: Mapping[str, FacetExtractor] = field(default_factory=dict)
    reminder_title: str | None = None
    reminder_context_fields: tuple[str, ...] = ()
    # Id of an agency player (``player_details``) shown as reminder subtitle
    player_field: str | None = None
    default_offset_days: int | None = None

    @property
    def stage_ids(self) -> list[str]:
        return [s.id for s in self.stages]


def parse_timestamp(value: Any, assume_tz: tzinfo | None = None) -> datetime | None:
    """Parse a stored timestamp.

    Accepts datetimes, ISO-8601 strings (with ``Z`` suffix) and date-only
    strings. Values without an offset stay naive wall-clock times, so a
    stored ``YYYY-MM-DD`` keeps its calendar day in every board timezone;
    pass ``assume_tz`` to pin them to a zone instead. Returns None for
    anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None and assume_tz is not None:
        parsed = parsed.replace(tzinfo=assume_tz)
    return parsed


def parse_date(value: Any) -> date | None:
    """Parse a stored calendar date (``YYYY-MM-DD``) without zone shifting."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def parse_offset(value: Any) -> int | None:
    """Normalize an urgency offset; negative values are the "no reminder" sentinel."""
    if value is None or isinstance(value, bool):
        return None
    try:
        days = int(value)
    except (TypeError, ValueError):
        return None
    return days if days >= 0 else None


class PipelineItem(BaseModel):
    """
    An entity on a pipeline board.

    Generalizes scouted players, transfer-club interest and tasks. The raw
    record is kept in ``record`` for facet filtering and search.
    """

    id: str
    kind: PipelineKind
    stage: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    urgency_offset_days: int | None = None
    due_date: date | None = None
    completed: bool = False
    completed_at: datetime | None = None
    archived: bool = False
    secondary_sort_key: str = ""
    owner_id: str | None = None
    record: dict[str, Any] = Field(default_factory=dict)

    @property
    def has_urgency(self) -> bool:
        """True when a target date can be derived."""
        if self.due_date is not None:
            return True
        return self.urgency_offset_days is not None and self.created_at is not None

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], definition: PipelineDefinition
    ) -> PipelineItem:
        """
        Interpret a raw store record.

        Missing optional fields are tolerated; only a missing ``id`` is
        rejected.

        Raises:
            ValueError: If the record has no id.
        """
        record_id = record.get("id")
        if record_id is None or record_id == "":
            raise ValueError("Record has no id")

        sort_parts = [
            str(record.get(f) or "").strip() for f in definition.sort_fields
        ]
        owner = record.get(definition.owner_field) if definition.owner_field else None

        return cls(
            id=str(record_id),
            kind=definition.kind,
            stage=str(record.get(definition.stage_field) or ""),
            created_at=parse_timestamp(record.get("created_at")),
            updated_at=parse_timestamp(record.get("updated_at")),
            urgency_offset_days=(
                parse_offset(record.get(definition.offset_field))
                if definition.offset_field
                else None
            ),
            due_date=(
                parse_date(record.get(definition.due_field))
                if definition.due_field
                else None
            ),
            completed=bool(record.get(definition.completed_field))
            if definition.completed_field
            else False,
            completed_at=parse_timestamp(record.get("completed_at")),
            archived=bool(record.get("archived")) if definition.archivable else False,
            secondary_sort_key=" ".join(p for p in sort_parts if p),
            owner_id=str(owner) if owner is not None else None,
            record=dict(record),
        )
