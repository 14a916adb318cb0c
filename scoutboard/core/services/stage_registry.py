"""
Stage registry.

Fixed, ordered stage sets and record field contracts for the scouting,
transfer and task pipelines.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from scoutboard.core.entities.pipeline import (
    MigrationRule,
    PipelineDefinition,
    PipelineKind,
    Stage,
)
from scoutboard.core.exceptions import InvalidStageError


def _position_facet(record: Mapping[str, Any]) -> set[str]:
    raw = record.get("position") or ""
    return {p.strip() for p in str(raw).split(",") if p.strip()}


def _birth_year_facet(record: Mapping[str, Any]) -> set[str]:
    raw = str(record.get("birth_date") or "")
    year = raw[:4]
    return {year} if len(year) == 4 and year.isdigit() else set()


def _field_facet(name: str):
    def extract(record: Mapping[str, Any]) -> set[str]:
        value = record.get(name)
        if value is None or value == "":
            return set()
        return {str(value).strip()}

    return extract


SCOUTING = PipelineDefinition(
    kind=PipelineKind.SCOUTING,
    collection="scouted_players",
    stage_field="status",
    stages=(
        Stage(
            id="gesichtet",
            label="Gesichtet",
            sort_weight=0,
            color_hint="#10b981",
            description="Talentpool",
        ),
        Stage(
            id="in_beobachtung",
            label="In Beobachtung",
            sort_weight=1,
            color_hint="#f59e0b",
            description="Go-Kandidaten",
        ),
        Stage(
            id="kontaktiert",
            label="Kontaktiert",
            sort_weight=2,
            color_hint="#3b82f6",
            description="Aktiver Kontakt",
        ),
    ),
    sort_fields=("last_name", "first_name"),
    legacy_stages={
        "zu_kontaktieren": MigrationRule(stage="in_beobachtung"),
        "in_kontakt": MigrationRule(stage="kontaktiert"),
        "archiviert": MigrationRule(stage="gesichtet", set_fields={"archived": True}),
    },
    owner_field="scout_id",
    archivable=True,
    search_fields=(("first_name", "last_name"), ("club",)),
    facets={
        "position": _position_facet,
        "birth_year": _birth_year_facet,
        "rating": _field_facet("rating"),
    },
)

TRANSFER = PipelineDefinition(
    kind=PipelineKind.TRANSFER,
    collection="transfer_clubs",
    stage_field="status",
    stages=(
        Stage(id="ideen", label="IDEEN", sort_weight=0, color_hint="#64748b"),
        Stage(id="offen", label="OFFEN / INTERESSE", sort_weight=1, color_hint="#3b82f6"),
        Stage(id="absage", label="ABSAGE", sort_weight=2, color_hint="#ef4444"),
    ),
    sort_fields=("club_name",),
    offset_field="reminder_days",
    bumps_updated_at=True,
    search_fields=(("club_name",), ("advisor_name",), ("notes",)),
    facets={"advisor_name": _field_facet("advisor_name")},
    reminder_title="{club_name} nachfassen",
    reminder_context_fields=("player_id", "club_name"),
    player_field="player_id",
    default_offset_days=30,
)

TASK = PipelineDefinition(
    kind=PipelineKind.TASK,
    collection="tasks",
    stage_field="priority",
    stages=(
        Stage(id="high", label="Hoch", sort_weight=0, color_hint="#dc2626"),
        Stage(id="medium", label="Mittel", sort_weight=1, color_hint="#ca8a04"),
        Stage(id="low", label="Niedrig", sort_weight=2, color_hint="#16a34a"),
    ),
    sort_fields=("title",),
    due_field="due_date",
    owner_field="user_id",
    completed_field="completed",
    search_fields=(("title",), ("description",)),
)

# New items land in these stages rather than the first column
_DEFAULT_STAGES = {PipelineKind.TASK: "medium"}


class StageRegistry:
    """
    Lookup of stage sets and field contracts by pipeline kind.

    Static configuration; built once by the composition root.
    """

    def __init__(self, definitions: Iterable[PipelineDefinition]):
        self._definitions: dict[PipelineKind, PipelineDefinition] = {}
        for definition in definitions:
            stages = sorted(definition.stages, key=lambda s: s.sort_weight)
            ids = [s.id for s in stages]
            if len(set(ids)) != len(ids):
                raise ValueError(f"Duplicate stage ids for {definition.kind.value}")
            for old, rule in definition.legacy_stages.items():
                if rule.stage not in ids:
                    raise ValueError(
                        f"Legacy stage '{old}' maps to unknown stage '{rule.stage}'"
                    )
            self._definitions[definition.kind] = definition

    def kinds(self) -> list[PipelineKind]:
        return list(self._definitions)

    def definition(self, kind: PipelineKind | str) -> PipelineDefinition:
        """
        Get the field contract for a pipeline kind.

        Raises:
            ValueError: If the kind is unknown.
        """
        try:
            return self._definitions[PipelineKind(kind)]
        except (KeyError, ValueError) as e:
            raise ValueError(f"Unknown pipeline kind: {kind}") from e

    def stages_for(self, kind: PipelineKind | str) -> list[Stage]:
        """Stages of a pipeline ordered by sort weight."""
        return sorted(self.definition(kind).stages, key=lambda s: s.sort_weight)

    def is_valid_stage(self, kind: PipelineKind | str, stage_id: Any) -> bool:
        if not isinstance(stage_id, str):
            return False
        return any(s.id == stage_id for s in self.definition(kind).stages)

    def get_stage(self, kind: PipelineKind | str, stage_id: Any) -> Stage:
        """
        Resolve a stage id.

        Raises:
            InvalidStageError: If the id is not part of the pipeline.
        """
        for stage in self.definition(kind).stages:
            if stage.id == stage_id:
                return stage
        raise InvalidStageError(
            PipelineKind(kind).value,
            stage_id,
            [s.id for s in self.stages_for(kind)],
        )

    def default_stage(self, kind: PipelineKind | str) -> Stage:
        """Stage assigned to newly created items."""
        pipeline_kind = PipelineKind(kind)
        if pipeline_kind in _DEFAULT_STAGES:
            return self.get_stage(pipeline_kind, _DEFAULT_STAGES[pipeline_kind])
        return self.stages_for(pipeline_kind)[0]


def build_default_registry() -> StageRegistry:
    """Registry with the scouting, transfer and task pipelines."""
    return StageRegistry([SCOUTING, TRANSFER, TASK])
