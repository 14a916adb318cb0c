"""Tests for StageRegistry."""

import pytest

from scoutboard.core.entities.pipeline import (
    MigrationRule,
    PipelineDefinition,
    PipelineKind,
    Stage,
)
from scoutboard.core.exceptions import InvalidStageError
from scoutboard.core.services import StageRegistry


class TestDefaultRegistry:
    """Tests for the built-in pipelines."""

    def test_kinds(self, registry):
        assert registry.kinds() == [
            PipelineKind.SCOUTING,
            PipelineKind.TRANSFER,
            PipelineKind.TASK,
        ]

    @pytest.mark.parametrize(
        "kind,ids",
        [
            ("scouting", ["gesichtet", "in_beobachtung", "kontaktiert"]),
            ("transfer", ["ideen", "offen", "absage"]),
            ("task", ["high", "medium", "low"]),
        ],
    )
    def test_stage_order(self, registry, kind, ids):
        assert [s.id for s in registry.stages_for(kind)] == ids

    def test_is_valid_stage(self, registry):
        assert registry.is_valid_stage("scouting", "kontaktiert")
        assert not registry.is_valid_stage("scouting", "zu_kontaktieren")
        assert not registry.is_valid_stage("transfer", None)

    def test_get_stage(self, registry):
        assert registry.get_stage(PipelineKind.TRANSFER, "offen").label == "OFFEN / INTERESSE"

    def test_get_unknown_stage(self, registry):
        with pytest.raises(InvalidStageError) as exc_info:
            registry.get_stage("task", "urgent")
        assert exc_info.value.details["valid"] == ["high", "medium", "low"]

    def test_unknown_kind(self, registry):
        with pytest.raises(ValueError):
            registry.definition("contracts")

    def test_default_stages(self, registry):
        assert registry.default_stage("scouting").id == "gesichtet"
        assert registry.default_stage("transfer").id == "ideen"
        assert registry.default_stage("task").id == "medium"

    def test_legacy_targets_are_valid(self, registry):
        for kind in registry.kinds():
            definition = registry.definition(kind)
            for rule in definition.legacy_stages.values():
                assert registry.is_valid_stage(kind, rule.stage)


class TestRegistryValidation:
    """Tests for registry construction checks."""

    def _definition(self, stages, legacy=None) -> PipelineDefinition:
        return PipelineDefinition(
            kind=PipelineKind.TASK,
            collection="tasks",
            stage_field="priority",
            stages=tuple(stages),
            sort_fields=("title",),
            legacy_stages=legacy or {},
        )

    def test_duplicate_ids_rejected(self):
        stages = [Stage(id="a", label="A", sort_weight=0), Stage(id="a", label="B", sort_weight=1)]
        with pytest.raises(ValueError):
            StageRegistry([self._definition(stages)])

    def test_legacy_to_unknown_stage_rejected(self):
        stages = [Stage(id="a", label="A", sort_weight=0)]
        with pytest.raises(ValueError):
            StageRegistry([self._definition(stages, {"old": MigrationRule(stage="b")})])

    def test_sort_weight_orders_stages(self):
        stages = [Stage(id="late", label="L", sort_weight=5), Stage(id="early", label="E", sort_weight=1)]
        registry = StageRegistry([self._definition(stages)])
        assert [s.id for s in registry.stages_for("task")] == ["early", "late"]
