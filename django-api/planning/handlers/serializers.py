"""Serializers for parsing plan requests and rendering domain models."""

from enum import Enum

from rest_framework import serializers

from planning.domain import DraftSource, YearStatus
from planning.domain.value_objects import Identifier


class DomainValueField(serializers.Field):
    """Read-only rendering of identifiers and enums as plain strings."""

    def __init__(self, **kwargs):
        kwargs.setdefault("read_only", True)
        super().__init__(**kwargs)

    def to_representation(self, value):
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, Identifier):
            return str(value)
        return value


# Input


class ManualEventInputSerializer(serializers.Serializer):
    date = serializers.DateField()
    title = serializers.CharField(max_length=255)
    category_id = serializers.UUIDField(allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    invitation_text = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PlacementInputSerializer(serializers.Serializer):
    template_id = serializers.UUIDField()
    date = serializers.DateField(allow_null=True)


class PlanPreviewRequestSerializer(serializers.Serializer):
    """Input for building a plan without saving it."""

    year_name = serializers.CharField(max_length=255)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    selected_rule_ids = serializers.ListField(
        child=serializers.UUIDField(), required=False, allow_null=True, default=None
    )
    placements = PlacementInputSerializer(many=True, required=False, default=list)
    manual_events = ManualEventInputSerializer(many=True, required=False, default=list)


class DraftEventInputSerializer(serializers.Serializer):
    key = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateField()
    title = serializers.CharField(max_length=255)
    source = serializers.ChoiceField(choices=[source.value for source in DraftSource])
    category_id = serializers.UUIDField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    invitation_text = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    template_id = serializers.UUIDField(required=False, allow_null=True)
    recurring_rule_id = serializers.UUIDField(required=False, allow_null=True)
    is_mandatory = serializers.BooleanField(default=False)


class CommitPlanRequestSerializer(serializers.Serializer):
    """Input for committing a reviewed plan."""

    year_name = serializers.CharField(max_length=255)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    set_active = serializers.BooleanField(default=True)
    events = DraftEventInputSerializer(many=True, default=list)


class YearStatusRequestSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[status.value for status in YearStatus])


# Output


class DraftEventSerializer(serializers.Serializer):
    key = serializers.CharField()
    date = serializers.DateField()
    end_date = serializers.DateField(allow_null=True)
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    invitation_text = serializers.CharField(allow_null=True)
    category_id = DomainValueField(allow_null=True)
    template_id = DomainValueField(allow_null=True)
    recurring_rule_id = DomainValueField(allow_null=True)
    is_mandatory = serializers.BooleanField()
    source = DomainValueField()


class MandatoryPlacementSerializer(serializers.Serializer):
    template_id = DomainValueField()
    template_name = serializers.CharField(source="template.name")
    date = serializers.DateField(allow_null=True)
    invitation_text = serializers.CharField()
    is_placed = serializers.BooleanField()


class CategoryCountSerializer(serializers.Serializer):
    category_id = DomainValueField()
    count = serializers.IntegerField()


class PlanStatisticsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    by_category = CategoryCountSerializer(many=True)
    by_source = serializers.SerializerMethodField()
    mandatory_total = serializers.IntegerField()
    mandatory_placed = serializers.IntegerField()
    unplaced_mandatory_count = serializers.IntegerField()

    def get_by_source(self, statistics) -> dict[str, int]:
        return {source.value: count for source, count in statistics.by_source.items()}


class PlanSerializer(serializers.Serializer):
    entries = DraftEventSerializer(many=True)
    dropped = DraftEventSerializer(many=True)
    unplaced = MandatoryPlacementSerializer(many=True)
    statistics = PlanStatisticsSerializer()
    unplaced_mandatory_count = serializers.IntegerField()
    has_warnings = serializers.BooleanField()


class OperatingYearSerializer(serializers.Serializer):
    """Serializer for OperatingYear domain model."""

    id = DomainValueField()
    name = serializers.CharField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    status = DomainValueField()
    event_count = serializers.IntegerField()


class PlannedEventSerializer(serializers.Serializer):
    """Serializer for PlannedEvent domain model."""

    id = DomainValueField()
    date = serializers.DateField()
    end_date = serializers.DateField(allow_null=True)
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    category_id = DomainValueField()
    template_id = DomainValueField(allow_null=True)
    recurring_rule_id = DomainValueField(allow_null=True)
    status = DomainValueField()
    is_mandatory = serializers.BooleanField()
    invitation_text = serializers.CharField(allow_null=True)
    published_event_id = DomainValueField(allow_null=True)


class YearWithEventsSerializer(serializers.Serializer):
    year = OperatingYearSerializer()
    events = PlannedEventSerializer(many=True)
