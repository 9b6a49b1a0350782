"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models
from django.db.models import F, Q


class Organization(models.Model):
    """Persistence model for the organization owning a plan."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class Category(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="categories"
    )
    name = models.CharField(max_length=100)
    color = models.CharField(max_length=20, blank=True, null=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class RecurringRule(models.Model):
    """Persistence model for weekly or monthly recurring meetings."""

    class Frequency(models.TextChoices):
        WEEKLY = "WEEKLY"
        MONTHLY = "MONTHLY"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="recurring_rules"
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    frequency = models.CharField(max_length=16, choices=Frequency.choices)
    day_of_week = models.PositiveSmallIntegerField()
    week_of_month = models.SmallIntegerField(blank=True, null=True)
    default_category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, blank=True, null=True, related_name="+"
    )
    default_title = models.CharField(max_length=255, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["organization", "is_active"]),
        ]

    def __str__(self) -> str:
        return self.name


class EventTemplate(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="event_templates"
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name="+")
    default_duration_minutes = models.PositiveIntegerField(default=120)
    default_invitation_text = models.TextField(blank=True, null=True)
    is_mandatory = models.BooleanField(default=False)
    default_month = models.PositiveSmallIntegerField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["organization", "is_active"]),
        ]

    def __str__(self) -> str:
        return self.name


class OperatingYear(models.Model):
    """Persistence model for one planning cycle of an organization."""

    class Status(models.TextChoices):
        DRAFT = "DRAFT"
        PLANNING = "PLANNING"
        ACTIVE = "ACTIVE"
        ARCHIVED = "ARCHIVED"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="years"
    )
    name = models.CharField(max_length=255)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.DRAFT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "name"], name="unique_year_name_per_organization"
            ),
            models.UniqueConstraint(
                fields=["organization"],
                condition=Q(status="ACTIVE"),
                name="single_active_year_per_organization",
            ),
            models.CheckConstraint(
                condition=Q(end_date__gt=F("start_date")), name="year_end_after_start"
            ),
        ]

    def __str__(self) -> str:
        return self.name


class PublishedEvent(models.Model):
    """An entry of the organization's live event calendar."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="published_events"
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    start_date = models.DateField()
    end_date = models.DateField(blank=True, null=True)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["start_date"]

    def __str__(self) -> str:
        return f"{self.title} - {self.start_date}"


class PlannedEvent(models.Model):
    """Persistence model for an event bound to an operating year."""

    class Status(models.TextChoices):
        PLANNED = "PLANNED"
        CONFIRMED = "CONFIRMED"
        CANCELLED = "CANCELLED"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    year = models.ForeignKey(OperatingYear, on_delete=models.CASCADE, related_name="events")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    date = models.DateField()
    end_date = models.DateField(blank=True, null=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name="+")
    template = models.ForeignKey(
        EventTemplate, on_delete=models.SET_NULL, blank=True, null=True, related_name="+"
    )
    recurring_rule = models.ForeignKey(
        RecurringRule, on_delete=models.SET_NULL, blank=True, null=True, related_name="+"
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PLANNED)
    is_mandatory = models.BooleanField(default=False)
    invitation_text = models.TextField(blank=True, null=True)
    position = models.PositiveIntegerField(default=0)
    published_event = models.OneToOneField(
        PublishedEvent, on_delete=models.SET_NULL, blank=True, null=True, related_name="planned_event"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "position"]
        indexes = [
            models.Index(fields=["year", "date"]),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.date}"
