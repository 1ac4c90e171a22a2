from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

PRIORITY_MIN = 1
PRIORITY_MAX = 5
PRIORITY_DEFAULT = 3


class Epic(models.Model):
    project = models.ForeignKey(
        "planning.Project", on_delete=models.CASCADE, related_name="epics"
    )
    key = models.CharField(max_length=50)
    summary = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_epics",
    )
    status = models.ForeignKey(
        "planning.Status", on_delete=models.PROTECT, related_name="epics"
    )
    priority = models.PositiveSmallIntegerField(
        default=PRIORITY_DEFAULT,
        validators=[MinValueValidator(PRIORITY_MIN), MaxValueValidator(PRIORITY_MAX)],
    )
    start_date = models.DateTimeField(null=True, blank=True)
    due_date = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "epics"
        verbose_name = "Epic"
        verbose_name_plural = "Epics"
        unique_together = ["project", "key"]
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["project", "key"], name="epics_project_key_idx"),
            models.Index(fields=["status"], name="epics_status_idx"),
        ]

    def __str__(self):
        return f"{self.key} - {self.summary}"

    # Progress counters are read-time projections over the current work items;
    # they are never persisted on the epic row.

    @property
    def work_item_count(self) -> int:
        return self.work_items.count()

    @property
    def completed_work_item_count(self) -> int:
        return self.work_items.filter(status__is_completed_status=True).count()
