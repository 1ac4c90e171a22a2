from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from .epic_model import PRIORITY_DEFAULT, PRIORITY_MAX, PRIORITY_MIN


class WorkItem(models.Model):
    TYPE_STORY = "story"
    TYPE_TASK = "task"
    TYPE_BUG = "bug"
    TYPE_SUBTASK = "subtask"

    TYPE_CHOICES = [
        (TYPE_STORY, "Story"),
        (TYPE_TASK, "Task"),
        (TYPE_BUG, "Bug"),
        (TYPE_SUBTASK, "Subtask"),
    ]

    project = models.ForeignKey(
        "planning.Project", on_delete=models.CASCADE, related_name="work_items"
    )
    epic = models.ForeignKey(
        "planning.Epic",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="work_items",
    )
    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )
    key = models.CharField(max_length=50)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_TASK)
    summary = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    status = models.ForeignKey(
        "planning.Status", on_delete=models.PROTECT, related_name="work_items"
    )
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_work_items",
    )
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reported_work_items",
    )
    priority = models.PositiveSmallIntegerField(
        default=PRIORITY_DEFAULT,
        validators=[MinValueValidator(PRIORITY_MIN), MaxValueValidator(PRIORITY_MAX)],
    )
    due_date = models.DateTimeField(null=True, blank=True)
    order_index = models.IntegerField(null=True, blank=True)
    version = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "work_items"
        verbose_name = "Work Item"
        verbose_name_plural = "Work Items"
        unique_together = ["project", "key"]
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["project", "key"], name="work_items_project_key_idx"),
            models.Index(fields=["status"], name="work_items_status_idx"),
            models.Index(fields=["epic"], name="work_items_epic_idx"),
            models.Index(fields=["assignee"], name="work_items_assignee_idx"),
        ]

    def __str__(self):
        return f"{self.key} - {self.summary}"

    @property
    def is_subtask(self):
        return self.type == self.TYPE_SUBTASK

    @property
    def child_count(self):
        return self.children.count()
