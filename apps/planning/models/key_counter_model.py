from django.db import models


class ProjectKeyCounter(models.Model):
    """Last key number handed out for one project and key scope."""

    SCOPE_EPIC = "epic"
    SCOPE_WORK_ITEM = "work_item"

    SCOPE_CHOICES = [
        (SCOPE_EPIC, "Epic"),
        (SCOPE_WORK_ITEM, "Work Item"),
    ]

    project = models.ForeignKey(
        "planning.Project", on_delete=models.CASCADE, related_name="key_counters"
    )
    scope = models.CharField(max_length=20, choices=SCOPE_CHOICES)
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "project_key_counters"
        verbose_name = "Project Key Counter"
        verbose_name_plural = "Project Key Counters"
        unique_together = ["project", "scope"]

    def __str__(self):
        return f"{self.project.key} [{self.scope}] = {self.last_value}"
