from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone

PROJECT_KEY_PATTERN = r"^[A-Z][A-Z0-9]*$"
PROJECT_KEY_MESSAGE = (
    "Project key must start with a letter and contain only uppercase letters and numbers"
)


class Project(models.Model):
    key = models.CharField(
        max_length=10,
        unique=True,
        validators=[RegexValidator(PROJECT_KEY_PATTERN, PROJECT_KEY_MESSAGE)],
    )
    name = models.CharField(max_length=200)
    description = models.TextField(max_length=1000, blank=True, default="")
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_projects",
    )
    is_active = models.BooleanField(default=True)
    is_archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "projects"
        verbose_name = "Project"
        verbose_name_plural = "Projects"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.key} - {self.name}"

    @property
    def epic_count(self) -> int:
        return self.epics.count()

    @property
    def work_item_count(self) -> int:
        return self.work_items.count()
