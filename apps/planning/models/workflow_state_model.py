from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"
COLOR_MESSAGE = "Color must be a valid hex color code (e.g., #3498db)"


class Status(models.Model):
    name = models.CharField(max_length=50, unique=True)
    color = models.CharField(
        max_length=20,
        blank=True,
        default="",
        validators=[RegexValidator(COLOR_PATTERN, COLOR_MESSAGE)],
    )
    order_index = models.PositiveIntegerField(default=0)
    is_default_for_new = models.BooleanField(default=False)
    is_completed_status = models.BooleanField(default=False)
    is_cancelled_status = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "statuses"
        verbose_name = "Status"
        verbose_name_plural = "Statuses"
        ordering = ["order_index", "name"]

    def __str__(self):
        return self.name


class StatusTransition(models.Model):
    from_status = models.ForeignKey(
        "planning.Status",
        on_delete=models.CASCADE,
        related_name="outgoing_transitions",
    )
    to_status = models.ForeignKey(
        "planning.Status",
        on_delete=models.CASCADE,
        related_name="incoming_transitions",
    )
    is_allowed = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "status_transitions"
        verbose_name = "Status Transition"
        verbose_name_plural = "Status Transitions"
        unique_together = ["from_status", "to_status"]
        ordering = ["from_status__order_index", "to_status__order_index"]

    def __str__(self):
        arrow = "→" if self.is_allowed else "↛"
        return f"{self.from_status.name} {arrow} {self.to_status.name}"
