from django.db import models
from django.utils import timezone


class Board(models.Model):
    project = models.OneToOneField(
        "planning.Project", on_delete=models.CASCADE, related_name="board"
    )
    name = models.CharField(max_length=200)
    description = models.TextField(max_length=1000, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "boards"
        verbose_name = "Board"
        verbose_name_plural = "Boards"
        ordering = ["name"]

    def __str__(self):
        return f"{self.project.key} - {self.name}"

    @property
    def column_count(self):
        return self.columns.count()


class BoardColumn(models.Model):
    DEFAULT_COLOR = "#808080"

    board = models.ForeignKey(
        "planning.Board", on_delete=models.CASCADE, related_name="columns"
    )
    status = models.ForeignKey(
        "planning.Status", on_delete=models.CASCADE, related_name="board_columns"
    )
    order_index = models.PositiveIntegerField(default=0)
    wip_limit = models.PositiveIntegerField(null=True, blank=True)
    is_collapsed = models.BooleanField(default=False)

    class Meta:
        db_table = "board_columns"
        verbose_name = "Board Column"
        verbose_name_plural = "Board Columns"
        unique_together = ["board", "status"]
        ordering = ["order_index"]
        indexes = [
            models.Index(fields=["board", "order_index"], name="board_columns_board_order_idx"),
        ]

    def __str__(self):
        return f"{self.board.name} - {self.status.name}"

    @property
    def color(self):
        return self.status.color or self.DEFAULT_COLOR
