from django.db import models


class DailyReport(models.Model):
    """One status report per intern per calendar day. Never edited once filed."""

    intern = models.ForeignKey(
        "interns.Intern",
        on_delete=models.CASCADE,
        related_name="reports",
        verbose_name="Intern",
    )

    domain = models.CharField("Domain", max_length=200)
    work_description = models.TextField("Work description")
    tools_used = models.TextField("Tools used", blank=True)
    issues_faced = models.TextField("Issues faced", blank=True)

    report_date = models.DateField("Report date")
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Daily report"
        verbose_name_plural = "Daily reports"
        ordering = ["-report_date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["intern", "report_date"],
                name="daily_report_one_per_day",
            ),
        ]

    def __str__(self):
        return f"{self.intern_id} @ {self.report_date}"
