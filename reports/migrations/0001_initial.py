import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("interns", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="DailyReport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("domain", models.CharField(max_length=200, verbose_name="Domain")),
                ("work_description", models.TextField(verbose_name="Work description")),
                ("tools_used", models.TextField(blank=True, verbose_name="Tools used")),
                ("issues_faced", models.TextField(blank=True, verbose_name="Issues faced")),
                ("report_date", models.DateField(verbose_name="Report date")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created")),
                (
                    "intern",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reports",
                        to="interns.intern",
                        verbose_name="Intern",
                    ),
                ),
            ],
            options={
                "verbose_name": "Daily report",
                "verbose_name_plural": "Daily reports",
                "ordering": ["-report_date", "-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("intern", "report_date"), name="daily_report_one_per_day"),
                ],
            },
        ),
    ]
