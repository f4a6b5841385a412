from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="StatDefinition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=128)),
                ("abbreviation", models.CharField(blank=True, max_length=32)),
                ("division", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("department", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("gds", models.BooleanField(default=False)),
                ("is_money", models.BooleanField(default=False)),
                ("is_percentage", models.BooleanField(default=False)),
                ("is_inverted", models.BooleanField(default=False)),
                ("linked_stat_ids", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_stats",
                        to="accounts.member",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stats",
                        to="accounts.member",
                    ),
                ),
            ],
            options={
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="StatEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                ("is_second_half", models.BooleanField(default=False)),
                ("value", models.FloatField()),
                (
                    "period_type",
                    models.CharField(
                        choices=[("daily", "Daily"), ("weekly", "Weekly"), ("monthly", "Monthly")],
                        default="daily",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "stat",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="entries",
                        to="stats.statdefinition",
                    ),
                ),
            ],
            options={
                "ordering": ["date", "is_second_half"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("stat", "date", "is_second_half", "period_type"),
                        name="unique_stat_entry_key",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="StatQuota",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("week_ending_date", models.DateField()),
                ("quotas", models.JSONField(default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "stat",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quotas",
                        to="stats.statdefinition",
                    ),
                ),
            ],
            options={
                "ordering": ["-week_ending_date"],
                "unique_together": {("stat", "week_ending_date")},
            },
        ),
    ]
