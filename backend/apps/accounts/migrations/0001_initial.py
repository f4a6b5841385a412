from django.db import migrations, models
import apps.accounts.models
import django.core.validators
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=64)),
                ("login_id", models.CharField(max_length=64, unique=True)),
                ("is_admin", models.BooleanField(default=False)),
                (
                    "org",
                    models.CharField(
                        choices=[("Day", "Day"), ("Foundation", "Foundation")],
                        default="Foundation",
                        max_length=16,
                    ),
                ),
                (
                    "week_start_day",
                    models.PositiveSmallIntegerField(
                        default=apps.accounts.models.default_week_start_day,
                        validators=[django.core.validators.MaxValueValidator(6)],
                    ),
                ),
                (
                    "week_start_hour",
                    models.PositiveSmallIntegerField(
                        default=apps.accounts.models.default_week_start_hour,
                        validators=[django.core.validators.MaxValueValidator(23)],
                    ),
                ),
                (
                    "week_end_day",
                    models.PositiveSmallIntegerField(
                        default=apps.accounts.models.default_week_end_day,
                        validators=[django.core.validators.MaxValueValidator(6)],
                    ),
                ),
                (
                    "week_end_hour",
                    models.PositiveSmallIntegerField(
                        default=apps.accounts.models.default_week_end_hour,
                        validators=[django.core.validators.MaxValueValidator(23)],
                    ),
                ),
                (
                    "timezone",
                    models.CharField(
                        blank=True,
                        max_length=64,
                        validators=[apps.accounts.models.validate_timezone],
                    ),
                ),
                (
                    "date_format",
                    models.CharField(
                        choices=[
                            ("dd-MMM-yy", "13-Jun-25"),
                            ("MMM dd, yyyy", "Jun 13, 2025"),
                            ("dd/MM/yy", "13/06/25"),
                            ("yyyy-MM-dd", "2025-06-13"),
                        ],
                        default="dd-MMM-yy",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name", "id"],
            },
        ),
        migrations.CreateModel(
            name="MemberRelationship",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "junior",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="senior_links",
                        to="accounts.member",
                    ),
                ),
                (
                    "senior",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="junior_links",
                        to="accounts.member",
                    ),
                ),
            ],
            options={
                "unique_together": {("senior", "junior")},
            },
        ),
    ]
