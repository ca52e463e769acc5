from django.db import migrations, models

import interns.files


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Intern",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=100, verbose_name="Full name")),
                ("enrollment_no", models.CharField(max_length=50, verbose_name="Enrollment no.")),
                ("personal_email", models.EmailField(max_length=254, unique=True, verbose_name="Personal email")),
                ("mobile_no", models.CharField(max_length=16, verbose_name="Mobile no.")),
                (
                    "loi_file",
                    models.FileField(
                        blank=True, max_length=255, upload_to=interns.files.upload_path, verbose_name="Letter of intent"
                    ),
                ),
                (
                    "passport_photo",
                    models.FileField(
                        blank=True, max_length=255, upload_to=interns.files.upload_path, verbose_name="Passport photo"
                    ),
                ),
                (
                    "e_signature",
                    models.FileField(
                        blank=True, max_length=255, upload_to=interns.files.upload_path, verbose_name="E-signature"
                    ),
                ),
                (
                    "signed_nda",
                    models.FileField(
                        blank=True, max_length=255, upload_to=interns.files.upload_path, verbose_name="Signed NDA"
                    ),
                ),
                (
                    "application_no",
                    models.CharField(blank=True, max_length=30, null=True, unique=True, verbose_name="Application no."),
                ),
                ("semester", models.CharField(blank=True, max_length=50, verbose_name="Semester")),
                ("program", models.CharField(blank=True, max_length=200, verbose_name="Program")),
                ("department", models.CharField(blank=True, max_length=200, verbose_name="Department")),
                ("organization", models.CharField(blank=True, max_length=200, verbose_name="Organization")),
                (
                    "gender",
                    models.CharField(
                        blank=True,
                        choices=[("M", "Male"), ("F", "Female"), ("O", "Other")],
                        max_length=1,
                        verbose_name="Gender",
                    ),
                ),
                ("blood_group", models.CharField(blank=True, max_length=3, verbose_name="Blood group")),
                ("present_address", models.TextField(blank=True, verbose_name="Present address")),
                ("permanent_address", models.TextField(blank=True, verbose_name="Permanent address")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Fresh", "Fresh"),
                            ("Pending_Enrollment", "Pending enrollment"),
                            ("Pending_Approval", "Pending approval"),
                            ("Active", "Active"),
                            ("Special_Approval_Required", "Special approval required"),
                            ("Rejected", "Rejected"),
                            ("Completed", "Completed"),
                        ],
                        db_index=True,
                        default="Fresh",
                        max_length=32,
                        verbose_name="Status",
                    ),
                ),
                ("date_of_joining", models.DateField(blank=True, null=True, verbose_name="Date of joining")),
                ("date_of_leaving", models.DateField(blank=True, null=True, verbose_name="Date of leaving")),
                ("password", models.CharField(blank=True, max_length=128, verbose_name="Password hash")),
                ("rejection_reason", models.TextField(blank=True, verbose_name="Rejection reason")),
                ("special_approval_notes", models.TextField(blank=True, verbose_name="Special approval notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated")),
            ],
            options={
                "verbose_name": "Intern",
                "verbose_name_plural": "Interns",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            (
                                "status__in",
                                [
                                    "Fresh",
                                    "Pending_Enrollment",
                                    "Pending_Approval",
                                    "Active",
                                    "Special_Approval_Required",
                                    "Rejected",
                                    "Completed",
                                ],
                            )
                        ),
                        name="intern_status_valid",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("date_of_joining__isnull", True),
                            ("date_of_leaving__isnull", True),
                            ("date_of_leaving__gt", models.F("date_of_joining")),
                            _connector="OR",
                        ),
                        name="intern_leaving_after_joining",
                    ),
                ],
            },
        ),
    ]
