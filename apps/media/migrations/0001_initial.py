import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import apps.media.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UploadToken",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "token",
                    models.CharField(
                        default=apps.media.models.generate_upload_token, editable=False, max_length=64, unique=True
                    ),
                ),
                ("key", models.CharField(help_text="Object key the upload will be stored under.", max_length=500)),
                ("content_type", models.CharField(max_length=100)),
                ("expires_at", models.DateTimeField()),
                ("used_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="upload_tokens",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Upload token",
                "verbose_name_plural": "Upload tokens",
                "ordering": ["-created_at"],
            },
        ),
    ]
