import decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("destinations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Amenity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("slug", models.SlugField(blank=True, max_length=100, unique=True)),
                ("icon", models.CharField(blank=True, help_text="Icon identifier used by the frontend.", max_length=100)),
            ],
            options={
                "verbose_name": "Amenity",
                "verbose_name_plural": "Amenities",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=100)),
                ("slug", models.SlugField(blank=True, max_length=255, unique=True)),
                ("description", models.TextField()),
                ("location", models.CharField(max_length=200)),
                ("city", models.CharField(db_index=True, max_length=100)),
                ("country", models.CharField(max_length=100)),
                ("address", models.CharField(max_length=500)),
                (
                    "latitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("-90")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("90")),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.DecimalField(
                        blank=True,
                        decimal_places=6,
                        max_digits=9,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("-180")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("180")),
                        ],
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))],
                    ),
                ),
                ("price_per_night", models.BooleanField(default=True)),
                (
                    "max_guests",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(20),
                        ]
                    ),
                ),
                (
                    "bedrooms",
                    models.PositiveSmallIntegerField(
                        default=1,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(20),
                        ],
                    ),
                ),
                (
                    "bathrooms",
                    models.PositiveSmallIntegerField(
                        default=1,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(20),
                        ],
                    ),
                ),
                (
                    "property_type",
                    models.CharField(
                        choices=[
                            ("apartment", "Apartment"),
                            ("house", "House"),
                            ("villa", "Villa"),
                            ("cabin", "Cabin"),
                            ("condo", "Condo"),
                            ("loft", "Loft"),
                            ("studio", "Studio"),
                            ("other", "Other"),
                        ],
                        default="apartment",
                        max_length=20,
                    ),
                ),
                ("instant_booking", models.BooleanField(default=False)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending review"),
                            ("LIVE", "Live"),
                            ("REJECTED", "Rejected"),
                            ("SUSPENDED", "Suspended"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("admin_notes", models.TextField(blank=True)),
                (
                    "ical_urls",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="External calendar feeds (Airbnb, Booking.com ...) registered for sync.",
                    ),
                ),
                ("is_featured", models.BooleanField(default=False)),
                ("average_rating", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=3)),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("amenities", models.ManyToManyField(blank=True, related_name="properties", to="properties.amenity")),
                (
                    "destination",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="properties",
                        to="destinations.destination",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="Owner or agent who manages the listing.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "region",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="properties",
                        to="destinations.region",
                    ),
                ),
                (
                    "reviewed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="moderated_properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Property",
                "verbose_name_plural": "Properties",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="property_status_idx"),
                    models.Index(fields=["owner", "status"], name="property_owner_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PropertyMedia",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "media_type",
                    models.CharField(choices=[("image", "Image"), ("video", "Video")], default="image", max_length=10),
                ),
                ("url", models.URLField(max_length=1000)),
                ("key", models.CharField(blank=True, help_text="Object storage key, if uploaded here.", max_length=500)),
                ("caption", models.CharField(blank=True, max_length=255)),
                ("is_primary", models.BooleanField(default=False)),
                ("order", models.PositiveIntegerField(default=0)),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="media",
                        to="properties.property",
                    ),
                ),
            ],
            options={
                "verbose_name": "Property media",
                "verbose_name_plural": "Property media",
                "ordering": ["order", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("property", "url"), name="unique_property_media_url"),
                ],
            },
        ),
    ]
