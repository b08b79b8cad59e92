# Copyright © The django-hybridauth Developers
# See the AUTHORS file at the top-level directory of this distribution
#
# This file is part of django-hybridauth. It is subject to the license terms
# in the LICENSE file found in the top-level directory of this
# distribution. No part of django-hybridauth, including this file, may be
# copied, modified, propagated, or distributed except according to the terms
# contained in the LICENSE file.

"""Create the SocialProfile model."""

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SocialProfile",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "provider",
                    models.CharField(
                        help_text="name of the identity provider",
                        max_length=255,
                    ),
                ),
                (
                    "identifier",
                    models.CharField(
                        help_text="identifier of the user in the provider",
                        max_length=512,
                    ),
                ),
                (
                    "first_name",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "last_name",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "full_name",
                    models.CharField(blank=True, max_length=512, null=True),
                ),
                (
                    "display_name",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                (
                    "email",
                    models.EmailField(blank=True, max_length=254, null=True),
                ),
                ("email_verified", models.BooleanField(blank=True, null=True)),
                (
                    "picture_url",
                    models.URLField(blank=True, max_length=1024, null=True),
                ),
                (
                    "profile_url",
                    models.URLField(blank=True, max_length=1024, null=True),
                ),
                (
                    "website_url",
                    models.URLField(blank=True, max_length=1024, null=True),
                ),
                ("birth_date", models.DateField(blank=True, null=True)),
                (
                    "gender",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                (
                    "language",
                    models.CharField(blank=True, max_length=64, null=True),
                ),
                ("description", models.TextField(blank=True, null=True)),
                (
                    "extra",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="provider fields without a dedicated column",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("modified_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="social_profiles",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="socialprofile",
            constraint=models.UniqueConstraint(
                fields=("provider", "identifier"),
                name="hybridauth_socialprofile_unique_provider_identifier",
            ),
        ),
    ]
