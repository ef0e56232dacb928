import django.core.validators
import django.db.models.deletion
import uuid
from django.db import migrations, models


STATUS_CHOICES = [
    ("created",          "Created"),
    ("picked_up",        "Picked Up"),
    ("in_transit",       "In Transit"),
    ("out_for_delivery", "Out for Delivery"),
    ("delivered",        "Delivered"),
    ("delayed",          "Delayed"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Agent",
            fields=[
                ("id",     models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("name",   models.CharField(max_length=120)),
                ("email",  models.EmailField(max_length=254)),
                ("status", models.CharField(
                    choices=[("free", "Free"), ("busy", "Busy")],
                    default="free",
                    max_length=4,
                )),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.AddIndex(
            model_name="agent",
            index=models.Index(fields=["status"], name="shipments_agent_status_idx"),
        ),
        migrations.CreateModel(
            name="Shipment",
            fields=[
                ("id",               models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tracking_id",      models.CharField(max_length=32, unique=True)),
                ("sender_name",      models.CharField(max_length=120)),
                ("receiver_name",    models.CharField(max_length=120)),
                ("pickup_address",   models.CharField(max_length=255)),
                ("delivery_address", models.CharField(max_length=255)),
                ("contact_number",   models.CharField(max_length=20)),
                ("customer_email",   models.EmailField(blank=True, max_length=254)),
                ("agent_id",         models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("status",           models.CharField(choices=STATUS_CHOICES, default="created", max_length=16)),
                ("last_location",    models.JSONField(blank=True, null=True)),
                ("pickup_date",      models.DateField(blank=True, null=True)),
                ("expected_delivery_date", models.DateField(blank=True, null=True)),
                ("created_at",       models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.AddIndex(
            model_name="shipment",
            index=models.Index(fields=["status"], name="shipments_status_idx"),
        ),
        migrations.AddIndex(
            model_name="shipment",
            index=models.Index(fields=["created_at"], name="shipments_created_idx"),
        ),
        migrations.CreateModel(
            name="StatusUpdate",
            fields=[
                ("id",       models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("status",   models.CharField(choices=STATUS_CHOICES, max_length=16)),
                ("location", models.JSONField(blank=True, null=True)),
                ("at",       models.DateTimeField(auto_now_add=True)),
                ("shipment", models.ForeignKey(
                    db_constraint=False,
                    on_delete=django.db.models.deletion.DO_NOTHING,
                    related_name="updates",
                    to="shipments.shipment",
                )),
            ],
            options={"ordering": ["at", "id"]},
        ),
        migrations.CreateModel(
            name="ProofOfDelivery",
            fields=[
                ("id",       models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("url",      models.CharField(max_length=500)),
                ("at",       models.DateTimeField(auto_now_add=True)),
                ("shipment", models.ForeignKey(
                    db_constraint=False,
                    on_delete=django.db.models.deletion.DO_NOTHING,
                    related_name="proofs",
                    to="shipments.shipment",
                )),
            ],
            options={"ordering": ["at", "id"], "verbose_name_plural": "proofs of delivery"},
        ),
        migrations.CreateModel(
            name="Feedback",
            fields=[
                ("id",       models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("rating",   models.PositiveSmallIntegerField(validators=[
                    django.core.validators.MinValueValidator(1),
                    django.core.validators.MaxValueValidator(5),
                ])),
                ("comments", models.TextField(blank=True)),
                ("at",       models.DateTimeField(auto_now_add=True)),
                ("shipment", models.ForeignKey(
                    db_constraint=False,
                    on_delete=django.db.models.deletion.DO_NOTHING,
                    related_name="feedback",
                    to="shipments.shipment",
                )),
            ],
            options={"ordering": ["at", "id"], "verbose_name_plural": "feedback"},
        ),
    ]
