# Generated manually for organizations app

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Organization',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('active', 'Active')], db_index=True, default='pending', max_length=20)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'organizations',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='InventoryRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('blood_type', models.CharField(choices=[('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'), ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-')], max_length=3)),
                ('available_credits', models.IntegerField(default=0)),
                ('total_donated_credits', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='inventory', to='organizations.organization')),
            ],
            options={
                'db_table': 'inventory_records',
                'ordering': ['blood_type'],
            },
        ),
        migrations.AddConstraint(
            model_name='inventoryrecord',
            constraint=models.UniqueConstraint(fields=('organization', 'blood_type'), name='unique_inventory_per_blood_type'),
        ),
        migrations.CreateModel(
            name='InventoryMovement',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('DONATION', 'Donation'), ('FULFILLMENT', 'Fulfillment')], max_length=20)),
                ('credits', models.PositiveIntegerField()),
                ('transaction_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('consent_request_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('at', models.DateTimeField()),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='movements', to='organizations.inventoryrecord')),
            ],
            options={
                'db_table': 'inventory_movements',
                'ordering': ['at', 'id'],
            },
        ),
    ]
