# Generated manually for ledger app

import uuid
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


BLOOD_TYPE_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-'),
]

COMPONENT_CHOICES = [
    ('whole_blood', 'Whole blood'),
    ('packed_rbc', 'Packed red blood cells'),
    ('plasma', 'Plasma'),
    ('platelets', 'Platelets'),
    ('cryoprecipitate', 'Cryoprecipitate'),
]

TRANSACTION_TYPE_CHOICES = [
    ('DONATION', 'Donation'),
    ('REDEMPTION', 'Redemption'),
    ('EMERGENCY_OVERRIDE', 'Emergency override'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('organizations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ConsentRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('APPROVED', 'Approved'), ('DECLINED', 'Declined')], db_index=True, default='PENDING', max_length=20)),
                ('credits', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('context', models.JSONField(blank=True, default=dict)),
                ('requested_at', models.DateTimeField()),
                ('decided_at', models.DateTimeField(blank=True, null=True)),
                ('decision_note', models.TextField(blank=True, null=True)),
                ('credit_owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='consent_requests_owned', to=settings.AUTH_USER_MODEL)),
                ('beneficiary', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='consent_requests_received', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='consent_requests', to='organizations.organization')),
                ('decided_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='consent_decisions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'consent_requests',
                'ordering': ['-requested_at'],
            },
        ),
        migrations.CreateModel(
            name='LedgerTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=TRANSACTION_TYPE_CHOICES, db_index=True, max_length=30)),
                ('credits', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
                ('blood_type', models.CharField(blank=True, choices=BLOOD_TYPE_CHOICES, max_length=3)),
                ('component', models.CharField(blank=True, choices=COMPONENT_CHOICES, max_length=20)),
                ('volume_ml', models.PositiveIntegerField(blank=True, null=True)),
                ('collected_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('justification', models.TextField(blank=True)),
                ('repayment_plan', models.TextField(blank=True)),
                ('repayment_due_at', models.DateTimeField(blank=True, null=True)),
                ('recorded_at', models.DateTimeField(db_index=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_transactions', to='organizations.organization')),
                ('donor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='donation_transactions', to=settings.AUTH_USER_MODEL)),
                ('credit_owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='redemption_transactions', to=settings.AUTH_USER_MODEL)),
                ('beneficiary', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='beneficiary_transactions', to=settings.AUTH_USER_MODEL)),
                ('initiated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='initiated_transactions', to=settings.AUTH_USER_MODEL)),
                ('consent_request', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='ledger.consentrequest')),
            ],
            options={
                'db_table': 'ledger_transactions',
                'ordering': ['-recorded_at'],
            },
        ),
        migrations.CreateModel(
            name='CreditEvent',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('type', models.CharField(choices=TRANSACTION_TYPE_CHOICES, max_length=30)),
                ('credits', models.PositiveIntegerField()),
                ('at', models.DateTimeField()),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='credit_events', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='organizations.organization')),
                ('transaction', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='credit_events', to='ledger.ledgertransaction')),
                ('beneficiary', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'credit_events',
                'ordering': ['at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='EmergencyCase',
            fields=[
                ('id', models.UUIDField(editable=False, primary_key=True, serialize=False)),
                ('credits', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
                ('status', models.CharField(choices=[('OUTSTANDING', 'Outstanding'), ('RESOLVED', 'Resolved')], db_index=True, default='OUTSTANDING', max_length=20)),
                ('justification', models.TextField()),
                ('repayment_plan', models.TextField(blank=True)),
                ('repayment_due_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField()),
                ('beneficiary', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='emergency_cases', to=settings.AUTH_USER_MODEL)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='emergency_cases', to='organizations.organization')),
                ('initiated_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='emergency_cases_initiated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'emergency_cases',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ExchangeProposal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('requested_blood_type', models.CharField(choices=BLOOD_TYPE_CHOICES, max_length=3)),
                ('requested_credits', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
                ('offered_blood_type', models.CharField(choices=BLOOD_TYPE_CHOICES, max_length=3)),
                ('offered_credits', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('COMPLETED', 'Completed')], db_index=True, default='PENDING', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('proposed_at', models.DateTimeField()),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('requesting_organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='exchanges_requested', to='organizations.organization')),
                ('offering_organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='exchanges_offered', to='organizations.organization')),
            ],
            options={
                'db_table': 'exchange_proposals',
                'ordering': ['-proposed_at'],
            },
        ),
    ]
