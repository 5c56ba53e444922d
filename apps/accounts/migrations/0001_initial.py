# Generated manually for accounts app

import uuid
from django.db import migrations, models
import django.db.models.deletion


BLOOD_TYPE_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
        ('organizations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('email', models.EmailField(db_index=True, max_length=255, unique=True)),
                ('display_name', models.CharField(blank=True, max_length=100)),
                ('roles', models.JSONField(blank=True, default=list)),
                ('blood_type', models.CharField(blank=True, choices=BLOOD_TYPE_CHOICES, max_length=3)),
                ('credit_balance', models.IntegerField(default=0)),
                ('credits_total_earned', models.PositiveIntegerField(default=0)),
                ('credits_total_redeemed', models.PositiveIntegerField(default=0)),
                ('emergency_active', models.BooleanField(default=False)),
                ('emergency_override_id', models.UUIDField(blank=True, null=True)),
                ('emergency_credits', models.PositiveIntegerField(blank=True, null=True)),
                ('emergency_initiated_at', models.DateTimeField(blank=True, null=True)),
                ('emergency_justification', models.TextField(blank=True)),
                ('emergency_repayment_plan', models.TextField(blank=True)),
                ('emergency_repayment_due_at', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('last_login', models.DateTimeField(blank=True, null=True)),
                ('organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='staff', to='organizations.organization')),
                ('emergency_organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='organizations.organization')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
            },
        ),
    ]
