from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid

from apps.ledger.choices import BloodType


class Role(models.TextChoices):
    DONOR = 'donor', 'Donor'
    RECIPIENT = 'recipient', 'Recipient'
    ORGANIZATION = 'organization', 'Organization staff'
    GOVERNMENT = 'government', 'Government'
    ADMIN = 'admin', 'Administrator'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('roles', [Role.ADMIN.value])

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Ledger participant with email authentication.

    The credit_* and emergency_* columns form the user's credit record.
    They are written only by the ledger services inside an atomic unit
    of work; never assign them from views or forms.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)

    # Role claims supplied to the access policy
    roles = models.JSONField(default=list, blank=True)
    blood_type = models.CharField(max_length=3, choices=BloodType.choices, blank=True)
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='staff'
    )

    # Credit record
    credit_balance = models.IntegerField(default=0)
    credits_total_earned = models.PositiveIntegerField(default=0)
    credits_total_redeemed = models.PositiveIntegerField(default=0)

    # Active emergency override, if any
    emergency_active = models.BooleanField(default=False)
    emergency_override_id = models.UUIDField(null=True, blank=True)
    emergency_credits = models.PositiveIntegerField(null=True, blank=True)
    emergency_initiated_at = models.DateTimeField(null=True, blank=True)
    emergency_organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    emergency_justification = models.TextField(blank=True)
    emergency_repayment_plan = models.TextField(blank=True)
    emergency_repayment_due_at = models.DateTimeField(null=True, blank=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]

    def has_role(self, *roles):
        """True if the user holds any of the given roles."""
        return any(role in (self.roles or []) for role in roles)

    @property
    def is_ledger_admin(self):
        return self.has_role(Role.ADMIN)

    def emergency_record(self):
        """Return the emergency sub-record as a plain dict."""
        if not self.emergency_active:
            return {'active': False}
        return {
            'active': True,
            'override_id': self.emergency_override_id,
            'credits': self.emergency_credits,
            'initiated_at': self.emergency_initiated_at,
            'organization_id': self.emergency_organization_id,
            'justification': self.emergency_justification,
            'repayment_plan': self.emergency_repayment_plan or None,
            'repayment_due_at': self.emergency_repayment_due_at,
        }

    def credit_record(self):
        """Return the credit sub-record (without the event log)."""
        return {
            'balance': self.credit_balance,
            'total_earned': self.credits_total_earned,
            'total_redeemed': self.credits_total_redeemed,
            'emergency': self.emergency_record(),
        }
