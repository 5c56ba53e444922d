from django.core.validators import MinValueValidator
from django.db import models
import uuid

from .choices import BloodType, BloodComponent


class TransactionType(models.TextChoices):
    DONATION = 'DONATION', 'Donation'
    REDEMPTION = 'REDEMPTION', 'Redemption'
    EMERGENCY_OVERRIDE = 'EMERGENCY_OVERRIDE', 'Emergency override'


class ConsentStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    DECLINED = 'DECLINED', 'Declined'


class EmergencyCaseStatus(models.TextChoices):
    OUTSTANDING = 'OUTSTANDING', 'Outstanding'
    RESOLVED = 'RESOLVED', 'Resolved'


class ExchangeStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'


class ImmutableRecordError(Exception):
    """Raised on an attempt to modify or delete an immutable ledger row."""
    pass


class LedgerTransaction(models.Model):
    """
    Immutable record of one ledger event.

    The id is generated by the service before the atomic unit starts, so a
    unit that fails to commit can be re-run without a second id. Rows are
    insert-only: saving an existing row or deleting one raises
    ImmutableRecordError.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    type = models.CharField(max_length=30, choices=TransactionType.choices, db_index=True)
    credits = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.PROTECT,
        related_name='ledger_transactions'
    )
    donor = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='donation_transactions'
    )
    credit_owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='redemption_transactions'
    )
    beneficiary = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='beneficiary_transactions'
    )
    initiated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='initiated_transactions'
    )
    consent_request = models.ForeignKey(
        'ConsentRequest',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='transactions'
    )

    # Donation details
    blood_type = models.CharField(max_length=3, choices=BloodType.choices, blank=True)
    component = models.CharField(max_length=20, choices=BloodComponent.choices, blank=True)
    volume_ml = models.PositiveIntegerField(null=True, blank=True)
    collected_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    # Emergency override details
    justification = models.TextField(blank=True)
    repayment_plan = models.TextField(blank=True)
    repayment_due_at = models.DateTimeField(null=True, blank=True)

    recorded_at = models.DateTimeField(db_index=True)

    class Meta:
        db_table = 'ledger_transactions'
        ordering = ['-recorded_at']

    def __str__(self):
        return f"{self.type} {self.credits} ({self.id})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError(f"Transaction {self.id} is immutable")
        kwargs['force_insert'] = True
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError(f"Transaction {self.id} cannot be deleted")


class CreditEvent(models.Model):
    """Append-only entry in a user's credit event log."""

    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='credit_events'
    )
    type = models.CharField(max_length=30, choices=TransactionType.choices)
    credits = models.PositiveIntegerField()
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.PROTECT,
        related_name='+'
    )
    transaction = models.ForeignKey(
        LedgerTransaction,
        on_delete=models.PROTECT,
        related_name='credit_events'
    )
    beneficiary = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    at = models.DateTimeField()

    class Meta:
        db_table = 'credit_events'
        ordering = ['at', 'id']

    def __str__(self):
        return f"{self.type} {self.credits} for {self.user_id}"


class ConsentRequest(models.Model):
    """Request to spend a credit owner's balance on behalf of a beneficiary."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    status = models.CharField(
        max_length=20,
        choices=ConsentStatus.choices,
        default=ConsentStatus.PENDING,
        db_index=True
    )
    credit_owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='consent_requests_owned'
    )
    beneficiary = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='consent_requests_received'
    )
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.PROTECT,
        related_name='consent_requests'
    )
    credits = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    expires_at = models.DateTimeField(null=True, blank=True)

    # Only the keys supplied at creation are stored
    context = models.JSONField(default=dict, blank=True)

    requested_at = models.DateTimeField()
    decided_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='consent_decisions'
    )
    decided_at = models.DateTimeField(null=True, blank=True)
    decision_note = models.TextField(null=True, blank=True)

    class Meta:
        db_table = 'consent_requests'
        ordering = ['-requested_at']

    def __str__(self):
        return f"Consent {self.id} ({self.status})"

    @property
    def is_pending(self):
        return self.status == ConsentStatus.PENDING

    @property
    def requested_blood_type(self):
        return (self.context or {}).get('requested_blood_type')


class EmergencyCase(models.Model):
    """Outstanding debt opened by an emergency override."""

    # Shares its id with the override transaction
    id = models.UUIDField(primary_key=True, editable=False)
    beneficiary = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='emergency_cases'
    )
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.PROTECT,
        related_name='emergency_cases'
    )
    initiated_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='emergency_cases_initiated'
    )
    credits = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=20,
        choices=EmergencyCaseStatus.choices,
        default=EmergencyCaseStatus.OUTSTANDING,
        db_index=True
    )
    justification = models.TextField()
    repayment_plan = models.TextField(blank=True)
    repayment_due_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        db_table = 'emergency_cases'
        ordering = ['-created_at']

    def __str__(self):
        return f"Emergency {self.id} ({self.status})"


class ExchangeProposal(models.Model):
    """Logged intent for two organizations to swap credits."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    requesting_organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.PROTECT,
        related_name='exchanges_requested'
    )
    offering_organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.PROTECT,
        related_name='exchanges_offered'
    )
    requested_blood_type = models.CharField(max_length=3, choices=BloodType.choices)
    requested_credits = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    offered_blood_type = models.CharField(max_length=3, choices=BloodType.choices)
    offered_credits = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=20,
        choices=ExchangeStatus.choices,
        default=ExchangeStatus.PENDING,
        db_index=True
    )
    notes = models.TextField(blank=True)

    proposed_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'exchange_proposals'
        ordering = ['-proposed_at']

    def __str__(self):
        return (
            f"{self.requesting_organization_id} wants {self.requested_credits} "
            f"{self.requested_blood_type} for {self.offered_credits} {self.offered_blood_type}"
        )
