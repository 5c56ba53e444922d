from django.db import models
import uuid

from apps.ledger.choices import BloodType


class OrganizationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACTIVE = 'active', 'Active'


class MovementType(models.TextChoices):
    DONATION = 'DONATION', 'Donation'
    FULFILLMENT = 'FULFILLMENT', 'Fulfillment'


class Organization(models.Model):
    """Hospital or blood center holding credit inventory."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    city = models.CharField(max_length=100, blank=True)
    contact_email = models.EmailField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=OrganizationStatus.choices,
        default=OrganizationStatus.PENDING,
        db_index=True
    )
    verified_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'organizations'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def is_active(self):
        return self.status == OrganizationStatus.ACTIVE


class InventoryRecord(models.Model):
    """Running credit total for one organization and blood type."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization,
        on_delete=models.PROTECT,
        related_name='inventory'
    )
    blood_type = models.CharField(max_length=3, choices=BloodType.choices)

    # Fulfillments may in principle drive this below zero
    available_credits = models.IntegerField(default=0)
    total_donated_credits = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_records'
        ordering = ['blood_type']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'blood_type'],
                name='unique_inventory_per_blood_type'
            ),
        ]

    def __str__(self):
        return f"{self.organization} {self.blood_type}: {self.available_credits}"


class InventoryMovement(models.Model):
    """Append-only entry in an inventory record's movement log."""

    id = models.BigAutoField(primary_key=True)
    record = models.ForeignKey(
        InventoryRecord,
        on_delete=models.CASCADE,
        related_name='movements'
    )
    type = models.CharField(max_length=20, choices=MovementType.choices)
    credits = models.PositiveIntegerField()

    # Donations reference a ledger transaction, fulfillments a consent request
    transaction_id = models.UUIDField(null=True, blank=True, db_index=True)
    consent_request_id = models.UUIDField(null=True, blank=True, db_index=True)

    at = models.DateTimeField()

    class Meta:
        db_table = 'inventory_movements'
        ordering = ['at', 'id']

    def __str__(self):
        return f"{self.type} {self.delta:+d}"

    @property
    def delta(self):
        """Signed effect on available credits."""
        if self.type == MovementType.FULFILLMENT:
            return -self.credits
        return self.credits
