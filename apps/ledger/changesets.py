"""
Typed partial updates.

Each operation that updates part of a row describes the change as a frozen
dataclass with explicit fields. apply_changeset() is the single place
that copies a changeset onto a model instance and saves exactly those
columns.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db import models


@dataclass(frozen=True)
class ConsentContext:
    """Optional context attached to a consent request."""

    requested_blood_type: Optional[str] = None
    reason: Optional[str] = None
    clinical_notes: Optional[str] = None

    @classmethod
    def from_mapping(cls, data):
        if not data:
            return cls()
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})

    def as_document(self):
        """Return only the keys that were supplied."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class ConsentResolution:
    """Terminal decision on a consent request."""

    status: str
    decided_by_id: UUID
    decided_at: datetime
    decision_note: Optional[str] = None


@dataclass(frozen=True)
class EmergencyActivation:
    """Emergency sub-record written to a user by an override."""

    emergency_override_id: UUID
    emergency_credits: int
    emergency_initiated_at: datetime
    emergency_organization_id: UUID
    emergency_justification: str
    emergency_repayment_plan: str = ''
    emergency_repayment_due_at: Optional[datetime] = None
    emergency_active: bool = True


def apply_changeset(instance: models.Model, changeset, using=None) -> list:
    """
    Copy every field of ``changeset`` onto ``instance`` and save them.

    Returns:
        The list of column names written.
    """
    update_fields = []
    for field in fields(changeset):
        setattr(instance, field.name, getattr(changeset, field.name))
        update_fields.append(field.name)

    instance.save(using=using, update_fields=update_fields)
    return update_fields
