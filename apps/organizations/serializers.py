from rest_framework import serializers
from .models import Organization, InventoryRecord


class OrganizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organization
        fields = ['id', 'name', 'city', 'contact_email', 'status', 'verified_at', 'created_at']
        read_only_fields = fields


class InventoryRecordSerializer(serializers.ModelSerializer):
    """Credit totals for one blood type."""

    class Meta:
        model = InventoryRecord
        fields = ['blood_type', 'available_credits', 'total_donated_credits', 'updated_at']
        read_only_fields = fields


class OrganizationInventorySerializer(serializers.Serializer):
    organization_id = serializers.UUIDField()
    inventory = InventoryRecordSerializer(many=True)
