from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Authenticated user's profile with their ledger claims."""

    organization_id = serializers.UUIDField(read_only=True, allow_null=True)
    credits = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'roles',
            'blood_type',
            'organization_id',
            'credits',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields

    def get_credits(self, obj) -> dict:
        record = obj.credit_record()
        return {
            'balance': record['balance'],
            'total_earned': record['total_earned'],
            'total_redeemed': record['total_redeemed'],
            'emergency_active': record['emergency']['active'],
        }
