"""
Registry Serializers

Input serializers only coerce request types; length bounds and percentage
range are enforced by RegistryService so that the pause switch, existence
and authorization checks are reported first.
"""
from rest_framework import serializers

from .models import (
    Farm,
    FarmCategory,
    Certification,
    HistoryEntry,
    Collaborator,
    FarmStatus,
    RevenueShare,
    RegistryState,
)


def _text(**kwargs):
    return serializers.CharField(allow_blank=True, trim_whitespace=False, **kwargs)


# =============================================================================
# INPUT
# =============================================================================

class FarmRegistrationSerializer(serializers.Serializer):
    name = _text()
    location = _text()
    category = _text(required=False, default='')
    tags = serializers.ListField(child=_text(), required=False, default=list)


class FarmDetailsUpdateSerializer(serializers.Serializer):
    name = _text()
    location = _text()


class CertifySerializer(serializers.Serializer):
    level = _text()
    expiry = serializers.DateTimeField()
    notes = _text(required=False, default='')


class RevokeSerializer(serializers.Serializer):
    reason = _text(required=False, default='')


class CollaboratorCreateSerializer(serializers.Serializer):
    collaborator = _text()
    role = _text()
    permissions = serializers.ListField(child=_text(), required=False, default=list)


class FarmStatusUpdateSerializer(serializers.Serializer):
    status = _text()
    visible = serializers.BooleanField()


class RevenueShareSetSerializer(serializers.Serializer):
    percentage = serializers.IntegerField()


class TransferAdminSerializer(serializers.Serializer):
    new_admin = _text()


# =============================================================================
# OUTPUT
# =============================================================================

class FarmSerializer(serializers.ModelSerializer):
    class Meta:
        model = Farm
        fields = ['id', 'owner', 'name', 'location', 'registered_at', 'last_updated_at']
        read_only_fields = fields


class FarmCategorySerializer(serializers.ModelSerializer):
    farm_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = FarmCategory
        fields = ['farm_id', 'primary_category', 'tags']
        read_only_fields = fields


class CertificationSerializer(serializers.ModelSerializer):
    farm_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Certification
        fields = ['farm_id', 'certified', 'certifier', 'level', 'expiry', 'notes']
        read_only_fields = fields


class HistoryEntrySerializer(serializers.ModelSerializer):
    farm_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = HistoryEntry
        fields = ['farm_id', 'entry_id', 'action', 'timestamp', 'performer', 'details']
        read_only_fields = fields


class CollaboratorSerializer(serializers.ModelSerializer):
    farm_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Collaborator
        fields = ['farm_id', 'collaborator', 'role', 'permissions', 'added_at']
        read_only_fields = fields


class FarmStatusSerializer(serializers.ModelSerializer):
    farm_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = FarmStatus
        fields = ['farm_id', 'status', 'visible', 'last_updated_at']
        read_only_fields = fields


class RevenueShareSerializer(serializers.ModelSerializer):
    farm_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = RevenueShare
        fields = ['farm_id', 'participant', 'percentage', 'total_received', 'last_payout_at']
        read_only_fields = fields


class RegistryStateSerializer(serializers.ModelSerializer):
    class Meta:
        model = RegistryState
        fields = ['admin', 'paused', 'farm_counter', 'updated_at']
        read_only_fields = fields


def serialize_or_none(serializer_class, instance):
    """Serialize an instance, or return None when absent."""
    if instance is None:
        return None
    return serializer_class(instance).data
