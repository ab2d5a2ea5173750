"""
Django Admin Configuration for Registry Models

Registry rows are written only by RegistryService, so every admin here is
read-only.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import (
    RegistryState,
    Farm,
    FarmCategory,
    Certification,
    HistoryEntry,
    HistoryCounter,
    Collaborator,
    FarmStatus,
    RevenueShare,
)


class ReadOnlyAdmin(admin.ModelAdmin):
    """Browse-only admin: no add, change or delete."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(RegistryState)
class RegistryStateAdmin(ReadOnlyAdmin):
    list_display = ['admin', 'get_paused_display', 'farm_counter', 'updated_at']

    def get_paused_display(self, obj):
        if obj.paused:
            return format_html('<span style="color: {};">{}</span>', 'red', '⏸ Paused')
        return format_html('<span style="color: {};">{}</span>', 'green', '▶ Active')
    get_paused_display.short_description = 'Pause Switch'


@admin.register(Farm)
class FarmAdmin(ReadOnlyAdmin):
    list_display = ['id', 'name', 'location', 'owner', 'registered_at', 'last_updated_at']
    search_fields = ['name', 'location', 'owner']


@admin.register(FarmCategory)
class FarmCategoryAdmin(ReadOnlyAdmin):
    list_display = ['farm', 'primary_category', 'tags']
    search_fields = ['primary_category']


@admin.register(Certification)
class CertificationAdmin(ReadOnlyAdmin):
    list_display = ['farm', 'certified', 'level', 'certifier', 'expiry']
    list_filter = ['certified', 'level']


@admin.register(HistoryEntry)
class HistoryEntryAdmin(ReadOnlyAdmin):
    list_display = ['farm', 'entry_id', 'action', 'performer', 'timestamp', 'details']
    list_filter = ['action']
    search_fields = ['performer', 'details']


@admin.register(HistoryCounter)
class HistoryCounterAdmin(ReadOnlyAdmin):
    list_display = ['farm', 'count']


@admin.register(Collaborator)
class CollaboratorAdmin(ReadOnlyAdmin):
    list_display = ['farm', 'collaborator', 'role', 'added_at']
    search_fields = ['collaborator', 'role']


@admin.register(FarmStatus)
class FarmStatusAdmin(ReadOnlyAdmin):
    list_display = ['farm', 'status', 'visible', 'last_updated_at']
    list_filter = ['status', 'visible']


@admin.register(RevenueShare)
class RevenueShareAdmin(ReadOnlyAdmin):
    list_display = ['farm', 'participant', 'percentage', 'total_received', 'last_payout_at']
    search_fields = ['participant']
