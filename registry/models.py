"""
Certified Farm Registry Models

Seven keyed stores plus the per-farm history counter and the process-wide
registry state:
- Farm, FarmCategory, FarmStatus (keyed by farm)
- Certification (keyed by farm)
- HistoryEntry (keyed by farm + entry_id)
- Collaborator (keyed by farm + collaborator)
- RevenueShare (keyed by farm + participant)
- HistoryCounter (keyed by farm)
- RegistryState (singleton: admin, paused, farm_counter)

Rows are written only by registry.services.RegistryService. Other ledgers
(batch tracking, escrow, verification, audit aggregation, disputes) read
them and rely on these exact keys and field sets.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from .constants import (
    ACTOR_MAX_LENGTH,
    FARM_NAME_MAX_LENGTH,
    FARM_LOCATION_MAX_LENGTH,
    CATEGORY_MAX_LENGTH,
    CERTIFICATION_LEVEL_MAX_LENGTH,
    CERTIFICATION_NOTES_MAX_LENGTH,
    HISTORY_ACTION_MAX_LENGTH,
    HISTORY_DETAILS_MAX_LENGTH,
    COLLABORATOR_ROLE_MAX_LENGTH,
    STATUS_MAX_LENGTH,
    DEFAULT_FARM_STATUS,
    MAX_HISTORY_ENTRIES,
    MAX_SHARE_PERCENTAGE,
)


class RegistryState(models.Model):
    """
    Process-wide registry state.

    Singleton model - exactly one row (pk=1) exists. Mutating operations
    lock it with select_for_update() so they run one at a time.
    """
    SINGLETON_PK = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_PK, editable=False)
    admin = models.CharField(
        max_length=ACTOR_MAX_LENGTH,
        help_text="Actor holding pause, revoke and admin-transfer authority"
    )
    paused = models.BooleanField(
        default=False,
        help_text="When set, every mutating farm operation is rejected"
    )
    farm_counter = models.PositiveIntegerField(
        default=0,
        help_text="Last issued farm id (0 = none issued yet)"
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'registry_state'
        verbose_name = 'Registry State'
        verbose_name_plural = 'Registry State'

    def __str__(self):
        return f"Registry State (admin={self.admin}, paused={self.paused}, farms={self.farm_counter})"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    @classmethod
    def get_state(cls, lock=False):
        """
        Get the registry state, creating it with the configured initial
        admin if none exists.

        Args:
            lock: Take a row lock (must be inside transaction.atomic)
        """
        queryset = cls.objects.all()
        if lock:
            queryset = queryset.select_for_update()

        state = queryset.filter(pk=cls.SINGLETON_PK).first()
        if state is None:
            cls.objects.get_or_create(
                pk=cls.SINGLETON_PK,
                defaults={'admin': settings.REGISTRY_INITIAL_ADMIN},
            )
            state = queryset.get(pk=cls.SINGLETON_PK)
        return state


class Farm(models.Model):
    """
    A registered farm. The owner is fixed at registration.
    """
    id = models.PositiveIntegerField(primary_key=True, editable=False)
    owner = models.CharField(max_length=ACTOR_MAX_LENGTH, db_index=True)
    name = models.CharField(max_length=FARM_NAME_MAX_LENGTH)
    location = models.CharField(max_length=FARM_LOCATION_MAX_LENGTH)
    registered_at = models.DateTimeField()
    last_updated_at = models.DateTimeField()

    class Meta:
        db_table = 'registry_farms'
        ordering = ['id']

    def __str__(self):
        return f"Farm #{self.id}: {self.name}"


class FarmCategory(models.Model):
    """Classification set at registration."""
    farm = models.OneToOneField(
        Farm,
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='category'
    )
    primary_category = models.CharField(max_length=CATEGORY_MAX_LENGTH, blank=True)
    tags = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = 'registry_farm_categories'
        verbose_name_plural = 'Farm categories'

    def __str__(self):
        return f"{self.primary_category} ({self.farm_id})"


class Certification(models.Model):
    """
    Current certification record for a farm.

    Revocation flips `certified` to False; the row is kept so the last
    certifier, level and expiry stay queryable.
    """
    farm = models.OneToOneField(
        Farm,
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='certification'
    )
    certified = models.BooleanField(default=False)
    certifier = models.CharField(max_length=ACTOR_MAX_LENGTH)
    level = models.CharField(max_length=CERTIFICATION_LEVEL_MAX_LENGTH)
    expiry = models.DateTimeField()
    notes = models.CharField(max_length=CERTIFICATION_NOTES_MAX_LENGTH, blank=True)

    class Meta:
        db_table = 'registry_certifications'

    def __str__(self):
        state = 'certified' if self.certified else 'not certified'
        return f"Farm #{self.farm_id} {state} ({self.level})"


class HistoryEntry(models.Model):
    """
    Append-only audit record. entry_id runs 1..MAX_HISTORY_ENTRIES per farm.
    """
    farm = models.ForeignKey(Farm, on_delete=models.PROTECT, related_name='history_entries')
    entry_id = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(MAX_HISTORY_ENTRIES)]
    )
    action = models.CharField(max_length=HISTORY_ACTION_MAX_LENGTH)
    timestamp = models.DateTimeField()
    performer = models.CharField(max_length=ACTOR_MAX_LENGTH)
    details = models.CharField(max_length=HISTORY_DETAILS_MAX_LENGTH, blank=True)

    class Meta:
        db_table = 'registry_history_entries'
        ordering = ['farm', 'entry_id']
        verbose_name_plural = 'History entries'
        constraints = [
            models.UniqueConstraint(fields=['farm', 'entry_id'], name='unique_history_entry_per_farm'),
        ]

    def __str__(self):
        return f"Farm #{self.farm_id} entry {self.entry_id}: {self.action}"


class HistoryCounter(models.Model):
    """Number of history entries written for a farm."""
    farm = models.OneToOneField(
        Farm,
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='history_counter'
    )
    count = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(MAX_HISTORY_ENTRIES)]
    )

    class Meta:
        db_table = 'registry_history_counters'

    def __str__(self):
        return f"Farm #{self.farm_id}: {self.count} entries"


class Collaborator(models.Model):
    """
    Delegated actor on a farm. Permissions are stored as opaque tags and
    are not enforced by the registry.
    """
    farm = models.ForeignKey(Farm, on_delete=models.PROTECT, related_name='collaborators')
    collaborator = models.CharField(max_length=ACTOR_MAX_LENGTH)
    role = models.CharField(max_length=COLLABORATOR_ROLE_MAX_LENGTH)
    permissions = models.JSONField(default=list, blank=True)
    added_at = models.DateTimeField()

    class Meta:
        db_table = 'registry_collaborators'
        ordering = ['farm', 'added_at']
        constraints = [
            models.UniqueConstraint(fields=['farm', 'collaborator'], name='unique_collaborator_per_farm'),
        ]

    def __str__(self):
        return f"{self.collaborator} ({self.role}) on farm #{self.farm_id}"


class FarmStatus(models.Model):
    """Operational status and visibility of a farm."""
    farm = models.OneToOneField(
        Farm,
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='status'
    )
    status = models.CharField(max_length=STATUS_MAX_LENGTH, default=DEFAULT_FARM_STATUS)
    visible = models.BooleanField(default=True)
    last_updated_at = models.DateTimeField()

    class Meta:
        db_table = 'registry_farm_statuses'
        verbose_name_plural = 'Farm statuses'

    def __str__(self):
        return f"Farm #{self.farm_id}: {self.status}"


class RevenueShare(models.Model):
    """
    Percentage-split agreement for a (farm, participant) pair.

    total_received and last_payout_at are maintained by the escrow ledger;
    the registry only resets them when an agreement is (re)defined.
    """
    farm = models.ForeignKey(Farm, on_delete=models.PROTECT, related_name='revenue_shares')
    participant = models.CharField(max_length=ACTOR_MAX_LENGTH)
    percentage = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(0), MaxValueValidator(MAX_SHARE_PERCENTAGE)]
    )
    total_received = models.DecimalField(
        max_digits=20,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(0)]
    )
    last_payout_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'registry_revenue_shares'
        ordering = ['farm', 'participant']
        constraints = [
            models.UniqueConstraint(fields=['farm', 'participant'], name='unique_revenue_share_per_farm'),
            models.CheckConstraint(
                condition=models.Q(percentage__lte=MAX_SHARE_PERCENTAGE),
                name='revenue_share_percentage_lte_100'
            ),
        ]

    def __str__(self):
        return f"{self.participant}: {self.percentage}% of farm #{self.farm_id}"
