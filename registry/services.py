"""
Certified Farm Registry Service

All registry state transitions go through RegistryService:
- Farm registration and detail updates
- Certification and revocation
- Collaborators and revenue-share agreements
- Operational status
- Pause switch and admin transfer

Every mutating method runs as one transaction. It locks the RegistryState
row, then validates in a fixed order: pause, existence, authorization,
input shape, history capacity. The first failure raises a RegistryError,
which rolls back everything the method already wrote.
"""

from datetime import datetime
from decimal import Decimal
from functools import wraps
import logging

from django.db import transaction
from django.utils import timezone

from .constants import (
    ACTOR_MAX_LENGTH,
    FARM_NAME_MAX_LENGTH,
    FARM_LOCATION_MAX_LENGTH,
    CATEGORY_MAX_LENGTH,
    MAX_TAGS,
    TAG_MAX_LENGTH,
    CERTIFICATION_LEVEL_MAX_LENGTH,
    CERTIFICATION_NOTES_MAX_LENGTH,
    HISTORY_DETAILS_MAX_LENGTH,
    COLLABORATOR_ROLE_MAX_LENGTH,
    MAX_PERMISSIONS,
    PERMISSION_MAX_LENGTH,
    STATUS_MAX_LENGTH,
    DEFAULT_FARM_STATUS,
    MAX_SHARE_PERCENTAGE,
    ACTION_REGISTERED,
    ACTION_UPDATED_DETAILS,
    ACTION_CERTIFIED,
    ACTION_REVOKED,
    ACTION_ADDED_COLLABORATOR,
    ACTION_STATUS_UPDATED,
    ACTION_SET_REVENUE_SHARE,
)
from .errors import (
    RegistryError,
    Unauthorized,
    AlreadyRegistered,
    InvalidDetails,
    NotFound,
    InvalidPercentage,
    Paused,
)
from .history import AuditHistoryLog
from .models import (
    RegistryState,
    Farm,
    FarmCategory,
    Certification,
    Collaborator,
    FarmStatus,
    RevenueShare,
)
from .policies import RegistryPolicy

logger = logging.getLogger(__name__)


def registry_operation(func):
    """Log rejected registry operations and re-raise."""
    @wraps(func)
    def wrapper(self, caller, *args, **kwargs):
        try:
            return func(self, caller, *args, **kwargs)
        except RegistryError as e:
            logger.warning(f"{func.__name__} rejected for {caller}: {e.kind} ({e.message})")
            raise
    return wrapper


# ==============================================================================
# INPUT SHAPE
# ==============================================================================

def _check_text(value, max_length, field, allow_empty=True):
    if not isinstance(value, str):
        raise InvalidDetails(f"{field} must be text")
    if not allow_empty and not value:
        raise InvalidDetails(f"{field} is required")
    if len(value) > max_length:
        raise InvalidDetails(f"{field} exceeds {max_length} characters")


def _check_text_list(values, max_items, max_length, field):
    if not isinstance(values, (list, tuple)):
        raise InvalidDetails(f"{field} must be a list")
    if len(values) > max_items:
        raise InvalidDetails(f"{field} allows at most {max_items} items")
    for value in values:
        _check_text(value, max_length, f"{field} item")


class RegistryService:
    """Service for managing the certified farm registry"""

    # operation -> (record loader, policy rule, refusal message)
    ACCESS_RULES = {
        'register_farm': (None, RegistryPolicy.can_register, "Caller may not register farms"),
        'update_farm_details': (
            '_load_farm', RegistryPolicy.can_update_details,
            "Only the owner can update farm #{farm_id}",
        ),
        'certify_farm': (
            '_load_farm', RegistryPolicy.can_certify,
            "Only the admin or owner can certify farm #{farm_id}",
        ),
        'revoke_certification': (
            '_load_certification', RegistryPolicy.can_revoke,
            "Only the admin can revoke certifications",
        ),
        'add_collaborator': (
            '_load_farm', RegistryPolicy.can_add_collaborator,
            "Only the owner can add collaborators to farm #{farm_id}",
        ),
        'update_farm_status': (
            '_load_status', RegistryPolicy.can_update_status,
            "Only the admin or owner can update status of farm #{farm_id}",
        ),
        'set_revenue_share': (
            '_load_farm', RegistryPolicy.can_set_revenue_share,
            "Only the owner can set revenue shares on farm #{farm_id}",
        ),
        'pause': (None, RegistryPolicy.can_administer, "Only the admin can pause the registry"),
        'unpause': (None, RegistryPolicy.can_administer, "Only the admin can unpause the registry"),
        'transfer_admin': (
            None, RegistryPolicy.can_administer,
            "Only the admin can transfer admin authority",
        ),
    }

    # Not gated by the pause switch
    ADMIN_OPERATIONS = ('pause', 'unpause', 'transfer_admin')

    def __init__(self):
        self.history = AuditHistoryLog()

    # ==========================================================================
    # INTERNAL HELPERS
    # ==========================================================================

    def _load_state(self):
        state = RegistryState.get_state(lock=True)
        if state.paused:
            raise Paused()
        return state

    def _load_farm(self, farm_id):
        farm = Farm.objects.select_for_update().filter(pk=farm_id).first()
        if farm is None:
            raise NotFound(f"Farm #{farm_id} not found")
        return farm

    def _load_certification(self, farm_id):
        certification = (
            Certification.objects
            .select_for_update()
            .select_related('farm')
            .filter(farm_id=farm_id)
            .first()
        )
        if certification is None:
            raise NotFound(f"Farm #{farm_id} has no certification record")
        return certification

    def _load_status(self, farm_id):
        farm_status = (
            FarmStatus.objects
            .select_for_update()
            .select_related('farm')
            .filter(farm_id=farm_id)
            .first()
        )
        if farm_status is None:
            raise NotFound(f"Farm #{farm_id} has no status record")
        return farm_status

    def _authorize(self, state, operation, caller, farm_id=None):
        """
        Load the record `operation` targets and check the caller against
        its policy rule.

        Returns:
            The loaded Farm, Certification or FarmStatus, or None for
            registry-wide operations

        Raises:
            NotFound: the targeted record does not exist
            Unauthorized: the policy rule refuses the caller
        """
        loader, rule, message = self.ACCESS_RULES[operation]
        if loader is None:
            record = None
            allowed = rule(state, caller)
        else:
            record = getattr(self, loader)(farm_id)
            farm = record if isinstance(record, Farm) else record.farm
            allowed = rule(state, farm, caller)

        if not allowed:
            raise Unauthorized(message.format(farm_id=farm_id))
        return record

    @registry_operation
    @transaction.atomic
    def check_access(self, caller, operation, farm_id=None):
        """
        Run the pause, existence and authorization checks of `operation`
        without writing anything.

        Views call this before reporting a malformed request body.
        """
        if operation in self.ADMIN_OPERATIONS:
            state = RegistryState.get_state(lock=True)
        else:
            state = self._load_state()
        self._authorize(state, operation, caller, farm_id)

    # ==========================================================================
    # FARM RECORDS
    # ==========================================================================

    @registry_operation
    @transaction.atomic
    def register_farm(self, caller, name, location, category='', tags=()):
        """
        Register a new farm owned by the caller.

        Creates the Farm, FarmCategory and FarmStatus ('Pending', visible)
        rows, writes the 'Registered' history entry and issues the next
        farm id.

        Returns:
            The new farm id
        """
        state = self._load_state()
        self._authorize(state, 'register_farm', caller)

        _check_text(name, FARM_NAME_MAX_LENGTH, 'name', allow_empty=False)
        _check_text(location, FARM_LOCATION_MAX_LENGTH, 'location', allow_empty=False)
        _check_text(category, CATEGORY_MAX_LENGTH, 'category')
        _check_text_list(tags, MAX_TAGS, TAG_MAX_LENGTH, 'tags')

        now = timezone.now()
        farm_id = state.farm_counter + 1

        farm = Farm.objects.create(
            id=farm_id,
            owner=caller,
            name=name,
            location=location,
            registered_at=now,
            last_updated_at=now,
        )
        FarmCategory.objects.create(farm=farm, primary_category=category, tags=list(tags))
        FarmStatus.objects.create(
            farm=farm,
            status=DEFAULT_FARM_STATUS,
            visible=True,
            last_updated_at=now,
        )
        self.history.append(farm, ACTION_REGISTERED, 'Initial farm registration', caller, now)

        state.farm_counter = farm_id
        state.save(update_fields=['farm_counter', 'updated_at'])

        logger.info(f"Farm #{farm_id} '{name}' registered by {caller}")
        return farm_id

    @registry_operation
    @transaction.atomic
    def update_farm_details(self, caller, farm_id, name, location):
        """Change a farm's name and location (owner only)."""
        state = self._load_state()
        farm = self._authorize(state, 'update_farm_details', caller, farm_id)

        _check_text(name, FARM_NAME_MAX_LENGTH, 'name')
        _check_text(location, FARM_LOCATION_MAX_LENGTH, 'location')

        now = timezone.now()
        farm.name = name
        farm.location = location
        farm.last_updated_at = now
        farm.save(update_fields=['name', 'location', 'last_updated_at'])

        self.history.append(farm, ACTION_UPDATED_DETAILS, 'Changed name and location', caller, now)

        logger.info(f"Farm #{farm_id} details updated by {caller}")
        return farm

    def get_farm(self, farm_id):
        return Farm.objects.filter(pk=farm_id).first()

    def get_category(self, farm_id):
        return FarmCategory.objects.filter(farm_id=farm_id).first()

    # ==========================================================================
    # CERTIFICATION
    # ==========================================================================

    @registry_operation
    @transaction.atomic
    def certify_farm(self, caller, farm_id, level, expiry, notes=''):
        """
        Certify a farm (admin or the farm's owner).

        Overwrites any existing certification record, including a revoked
        one. The caller is recorded as certifier.
        """
        state = self._load_state()
        farm = self._authorize(state, 'certify_farm', caller, farm_id)

        _check_text(level, CERTIFICATION_LEVEL_MAX_LENGTH, 'level')
        _check_text(notes, CERTIFICATION_NOTES_MAX_LENGTH, 'notes')
        if not isinstance(expiry, datetime):
            raise InvalidDetails("expiry must be a datetime")

        certification, _ = Certification.objects.update_or_create(
            farm=farm,
            defaults={
                'certified': True,
                'certifier': caller,
                'level': level,
                'expiry': expiry,
                'notes': notes,
            },
        )

        # level is bounded to 50 chars, so 'Level: ' + level fits in details
        self.history.append(farm, ACTION_CERTIFIED, f'Level: {level}', caller, timezone.now())

        logger.info(f"Farm #{farm_id} certified at level '{level}' by {caller}")
        return certification

    @registry_operation
    @transaction.atomic
    def revoke_certification(self, caller, farm_id, reason=''):
        """
        Revoke a farm's certification (admin only).

        The record is kept with certified=False.
        """
        state = self._load_state()
        certification = self._authorize(state, 'revoke_certification', caller, farm_id)

        _check_text(reason, HISTORY_DETAILS_MAX_LENGTH, 'reason')

        certification.certified = False
        certification.save(update_fields=['certified'])

        self.history.append(certification.farm, ACTION_REVOKED, reason, caller, timezone.now())

        logger.info(f"Certification of farm #{farm_id} revoked by {caller}: {reason}")
        return certification

    def get_certification(self, farm_id):
        return Certification.objects.filter(farm_id=farm_id).first()

    # ==========================================================================
    # COLLABORATORS
    # ==========================================================================

    @registry_operation
    @transaction.atomic
    def add_collaborator(self, caller, farm_id, collaborator, role, permissions=()):
        """Add a collaborator to a farm (owner only). Pairs are unique."""
        state = self._load_state()
        farm = self._authorize(state, 'add_collaborator', caller, farm_id)

        if Collaborator.objects.filter(farm=farm, collaborator=collaborator).exists():
            raise AlreadyRegistered(f"{collaborator} is already a collaborator on farm #{farm_id}")

        _check_text(collaborator, ACTOR_MAX_LENGTH, 'collaborator', allow_empty=False)
        _check_text(role, COLLABORATOR_ROLE_MAX_LENGTH, 'role')
        _check_text_list(permissions, MAX_PERMISSIONS, PERMISSION_MAX_LENGTH, 'permissions')

        now = timezone.now()
        record = Collaborator.objects.create(
            farm=farm,
            collaborator=collaborator,
            role=role,
            permissions=list(permissions),
            added_at=now,
        )

        self.history.append(farm, ACTION_ADDED_COLLABORATOR, f'Role: {role}', caller, now)

        logger.info(f"{collaborator} added to farm #{farm_id} as '{role}' by {caller}")
        return record

    def get_collaborator(self, farm_id, collaborator):
        return Collaborator.objects.filter(farm_id=farm_id, collaborator=collaborator).first()

    # ==========================================================================
    # STATUS
    # ==========================================================================

    @registry_operation
    @transaction.atomic
    def update_farm_status(self, caller, farm_id, status, visible):
        """Overwrite a farm's operational status and visibility (owner or admin)."""
        state = self._load_state()
        farm_status = self._authorize(state, 'update_farm_status', caller, farm_id)

        _check_text(status, STATUS_MAX_LENGTH, 'status')
        if not isinstance(visible, bool):
            raise InvalidDetails("visible must be a boolean")

        now = timezone.now()
        farm_status.status = status
        farm_status.visible = visible
        farm_status.last_updated_at = now
        farm_status.save(update_fields=['status', 'visible', 'last_updated_at'])

        self.history.append(farm_status.farm, ACTION_STATUS_UPDATED, status, caller, now)

        logger.info(f"Farm #{farm_id} status set to '{status}' (visible={visible}) by {caller}")
        return farm_status

    def get_status(self, farm_id):
        return FarmStatus.objects.filter(farm_id=farm_id).first()

    # ==========================================================================
    # REVENUE SHARES
    # ==========================================================================

    @registry_operation
    @transaction.atomic
    def set_revenue_share(self, caller, farm_id, participant, percentage):
        """
        Define or redefine a participant's revenue share (owner only).

        Redefining resets total_received and last_payout_at; the registry
        never accumulates payouts itself.
        """
        state = self._load_state()
        farm = self._authorize(state, 'set_revenue_share', caller, farm_id)

        if isinstance(percentage, bool) or not isinstance(percentage, int):
            raise InvalidPercentage("percentage must be a whole number")
        if percentage < 0 or percentage > MAX_SHARE_PERCENTAGE:
            raise InvalidPercentage(
                f"percentage must be between 0 and {MAX_SHARE_PERCENTAGE}, got {percentage}"
            )
        # 'Participant: ' + a 128-char handle would overflow the details column
        _check_text(participant, HISTORY_DETAILS_MAX_LENGTH - len('Participant: '), 'participant', allow_empty=False)

        share, _ = RevenueShare.objects.update_or_create(
            farm=farm,
            participant=participant,
            defaults={
                'percentage': percentage,
                'total_received': Decimal('0.00'),
                'last_payout_at': None,
            },
        )

        self.history.append(
            farm, ACTION_SET_REVENUE_SHARE, f'Participant: {participant}', caller, timezone.now()
        )

        logger.info(f"Revenue share for {participant} on farm #{farm_id} set to {percentage}% by {caller}")
        return share

    def get_revenue_share(self, farm_id, participant):
        return RevenueShare.objects.filter(farm_id=farm_id, participant=participant).first()

    # ==========================================================================
    # AUDIT HISTORY
    # ==========================================================================

    def get_history_entry(self, farm_id, entry_id):
        return self.history.get_entry(farm_id, entry_id)

    def get_history_count(self, farm_id):
        return self.history.get_count(farm_id)

    def list_history(self, farm_id):
        return self.history.list_entries(farm_id)

    # ==========================================================================
    # PAUSE SWITCH & ADMIN
    # ==========================================================================

    @registry_operation
    @transaction.atomic
    def pause(self, caller):
        """Reject every farm mutation until unpaused (admin only)."""
        state = RegistryState.get_state(lock=True)
        self._authorize(state, 'pause', caller)

        state.paused = True
        state.save(update_fields=['paused', 'updated_at'])

        logger.warning(f"Registry paused by {caller}")
        return state

    @registry_operation
    @transaction.atomic
    def unpause(self, caller):
        state = RegistryState.get_state(lock=True)
        self._authorize(state, 'unpause', caller)

        state.paused = False
        state.save(update_fields=['paused', 'updated_at'])

        logger.info(f"Registry unpaused by {caller}")
        return state

    @registry_operation
    @transaction.atomic
    def transfer_admin(self, caller, new_admin):
        """
        Hand admin authority to another actor (admin only).

        The previous admin loses admin authority immediately.
        """
        state = RegistryState.get_state(lock=True)
        self._authorize(state, 'transfer_admin', caller)

        _check_text(new_admin, ACTOR_MAX_LENGTH, 'new_admin', allow_empty=False)

        previous_admin = state.admin
        state.admin = new_admin
        state.save(update_fields=['admin', 'updated_at'])

        logger.warning(f"Registry admin transferred from {previous_admin} to {new_admin}")
        return state

    def is_paused(self):
        return RegistryState.get_state().paused

    def get_admin(self):
        return RegistryState.get_state().admin

    def get_farm_counter(self):
        return RegistryState.get_state().farm_counter
