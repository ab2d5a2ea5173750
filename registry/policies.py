"""
Registry Authorization Policy

Access control rules for registry operations. Every method is a pure
predicate over the current registry state, the farm and the caller's actor
handle: no queries beyond attribute access, no side effects, no exceptions.
"""


class RegistryPolicy:
    """
    Authorization policy for registry operations.

    Roles:
    - Admin: the single actor held in RegistryState.admin
    - Owner: the actor that registered a farm
    - Anyone: any authenticated actor (may register farms)

    Collaborator permissions are opaque tags and are not consulted here.
    """

    @staticmethod
    def is_admin(state, caller):
        """Check if caller is the current registry admin."""
        return caller == state.admin

    @staticmethod
    def is_owner(farm, caller):
        """Check if caller owns the farm."""
        return farm is not None and farm.owner == caller

    @staticmethod
    def is_owner_or_admin(state, farm, caller):
        """Check if caller owns the farm or is the registry admin."""
        return RegistryPolicy.is_owner(farm, caller) or RegistryPolicy.is_admin(state, caller)

    @classmethod
    def can_register(cls, state, caller):
        """Any caller can register a farm."""
        return True

    @classmethod
    def can_update_details(cls, state, farm, caller):
        """Only the owner can change a farm's name and location."""
        return cls.is_owner(farm, caller)

    @classmethod
    def can_certify(cls, state, farm, caller):
        """
        Check if caller can certify a farm.

        Access Rules:
        - Admin: any farm
        - Owner: own farm (self-attestation)
        """
        return cls.is_owner_or_admin(state, farm, caller)

    @classmethod
    def can_revoke(cls, state, farm, caller):
        """Only the admin can revoke, including on the caller's own farm."""
        return cls.is_admin(state, caller)

    @classmethod
    def can_add_collaborator(cls, state, farm, caller):
        return cls.is_owner(farm, caller)

    @classmethod
    def can_update_status(cls, state, farm, caller):
        return cls.is_owner_or_admin(state, farm, caller)

    @classmethod
    def can_set_revenue_share(cls, state, farm, caller):
        return cls.is_owner(farm, caller)

    @classmethod
    def can_administer(cls, state, caller):
        """Pause, unpause and admin transfer."""
        return cls.is_admin(state, caller)
