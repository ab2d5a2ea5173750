"""
Certified Farm Registry Views

API endpoints over RegistryService. All paths are prefixed with
/api/registry/.

- Reads are public and never fail: absent records come back as null.
- Writes require an authenticated caller; the caller's actor handle is
  their username.
- Rejected writes return {'success': False, 'error', 'code', 'message'}
  with the error's HTTP status.
"""

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly

from .errors import RegistryError, InvalidDetails, InvalidPercentage
from .serializers import (
    FarmRegistrationSerializer,
    FarmDetailsUpdateSerializer,
    CertifySerializer,
    RevokeSerializer,
    CollaboratorCreateSerializer,
    FarmStatusUpdateSerializer,
    RevenueShareSetSerializer,
    TransferAdminSerializer,
    FarmSerializer,
    FarmCategorySerializer,
    CertificationSerializer,
    HistoryEntrySerializer,
    CollaboratorSerializer,
    FarmStatusSerializer,
    RevenueShareSerializer,
    RegistryStateSerializer,
    serialize_or_none,
)
from .services import RegistryService


class RegistryAPIView(APIView):
    """
    Base view: renders RegistryError as the registry error body and
    resolves the caller's actor handle.
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.service = RegistryService()

    def get_caller(self, request):
        return request.user.get_username()

    def handle_exception(self, exc):
        if isinstance(exc, RegistryError):
            return Response(exc.to_dict(), status=exc.http_status)
        return super().handle_exception(exc)

    def validated_data(self, serializer_class, request, operation, farm_id=None):
        """
        Validate the request body for `operation`.

        On malformed input the operation's pause, existence and
        authorization checks run first, so those errors win. Bad
        percentages are then reported as InvalidPercentage, anything
        else as InvalidDetails.
        """
        serializer = serializer_class(data=request.data)
        if serializer.is_valid():
            return serializer.validated_data

        self.service.check_access(self.get_caller(request), operation, farm_id)

        error_class = InvalidPercentage if 'percentage' in serializer.errors else InvalidDetails
        raise error_class('Validation failed', fields=serializer.errors)


# =============================================================================
# FARMS
# =============================================================================

class FarmRegisterView(RegistryAPIView):
    """
    POST /api/registry/farms/

    Register a farm owned by the caller.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        data = self.validated_data(FarmRegistrationSerializer, request, 'register_farm')
        farm_id = self.service.register_farm(
            self.get_caller(request),
            data['name'],
            data['location'],
            data['category'],
            data['tags'],
        )
        return Response(
            {
                'success': True,
                'farm_id': farm_id,
                'farm': FarmSerializer(self.service.get_farm(farm_id)).data,
            },
            status=status.HTTP_201_CREATED
        )


class FarmDetailView(RegistryAPIView):
    """
    GET /api/registry/farms/<farm_id>/
    PUT /api/registry/farms/<farm_id>/

    Read a farm, or update its name and location (owner only).
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, farm_id):
        farm = self.service.get_farm(farm_id)
        return Response({'farm': serialize_or_none(FarmSerializer, farm)})

    def put(self, request, farm_id):
        data = self.validated_data(FarmDetailsUpdateSerializer, request, 'update_farm_details', farm_id)
        farm = self.service.update_farm_details(
            self.get_caller(request), farm_id, data['name'], data['location']
        )
        return Response({'success': True, 'farm': FarmSerializer(farm).data})


class FarmCategoryView(RegistryAPIView):
    """GET /api/registry/farms/<farm_id>/category/"""
    permission_classes = [AllowAny]

    def get(self, request, farm_id):
        category = self.service.get_category(farm_id)
        return Response({'category': serialize_or_none(FarmCategorySerializer, category)})


# =============================================================================
# CERTIFICATION
# =============================================================================

class CertificationView(RegistryAPIView):
    """
    GET  /api/registry/farms/<farm_id>/certification/
    POST /api/registry/farms/<farm_id>/certification/

    Read the current certification, or certify the farm (admin or owner).
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, farm_id):
        certification = self.service.get_certification(farm_id)
        return Response({'certification': serialize_or_none(CertificationSerializer, certification)})

    def post(self, request, farm_id):
        data = self.validated_data(CertifySerializer, request, 'certify_farm', farm_id)
        certification = self.service.certify_farm(
            self.get_caller(request),
            farm_id,
            data['level'],
            data['expiry'],
            data['notes'],
        )
        return Response(
            {'success': True, 'certification': CertificationSerializer(certification).data}
        )


class RevokeCertificationView(RegistryAPIView):
    """
    POST /api/registry/farms/<farm_id>/certification/revoke/

    Revoke a certification (admin only). The record is kept.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, farm_id):
        data = self.validated_data(RevokeSerializer, request, 'revoke_certification', farm_id)
        certification = self.service.revoke_certification(
            self.get_caller(request), farm_id, data['reason']
        )
        return Response(
            {'success': True, 'certification': CertificationSerializer(certification).data}
        )


# =============================================================================
# STATUS
# =============================================================================

class FarmStatusView(RegistryAPIView):
    """
    GET /api/registry/farms/<farm_id>/status/
    PUT /api/registry/farms/<farm_id>/status/

    Read or overwrite operational status and visibility (owner or admin).
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, farm_id):
        farm_status = self.service.get_status(farm_id)
        return Response({'status': serialize_or_none(FarmStatusSerializer, farm_status)})

    def put(self, request, farm_id):
        data = self.validated_data(FarmStatusUpdateSerializer, request, 'update_farm_status', farm_id)
        farm_status = self.service.update_farm_status(
            self.get_caller(request), farm_id, data['status'], data['visible']
        )
        return Response({'success': True, 'status': FarmStatusSerializer(farm_status).data})


# =============================================================================
# COLLABORATORS
# =============================================================================

class CollaboratorCreateView(RegistryAPIView):
    """
    POST /api/registry/farms/<farm_id>/collaborators/

    Add a collaborator (owner only).
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, farm_id):
        data = self.validated_data(CollaboratorCreateSerializer, request, 'add_collaborator', farm_id)
        collaborator = self.service.add_collaborator(
            self.get_caller(request),
            farm_id,
            data['collaborator'],
            data['role'],
            data['permissions'],
        )
        return Response(
            {'success': True, 'collaborator': CollaboratorSerializer(collaborator).data},
            status=status.HTTP_201_CREATED
        )


class CollaboratorDetailView(RegistryAPIView):
    """GET /api/registry/farms/<farm_id>/collaborators/<actor>/"""
    permission_classes = [AllowAny]

    def get(self, request, farm_id, actor):
        collaborator = self.service.get_collaborator(farm_id, actor)
        return Response({'collaborator': serialize_or_none(CollaboratorSerializer, collaborator)})


# =============================================================================
# REVENUE SHARES
# =============================================================================

class RevenueShareView(RegistryAPIView):
    """
    GET /api/registry/farms/<farm_id>/revenue-shares/<actor>/
    PUT /api/registry/farms/<farm_id>/revenue-shares/<actor>/

    Read or (re)define a participant's revenue share (owner only).
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get(self, request, farm_id, actor):
        share = self.service.get_revenue_share(farm_id, actor)
        return Response({'revenue_share': serialize_or_none(RevenueShareSerializer, share)})

    def put(self, request, farm_id, actor):
        data = self.validated_data(RevenueShareSetSerializer, request, 'set_revenue_share', farm_id)
        share = self.service.set_revenue_share(
            self.get_caller(request), farm_id, actor, data['percentage']
        )
        return Response({'success': True, 'revenue_share': RevenueShareSerializer(share).data})


# =============================================================================
# HISTORY
# =============================================================================

class FarmHistoryView(RegistryAPIView):
    """
    GET /api/registry/farms/<farm_id>/history/

    All history entries of one farm, oldest first.
    """
    permission_classes = [AllowAny]

    def get(self, request, farm_id):
        entries = self.service.list_history(farm_id)
        return Response({
            'farm_id': farm_id,
            'count': self.service.get_history_count(farm_id),
            'entries': HistoryEntrySerializer(entries, many=True).data,
        })


class HistoryEntryView(RegistryAPIView):
    """GET /api/registry/farms/<farm_id>/history/<entry_id>/"""
    permission_classes = [AllowAny]

    def get(self, request, farm_id, entry_id):
        entry = self.service.get_history_entry(farm_id, entry_id)
        return Response({'entry': serialize_or_none(HistoryEntrySerializer, entry)})


# =============================================================================
# REGISTRY STATE (PAUSE SWITCH & ADMIN)
# =============================================================================

class RegistryStateView(RegistryAPIView):
    """
    GET /api/registry/state/

    Current admin, pause switch and last issued farm id.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'admin': self.service.get_admin(),
            'paused': self.service.is_paused(),
            'farm_counter': self.service.get_farm_counter(),
        })


class PauseRegistryView(RegistryAPIView):
    """POST /api/registry/state/pause/ (admin only)"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        state = self.service.pause(self.get_caller(request))
        return Response({'success': True, 'state': RegistryStateSerializer(state).data})


class UnpauseRegistryView(RegistryAPIView):
    """POST /api/registry/state/unpause/ (admin only)"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        state = self.service.unpause(self.get_caller(request))
        return Response({'success': True, 'state': RegistryStateSerializer(state).data})


class TransferAdminView(RegistryAPIView):
    """
    POST /api/registry/state/transfer-admin/

    Hand admin authority to `new_admin` (admin only).
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        data = self.validated_data(TransferAdminSerializer, request, 'transfer_admin')
        state = self.service.transfer_admin(self.get_caller(request), data['new_admin'])
        return Response({'success': True, 'state': RegistryStateSerializer(state).data})
