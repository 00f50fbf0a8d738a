import logging

from django.conf import settings
from django.db import DatabaseError
from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.offenses.serializers import (
    OffenseSerializer,
    OffenseTypeSerializer,
    OffenseTypeInputSerializer,
    ReportOffenseSerializer,
    OffenseActionResponseSerializer,
)
from apps.offenses.services import (
    create_offense_type,
    get_member_balances,
    list_active_offense_types,
    list_offense_types,
    list_offenses_for_jar,
    report_offense,
)
from .serializers import (
    JarSerializer,
    JarListSerializer,
    JarPreviewSerializer,
    JarCreateSerializer,
    JoinJarSerializer,
    JarMemberSerializer,
    JarActivitySerializer,
    MemberBalanceSerializer,
    JarDetailSerializer,
    JarActionResponseSerializer,
)
from .services import (
    create_jar,
    get_jar,
    get_jar_by_invite_code,
    list_jars_for_user,
    join_jar,
    is_admin,
    is_member,
    require_member,
    require_admin,
    list_members,
    get_jar_activity,
    # Exceptions
    JarNotFoundError,
    InviteCodeConflictError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
)

logger = logging.getLogger(__name__)

UUID_REGEX = '[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'


def jar_redirect(jar_id):
    return f'/jars/{jar_id}'


class JarViewSet(viewsets.GenericViewSet):
    """
    ViewSet for tip jars.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Jars the user belongs to
    create: Create a jar (creator becomes admin)
    retrieve: Jar page with members, activity, balances (members only)
    """

    serializer_class = JarSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_REGEX
    pagination_class = None

    def get_queryset(self):
        return list_jars_for_user(user=self.request.user)

    def _get_member_jar(self, pk):
        """Load a jar the current user belongs to; raises JarNotFoundError / NotMemberError."""
        jar = get_jar(jar_id=pk)
        require_member(jar_id=jar.id, user=self.request.user)
        return jar

    def _serializer_context(self):
        return {'request': self.request, 'currency': settings.TIPJAR_DEFAULT_CURRENCY}

    @extend_schema(responses={200: JarListSerializer(many=True)})
    def list(self, request):
        """List jars the current user is a member of."""
        serializer = JarListSerializer(self.get_queryset(), many=True)
        return Response(serializer.data)

    @extend_schema(
        request=JarCreateSerializer,
        responses={200: JarActionResponseSerializer},
    )
    def create(self, request):
        """Create a new jar."""
        serializer = JarCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            jar = create_jar(
                name=serializer.validated_data['name'],
                description=serializer.validated_data.get('description', ''),
                invite_code=serializer.validated_data.get('invite_code'),
                creator=request.user,
            )
        except InviteCodeConflictError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'jar_id': jar.id,
            'redirect': jar_redirect(jar.id),
        })

    @extend_schema(responses={200: JarDetailSerializer})
    def retrieve(self, request, pk=None):
        """Jar page. Activity and balances fall back to empty lists if they cannot be loaded."""
        try:
            jar = self._get_member_jar(pk)
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        try:
            activity = get_jar_activity(jar_id=jar.id, limit=10)
        except DatabaseError:
            logger.exception("Failed to load activity for jar %s", jar.id)
            activity = []

        try:
            balances = get_member_balances(jar_id=jar.id)
        except DatabaseError:
            logger.exception("Failed to load member balances for jar %s", jar.id)
            balances = []

        serializer = JarDetailSerializer(
            {
                'jar': jar,
                'members': list_members(jar_id=jar.id),
                'activity': activity,
                'balances': balances,
                'is_admin': is_admin(jar_id=jar.id, user_id=request.user.id),
            },
            context=self._serializer_context(),
        )
        return Response(serializer.data)

    @extend_schema(
        parameters=[OpenApiParameter('invite_code', str, required=True)],
        responses={200: JarPreviewSerializer},
    )
    @action(detail=False, methods=['get'])
    def lookup(self, request):
        """Preview a jar by invite code before joining."""
        serializer = JoinJarSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        try:
            jar = get_jar_by_invite_code(invite_code=serializer.validated_data['invite_code'])
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        data = JarPreviewSerializer(jar).data
        data['is_member'] = is_member(jar_id=jar.id, user_id=request.user.id)
        return Response({'jar': data})

    @extend_schema(request=JoinJarSerializer, responses={200: JarActionResponseSerializer})
    @action(detail=False, methods=['post'])
    def join(self, request):
        """Join a jar using invite code."""
        serializer = JoinJarSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = join_jar(
                invite_code=serializer.validated_data['invite_code'],
                user=request.user,
            )
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AlreadyMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'success': True,
            'jar_id': membership.jar_id,
            'redirect': jar_redirect(membership.jar_id),
        })

    @extend_schema(responses={200: JarMemberSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the jar."""
        try:
            jar = self._get_member_jar(pk)
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = JarMemberSerializer(list_members(jar_id=jar.id), many=True)
        return Response(serializer.data)

    @extend_schema(responses={200: MemberBalanceSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def balances(self, request, pk=None):
        """Outstanding totals per member."""
        try:
            jar = self._get_member_jar(pk)
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = MemberBalanceSerializer(
            get_member_balances(jar_id=jar.id),
            many=True,
            context=self._serializer_context(),
        )
        return Response(serializer.data)

    @extend_schema(
        parameters=[OpenApiParameter('limit', int, description='Number of entries (default 10, max 100)')],
        responses={200: JarActivitySerializer(many=True)},
    )
    @action(detail=True, methods=['get'])
    def activity(self, request, pk=None):
        """Most recently reported offenses."""
        try:
            jar = self._get_member_jar(pk)
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        try:
            limit = min(max(int(request.query_params.get('limit', 10)), 1), 100)
        except ValueError:
            return Response({'error': 'limit must be an integer'}, status=status.HTTP_400_BAD_REQUEST)

        serializer = JarActivitySerializer(get_jar_activity(jar_id=jar.id, limit=limit), many=True)
        return Response(serializer.data)

    @extend_schema(
        methods=['GET'],
        parameters=[OpenApiParameter('include_inactive', bool)],
        responses={200: OffenseTypeSerializer(many=True)},
    )
    @extend_schema(
        methods=['POST'],
        request=OffenseTypeInputSerializer,
        responses={201: OffenseTypeSerializer},
    )
    @action(detail=True, methods=['get', 'post'], url_path='offense_types', url_name='offense-types')
    def offense_types(self, request, pk=None):
        """List the jar's offense types, or add one (admin only)."""
        try:
            jar = self._get_member_jar(pk)
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        if request.method == 'GET':
            include_inactive = request.query_params.get('include_inactive', '').lower() in ('1', 'true', 'yes')
            if include_inactive:
                offense_types = list_offense_types(jar_id=jar.id)
            else:
                offense_types = list_active_offense_types(jar_id=jar.id)
            return Response(OffenseTypeSerializer(offense_types, many=True).data)

        try:
            require_admin(jar_id=jar.id, user=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = OffenseTypeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        offense_type = create_offense_type(jar_id=jar.id, **serializer.validated_data)
        return Response(OffenseTypeSerializer(offense_type).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        methods=['GET'],
        parameters=[OpenApiParameter('status', str, description='Filter by offense status')],
        responses={200: OffenseSerializer(many=True)},
    )
    @extend_schema(
        methods=['POST'],
        request=ReportOffenseSerializer,
        responses={200: OffenseActionResponseSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def offenses(self, request, pk=None):
        """List the jar's offenses, or report a new one."""
        try:
            jar = self._get_member_jar(pk)
        except JarNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        if request.method == 'GET':
            offenses = list_offenses_for_jar(
                jar_id=jar.id,
                status=request.query_params.get('status') or None,
            )
            return Response(OffenseSerializer(offenses, many=True).data)

        serializer = ReportOffenseSerializer(data=request.data, context={'jar': jar})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if not is_member(jar_id=jar.id, user_id=data['offender_id']):
            return Response(
                {'error': 'Offender is not a member of this jar'},
                status=status.HTTP_403_FORBIDDEN
            )

        offense = report_offense(
            jar_id=jar.id,
            offense_type_id=data['offense_type_id'],
            reporter=request.user,
            offender_id=data['offender_id'],
            notes=data.get('notes', ''),
            cost_override_cents=data.get('cost_override_cents'),
        )

        return Response({
            'success': True,
            'offense_id': offense.id,
            'redirect': jar_redirect(jar.id),
        })
