from drf_spectacular.utils import extend_schema
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.jars.services import (
    require_admin,
    require_member,
    NotMemberError,
    InsufficientPermissionsError,
)
from .serializers import (
    OffenseSerializer,
    OffenseDetailSerializer,
    OffenseTypeSerializer,
    OffenseTypeInputSerializer,
    PaymentSerializer,
    RecordPaymentSerializer,
    UpdateOffenseStatusSerializer,
)
from .services import (
    get_offense,
    get_offense_type,
    get_payment,
    list_pending_offenses_for_user,
    record_payment,
    resolve_offense_detail,
    set_offense_type_active,
    update_offense_status,
    update_offense_type,
    verify_payment,
    # Exceptions
    OffenseNotFoundError,
    OffenseTypeNotFoundError,
    PaymentNotFoundError,
    InvalidStatusTransitionError,
)

UUID_REGEX = '[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'


class OffenseTypeViewSet(viewsets.GenericViewSet):
    """
    Catalog maintenance for jar admins.

    update: Replace an offense type's fields
    activate / deactivate: Toggle whether it can be reported
    """

    serializer_class = OffenseTypeSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_REGEX

    def _get_admin_offense_type(self, pk):
        offense_type = get_offense_type(offense_type_id=pk)
        require_admin(jar_id=offense_type.jar_id, user=self.request.user)
        return offense_type

    @extend_schema(request=OffenseTypeInputSerializer, responses={200: OffenseTypeSerializer})
    def update(self, request, pk=None):
        """Replace all mutable fields (admin only)."""
        try:
            self._get_admin_offense_type(pk)
        except OffenseTypeNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = OffenseTypeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        offense_type = update_offense_type(offense_type_id=pk, **serializer.validated_data)
        return Response(OffenseTypeSerializer(offense_type).data)

    def _set_active(self, request, pk, is_active):
        try:
            self._get_admin_offense_type(pk)
        except OffenseTypeNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        offense_type = set_offense_type_active(offense_type_id=pk, is_active=is_active)
        return Response(OffenseTypeSerializer(offense_type).data)

    @extend_schema(request=None, responses={200: OffenseTypeSerializer})
    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        """Make an offense type reportable again (admin only)."""
        return self._set_active(request, pk, True)

    @extend_schema(request=None, responses={200: OffenseTypeSerializer})
    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        """Hide an offense type from the report form (admin only)."""
        return self._set_active(request, pk, False)


class OffenseViewSet(viewsets.GenericViewSet):
    """
    Offense detail, payments and settlement.

    retrieve: Resolved offense detail (jar members)
    pay: Record a payment (jar members)
    status: Change status (jar admins)
    pending: Current user's pending offenses across jars
    """

    serializer_class = OffenseSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_REGEX

    @extend_schema(responses={200: OffenseDetailSerializer})
    def retrieve(self, request, pk=None):
        """Offense with its type, people, payments and effective cost."""
        try:
            detail = resolve_offense_detail(offense_id=pk)
            require_member(jar_id=detail['offense'].jar_id, user=request.user)
        except OffenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = OffenseDetailSerializer(detail, context={'request': request})
        return Response(serializer.data)

    @extend_schema(request=RecordPaymentSerializer, responses={201: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def pay(self, request, pk=None):
        """Record a payment. The offense status does not change."""
        try:
            offense = get_offense(offense_id=pk)
            require_member(jar_id=offense.jar_id, user=request.user)
        except OffenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = RecordPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = record_payment(
            offense_id=offense.id,
            payer=request.user,
            **serializer.validated_data
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UpdateOffenseStatusSerializer, responses={200: OffenseSerializer})
    @action(detail=True, methods=['post'], url_path='status', url_name='status')
    def change_status(self, request, pk=None):
        """Change offense status (admin only)."""
        try:
            offense = get_offense(offense_id=pk)
            require_admin(jar_id=offense.jar_id, user=request.user)
        except OffenseNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = UpdateOffenseStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            update_offense_status(
                offense_id=offense.id,
                new_status=serializer.validated_data['status']
            )
        except InvalidStatusTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OffenseSerializer(get_offense(offense_id=offense.id)).data)

    @extend_schema(responses={200: OffenseSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def pending(self, request):
        """Pending offenses committed by the current user in any jar."""
        offenses = list_pending_offenses_for_user(user=request.user)
        return Response(OffenseSerializer(offenses, many=True).data)


class PaymentViewSet(viewsets.GenericViewSet):
    """Payment verification for jar admins."""

    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_REGEX

    @extend_schema(request=None, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'])
    def verify(self, request, pk=None):
        """Mark a payment as verified (admin only). The offense status does not change."""
        try:
            payment = get_payment(payment_id=pk)
            require_admin(jar_id=payment.offense.jar_id, user=request.user)
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        payment = verify_payment(payment_id=payment.id, verified_by=request.user)
        return Response(PaymentSerializer(payment).data)
