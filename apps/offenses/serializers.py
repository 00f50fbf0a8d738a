from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import CostType, Offense, OffenseStatus, OffenseType, Payment, ProofType
from .money import cents_to_decimal, format_cents, to_cents


class CentsField(serializers.Field):
    """
    Decimal amount on the wire, integer cents internally.

    Accepts "12.34" (or an integer) and yields 1234; renders 1234 as "12.34".
    """

    default_error_messages = {
        'invalid': 'Enter a valid non-negative amount with at most two decimal places.',
    }

    def to_internal_value(self, data):
        if data == '' and self.allow_null:
            return None
        try:
            return to_cents(data)
        except (TypeError, ValueError):
            self.fail('invalid')

    def to_representation(self, value):
        return str(cents_to_decimal(value))


# =============================================================================
# Offense types
# =============================================================================

class OffenseTypeSerializer(serializers.ModelSerializer):
    """Offense type catalog entry."""

    cost_amount = CentsField(source='cost_amount_cents', read_only=True, allow_null=True)
    cost_display = serializers.SerializerMethodField()

    class Meta:
        model = OffenseType
        fields = [
            'id',
            'jar',
            'name',
            'description',
            'cost_type',
            'cost_amount_cents',
            'cost_amount',
            'cost_unit',
            'cost_action',
            'cost_display',
            'is_active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_cost_display(self, obj) -> str:
        if obj.cost_type == CostType.ACTION and obj.cost_action:
            return obj.cost_action
        if obj.cost_amount_cents is None:
            return ''
        return format_cents(obj.cost_amount_cents, obj.cost_unit)


class OffenseTypeInputSerializer(serializers.Serializer):
    """Create or fully replace an offense type."""

    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    cost_type = serializers.ChoiceField(choices=CostType.choices, default=CostType.MONETARY)
    cost_amount = CentsField(
        source='cost_amount_cents',
        required=False,
        allow_null=True,
        default=None,
    )
    cost_unit = serializers.CharField(
        max_length=50,
        required=False,
        allow_null=True,
        allow_blank=True,
        default=None,
    )
    cost_action = serializers.CharField(
        max_length=255,
        required=False,
        allow_null=True,
        allow_blank=True,
        default=None,
    )

    def validate(self, attrs):
        attrs['cost_unit'] = attrs.get('cost_unit') or None
        attrs['cost_action'] = attrs.get('cost_action') or None
        if attrs['cost_type'] == CostType.ACTION and not attrs['cost_action']:
            raise serializers.ValidationError({
                'cost_action': 'Describe the action owed for action offenses'
            })
        return attrs


# =============================================================================
# Offenses
# =============================================================================

class OffenseSerializer(serializers.ModelSerializer):
    """Offense as shown in lists."""

    offense_type = serializers.SerializerMethodField()
    reporter = UserMinimalSerializer(read_only=True)
    offender = UserMinimalSerializer(read_only=True)
    cost_override = CentsField(source='cost_override_cents', read_only=True, allow_null=True)
    amount_cents = serializers.IntegerField(source='get_amount_cents', read_only=True)
    unit = serializers.CharField(source='get_unit', read_only=True)

    class Meta:
        model = Offense
        fields = [
            'id',
            'jar',
            'offense_type',
            'reporter',
            'offender',
            'notes',
            'cost_override',
            'amount_cents',
            'unit',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_offense_type(self, obj) -> dict:
        return {
            'id': str(obj.offense_type_id),
            'name': obj.offense_type.name,
            'is_active': obj.offense_type.is_active,
        }


class ReportOffenseSerializer(serializers.Serializer):
    """
    Input for reporting an offense in a jar.

    Expects the target jar in context['jar']. Checks that the offense type
    belongs to that jar and is active; membership is checked by the view.
    """

    offender_id = serializers.UUIDField()
    offense_type_id = serializers.UUIDField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    cost_override = CentsField(
        source='cost_override_cents',
        required=False,
        allow_null=True,
        default=None,
    )

    def validate_offense_type_id(self, value):
        jar = self.context['jar']
        if not OffenseType.objects.filter(id=value, jar=jar, is_active=True).exists():
            raise serializers.ValidationError('Invalid offense type for this jar')
        return value


class UpdateOffenseStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OffenseStatus.choices)


class OffenseActionResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    offense_id = serializers.UUIDField()
    redirect = serializers.CharField()


# =============================================================================
# Payments
# =============================================================================

class PaymentSerializer(serializers.ModelSerializer):
    """Payment recorded against an offense."""

    payer = UserMinimalSerializer(read_only=True)
    verified_by = UserMinimalSerializer(read_only=True)
    amount = CentsField(source='amount_cents', read_only=True, allow_null=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'offense',
            'payer',
            'amount_cents',
            'amount',
            'proof_type',
            'proof_url',
            'notes',
            'verified',
            'verified_by',
            'verified_at',
            'created_at',
        ]
        read_only_fields = fields


class RecordPaymentSerializer(serializers.Serializer):
    """Input for recording a payment."""

    amount = CentsField(source='amount_cents', required=False, allow_null=True, default=None)
    proof_url = serializers.URLField(max_length=500, required=False, allow_blank=True, default='')
    proof_type = serializers.ChoiceField(
        choices=ProofType.choices,
        required=False,
        allow_null=True,
        allow_blank=True,
        default=None,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_proof_type(self, value):
        return value or None


class OffenseDetailSerializer(serializers.Serializer):
    """Resolved offense: type regardless of active flag, people, payments and effective cost."""

    offense = OffenseSerializer()
    offense_type = OffenseTypeSerializer()
    reporter = UserMinimalSerializer()
    offender = UserMinimalSerializer()
    payments = PaymentSerializer(many=True)
    amount_cents = serializers.IntegerField()
    amount = serializers.SerializerMethodField()
    amount_display = serializers.SerializerMethodField()
    unit = serializers.CharField()

    def get_amount(self, obj) -> str:
        return str(cents_to_decimal(obj['amount_cents']))

    def get_amount_display(self, obj) -> str:
        return format_cents(obj['amount_cents'], obj['unit'])
