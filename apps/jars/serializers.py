from django.core.validators import RegexValidator
from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.offenses.money import cents_to_decimal, format_cents
from apps.offenses.models import Offense
from .models import TipJar, JarMembership, INVITE_CODE_LENGTH

invite_code_validator = RegexValidator(
    regex=r'^[A-Za-z0-9_-]{8}$',
    message='Invite code must be 8 characters (letters, digits, "-" or "_")',
)


class JarSerializer(serializers.ModelSerializer):
    """Main serializer for jars."""

    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = TipJar
        fields = [
            'id',
            'name',
            'description',
            'invite_code',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class JarListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views (expects list_jars_for_user annotations)."""

    created_by = UserMinimalSerializer(read_only=True)
    member_count = serializers.IntegerField(read_only=True)
    user_role = serializers.CharField(read_only=True)
    user_joined_at = serializers.DateTimeField(read_only=True)

    class Meta:
        model = TipJar
        fields = [
            'id',
            'name',
            'description',
            'invite_code',
            'created_by',
            'member_count',
            'user_role',
            'user_joined_at',
            'created_at',
        ]
        read_only_fields = fields


class JarPreviewSerializer(serializers.ModelSerializer):
    """What a prospective member sees before joining."""

    created_by = UserMinimalSerializer(read_only=True)
    member_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = TipJar
        fields = ['id', 'name', 'description', 'created_by', 'member_count', 'created_at']
        read_only_fields = fields


class JarCreateSerializer(serializers.Serializer):
    """Serializer for creating jars."""

    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    invite_code = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=INVITE_CODE_LENGTH,
        help_text='Optional explicit invite code; generated when omitted.',
    )

    def validate_invite_code(self, value):
        if not value:
            return None
        invite_code_validator(value)
        return value


class JoinJarSerializer(serializers.Serializer):
    """Serializer for joining a jar with invite code."""

    invite_code = serializers.CharField(
        min_length=INVITE_CODE_LENGTH,
        max_length=INVITE_CODE_LENGTH,
        required=True,
    )


class JarMemberSerializer(serializers.ModelSerializer):
    """Detailed member information."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = JarMembership
        fields = ['id', 'user', 'role', 'joined_at']
        read_only_fields = fields


class JarActivitySerializer(serializers.ModelSerializer):
    """One entry of the recent activity feed."""

    offense_type_name = serializers.CharField(source='offense_type.name', read_only=True)
    reporter_name = serializers.CharField(source='reporter.get_display_name', read_only=True)
    offender_name = serializers.CharField(source='offender.get_display_name', read_only=True)
    amount_cents = serializers.IntegerField(source='get_amount_cents', read_only=True)
    unit = serializers.CharField(source='get_unit', read_only=True)

    class Meta:
        model = Offense
        fields = [
            'id',
            'offense_type_name',
            'reporter_name',
            'offender_name',
            'notes',
            'status',
            'amount_cents',
            'unit',
            'created_at',
        ]
        read_only_fields = fields


class MemberBalanceSerializer(serializers.Serializer):
    """
    Outstanding total of one member.

    Amounts of pending and disputed offenses are added up regardless of the
    offense type unit, so a jar mixing currencies with units such as "beers"
    reports a single unitless sum.
    """

    user = UserMinimalSerializer()
    role = serializers.CharField()
    total_owed_cents = serializers.IntegerField(
        help_text="Sum of outstanding amounts in hundredths, added across all offense type units."
    )
    total_owed = serializers.SerializerMethodField(
        help_text="total_owed_cents as a decimal string."
    )
    total_owed_display = serializers.SerializerMethodField(
        help_text=(
            "total_owed formatted in the jar's default currency. "
            "Offense types priced in other units are included in this sum."
        )
    )
    pending_count = serializers.IntegerField()

    def get_total_owed(self, obj) -> str:
        return str(cents_to_decimal(obj['total_owed_cents']))

    def get_total_owed_display(self, obj) -> str:
        currency = self.context.get('currency')
        return format_cents(obj['total_owed_cents'], currency)


class JarDetailSerializer(serializers.Serializer):
    """Jar page: jar, members, recent activity, balances and the viewer's admin flag."""

    jar = JarSerializer()
    members = JarMemberSerializer(many=True)
    activity = JarActivitySerializer(many=True)
    balances = MemberBalanceSerializer(many=True)
    is_admin = serializers.BooleanField()


class JarActionResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    jar_id = serializers.UUIDField()
    redirect = serializers.CharField()
