# ==========================================
# apps/offenses/admin.py
# ==========================================

from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Offense, OffenseStatus, OffenseType, Payment
from .money import format_cents


STATUS_COLORS = {
    OffenseStatus.PENDING: ('#E5C49A', '#2C1810'),
    OffenseStatus.PAID: ('#6B8E5E', 'white'),
    OffenseStatus.DISPUTED: ('#B85C5C', 'white'),
    OffenseStatus.FORGIVEN: ('#A47449', 'white'),
}


class PaymentInline(admin.TabularInline):
    """Inline admin for payments recorded against an offense."""
    model = Payment
    extra = 0
    fields = ['payer', 'amount_cents', 'proof_type', 'proof_url', 'verified', 'verified_by']
    readonly_fields = ['payer', 'verified_by']

    def has_add_permission(self, request, obj=None):
        """Payments are recorded by members through the API."""
        return False


@admin.register(OffenseType)
class OffenseTypeAdmin(admin.ModelAdmin):
    """Admin interface for Offense Types."""

    list_display = ['name', 'jar', 'cost_type', 'get_cost_display', 'is_active', 'created_at']
    list_filter = ['is_active', 'cost_type', 'created_at']
    search_fields = ['name', 'description', 'jar__name']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['jar', 'name']

    def get_cost_display(self, obj):
        if obj.cost_action:
            return obj.cost_action
        if obj.cost_amount_cents is None:
            return '-'
        return format_cents(obj.cost_amount_cents, obj.cost_unit)
    get_cost_display.short_description = 'Cost'

    actions = ['activate', 'deactivate']

    @admin.action(description='Activate selected offense types')
    def activate(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} offense type(s).')

    @admin.action(description='Deactivate selected offense types')
    def deactivate(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'Deactivated {count} offense type(s).')

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('jar')


@admin.register(Offense)
class OffenseAdmin(admin.ModelAdmin):
    """
    Admin interface for Offenses.

    Provides ledger management including:
    - Offense listing with resolved cost and status
    - Inline payments
    - Status actions for settling or forgiving
    """

    list_display = [
        'offense_type',
        'offender',
        'reporter',
        'jar',
        'get_amount_display',
        'status_badge',
        'created_at',
    ]
    list_filter = ['status', 'jar', 'created_at']
    search_fields = [
        'offense_type__name',
        'offender__email',
        'offender__name',
        'reporter__email',
        'jar__name',
        'notes',
    ]
    readonly_fields = ['created_at', 'updated_at']
    inlines = [PaymentInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def get_amount_display(self, obj):
        return format_cents(obj.get_amount_cents(), obj.get_unit())
    get_amount_display.short_description = 'Amount'

    def status_badge(self, obj):
        """Display offense status as colored badge."""
        bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    actions = ['mark_as_paid', 'mark_as_forgiven']

    @admin.action(description='Mark selected as PAID')
    def mark_as_paid(self, request, queryset):
        count = queryset.filter(
            status__in=[OffenseStatus.PENDING, OffenseStatus.DISPUTED]
        ).update(status=OffenseStatus.PAID, updated_at=timezone.now())
        self.message_user(request, f'Marked {count} offense(s) as paid.')

    @admin.action(description='Mark selected as FORGIVEN')
    def mark_as_forgiven(self, request, queryset):
        count = queryset.filter(
            status__in=[OffenseStatus.PENDING, OffenseStatus.DISPUTED]
        ).update(status=OffenseStatus.FORGIVEN, updated_at=timezone.now())
        self.message_user(request, f'Marked {count} offense(s) as forgiven.')

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('jar', 'offense_type', 'reporter', 'offender')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin interface for Payments."""

    list_display = ['offense', 'payer', 'amount_cents', 'proof_type', 'verified', 'created_at']
    list_filter = ['verified', 'proof_type', 'created_at']
    search_fields = ['payer__email', 'payer__name', 'offense__jar__name', 'notes']
    readonly_fields = ['verified_at', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    actions = ['mark_verified']

    @admin.action(description='Mark selected as verified')
    def mark_verified(self, request, queryset):
        count = queryset.filter(verified=False).update(
            verified=True,
            verified_by=request.user,
            verified_at=timezone.now(),
        )
        self.message_user(request, f'Verified {count} payment(s).')

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('offense', 'offense__jar', 'payer', 'verified_by')
