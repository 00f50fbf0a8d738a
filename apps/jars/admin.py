# ==========================================
# apps/jars/admin.py
# ==========================================

from django.contrib import admin
from apps.jars.models import TipJar, JarMembership
from apps.offenses.models import OffenseType


class JarMembershipInline(admin.TabularInline):
    """Inline admin for jar memberships."""
    model = JarMembership
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']


class OffenseTypeInline(admin.TabularInline):
    """Inline admin for the jar's offense type catalog."""
    model = OffenseType
    extra = 0
    fields = ['name', 'cost_type', 'cost_amount_cents', 'cost_unit', 'is_active']


@admin.register(TipJar)
class TipJarAdmin(admin.ModelAdmin):
    """Admin interface for Tip Jars."""

    list_display = [
        'name',
        'created_by',
        'member_count',
        'invite_code',
        'created_at'
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'description', 'created_by__email', 'invite_code']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [JarMembershipInline, OffenseTypeInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'created_by')
        }),
        ('Invitation', {
            'fields': ('invite_code',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()
    member_count.short_description = 'Members'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('created_by')


@admin.register(JarMembership)
class JarMembershipAdmin(admin.ModelAdmin):
    """Admin interface for Jar Memberships."""

    list_display = ['user', 'jar', 'role', 'joined_at']
    list_filter = ['role', 'joined_at']
    search_fields = ['user__email', 'user__name', 'jar__name']
    readonly_fields = ['joined_at']
    date_hierarchy = 'joined_at'
    ordering = ['-joined_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'jar')
