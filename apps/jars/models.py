# ==========================================
# apps/jars/models.py
# ==========================================

from django.db import models
import uuid

INVITE_CODE_LENGTH = 8


class JarRole(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    MEMBER = 'member', 'Member'


class TipJar(models.Model):
    """Group of people sharing one offense ledger, joined via invite code."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    invite_code = models.CharField(max_length=INVITE_CODE_LENGTH, unique=True)
    created_by = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='created_jars')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tip_jars'
        indexes = [
            models.Index(fields=['created_by', 'created_at'], name='tip_jars_creator_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def has_member(self, user):
        return self.memberships.filter(user=user).exists()

    def get_user_role(self, user):
        try:
            return self.memberships.get(user=user).role
        except JarMembership.DoesNotExist:
            return None

    def is_admin(self, user):
        return self.get_user_role(user) == JarRole.ADMIN


class JarMembership(models.Model):
    """User membership in a jar with role."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='jar_memberships')
    jar = models.ForeignKey(TipJar, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=20, choices=JarRole.choices, default=JarRole.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'jar_memberships'
        unique_together = [['jar', 'user']]
        indexes = [
            models.Index(fields=['user', 'joined_at'], name='jar_memberships_user_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.jar.name} ({self.role})"
