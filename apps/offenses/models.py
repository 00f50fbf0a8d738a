from django.db import models
import uuid


class CostType(models.TextChoices):
    MONETARY = 'monetary', 'Monetary'
    ACTION = 'action', 'Action'
    ITEM = 'item', 'Item'
    SERVICE = 'service', 'Service'


class OffenseStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    DISPUTED = 'disputed', 'Disputed'
    FORGIVEN = 'forgiven', 'Forgiven'


# Statuses that still count against a member's balance
OUTSTANDING_STATUSES = (OffenseStatus.PENDING, OffenseStatus.DISPUTED)


class ProofType(models.TextChoices):
    IMAGE = 'image', 'Image'
    RECEIPT = 'receipt', 'Receipt'
    VIDEO = 'video', 'Video'


class OffenseType(models.Model):
    """Per-jar catalog entry describing a rule violation and its default cost."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    jar = models.ForeignKey(
        'jars.TipJar',
        on_delete=models.CASCADE,
        related_name='offense_types'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # Cost definition
    cost_type = models.CharField(
        max_length=20,
        choices=CostType.choices,
        default=CostType.MONETARY
    )
    cost_amount_cents = models.PositiveIntegerField(null=True, blank=True)
    cost_unit = models.CharField(max_length=50, null=True, blank=True)
    cost_action = models.CharField(max_length=255, null=True, blank=True)

    is_active = models.BooleanField(default=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'offense_types'
        indexes = [
            models.Index(fields=['jar', 'is_active'], name='offense_types_jar_active_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.jar.name})"


class Offense(models.Model):
    """A reported violation attributed to one jar member."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    jar = models.ForeignKey(
        'jars.TipJar',
        on_delete=models.CASCADE,
        related_name='offenses'
    )
    offense_type = models.ForeignKey(
        OffenseType,
        on_delete=models.PROTECT,
        related_name='offenses'
    )
    reporter = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='reported_offenses'
    )
    offender = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='offenses'
    )
    notes = models.TextField(blank=True)

    # Supersedes the offense type's default cost when set
    cost_override_cents = models.PositiveIntegerField(null=True, blank=True)

    status = models.CharField(
        max_length=20,
        choices=OffenseStatus.choices,
        default=OffenseStatus.PENDING
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'offenses'
        indexes = [
            models.Index(fields=['jar', 'created_at'], name='offenses_jar_created_idx'),
            models.Index(fields=['jar', 'offender', 'status'], name='offenses_jar_offender_idx'),
            models.Index(fields=['offender', 'status'], name='offenses_offender_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.offense_type.name}: {self.offender.get_display_name()} ({self.status})"

    def get_amount_cents(self):
        """Override, else the type's default cost, else 0."""
        if self.cost_override_cents is not None:
            return self.cost_override_cents
        if self.offense_type.cost_amount_cents is not None:
            return self.offense_type.cost_amount_cents
        return 0

    def get_unit(self):
        return self.offense_type.cost_unit or 'items'


class Payment(models.Model):
    """Proof-of-payment submitted against an offense."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    offense = models.ForeignKey(
        Offense,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    payer = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='offense_payments'
    )
    amount_cents = models.PositiveIntegerField(null=True, blank=True)

    # Proof
    proof_type = models.CharField(
        max_length=20,
        choices=ProofType.choices,
        null=True,
        blank=True
    )
    proof_url = models.URLField(max_length=500, blank=True)
    notes = models.TextField(blank=True)

    # Verification
    verified = models.BooleanField(default=False)
    verified_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='verified_payments'
    )
    verified_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'offense_payments'
        indexes = [
            models.Index(fields=['offense', 'created_at'], name='payments_offense_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"Payment by {self.payer.get_display_name()} for offense {self.offense_id}"
