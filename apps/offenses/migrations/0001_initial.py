# Generated manually for offense types, offenses and payments

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('jars', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='OffenseType',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('cost_type', models.CharField(choices=[('monetary', 'Monetary'), ('action', 'Action'), ('item', 'Item'), ('service', 'Service')], default='monetary', max_length=20)),
                ('cost_amount_cents', models.PositiveIntegerField(blank=True, null=True)),
                ('cost_unit', models.CharField(blank=True, max_length=50, null=True)),
                ('cost_action', models.CharField(blank=True, max_length=255, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('jar', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='offense_types', to='jars.tipjar')),
            ],
            options={
                'db_table': 'offense_types',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['jar', 'is_active'], name='offense_types_jar_active_idx')],
            },
        ),
        migrations.CreateModel(
            name='Offense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('notes', models.TextField(blank=True)),
                ('cost_override_cents', models.PositiveIntegerField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('disputed', 'Disputed'), ('forgiven', 'Forgiven')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('jar', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='offenses', to='jars.tipjar')),
                ('offense_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='offenses', to='offenses.offensetype')),
                ('offender', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='offenses', to=settings.AUTH_USER_MODEL)),
                ('reporter', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reported_offenses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'offenses',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['jar', 'created_at'], name='offenses_jar_created_idx'),
                    models.Index(fields=['jar', 'offender', 'status'], name='offenses_jar_offender_idx'),
                    models.Index(fields=['offender', 'status'], name='offenses_offender_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount_cents', models.PositiveIntegerField(blank=True, null=True)),
                ('proof_type', models.CharField(blank=True, choices=[('image', 'Image'), ('receipt', 'Receipt'), ('video', 'Video')], max_length=20, null=True)),
                ('proof_url', models.URLField(blank=True, max_length=500)),
                ('notes', models.TextField(blank=True)),
                ('verified', models.BooleanField(default=False)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('offense', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='offenses.offense')),
                ('payer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='offense_payments', to=settings.AUTH_USER_MODEL)),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verified_payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'offense_payments',
                'ordering': ['created_at'],
                'indexes': [models.Index(fields=['offense', 'created_at'], name='payments_offense_idx')],
            },
        ),
    ]
