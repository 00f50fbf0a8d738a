# Generated manually for tip jars and memberships

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='TipJar',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('invite_code', models.CharField(max_length=8, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='created_jars', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'tip_jars',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['created_by', 'created_at'], name='tip_jars_creator_idx')],
            },
        ),
        migrations.CreateModel(
            name='JarMembership',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('admin', 'Admin'), ('member', 'Member')], default='member', max_length=20)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('jar', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to='jars.tipjar')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='jar_memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'jar_memberships',
                'ordering': ['joined_at'],
                'indexes': [models.Index(fields=['user', 'joined_at'], name='jar_memberships_user_idx')],
                'unique_together': {('jar', 'user')},
            },
        ),
    ]
