# Generated manually for the certified farm registry
from decimal import Decimal

from django.db import migrations, models
import django.core.validators
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='RegistryState',
            fields=[
                ('id', models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ('admin', models.CharField(help_text='Actor holding pause, revoke and admin-transfer authority', max_length=128)),
                ('paused', models.BooleanField(default=False, help_text='When set, every mutating farm operation is rejected')),
                ('farm_counter', models.PositiveIntegerField(default=0, help_text='Last issued farm id (0 = none issued yet)')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'registry_state',
                'verbose_name': 'Registry State',
                'verbose_name_plural': 'Registry State',
            },
        ),
        migrations.CreateModel(
            name='Farm',
            fields=[
                ('id', models.PositiveIntegerField(editable=False, primary_key=True, serialize=False)),
                ('owner', models.CharField(db_index=True, max_length=128)),
                ('name', models.CharField(max_length=100)),
                ('location', models.CharField(max_length=200)),
                ('registered_at', models.DateTimeField()),
                ('last_updated_at', models.DateTimeField()),
            ],
            options={
                'db_table': 'registry_farms',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='FarmCategory',
            fields=[
                ('farm', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='category', serialize=False, to='registry.farm')),
                ('primary_category', models.CharField(blank=True, max_length=50)),
                ('tags', models.JSONField(blank=True, default=list)),
            ],
            options={
                'db_table': 'registry_farm_categories',
                'verbose_name_plural': 'Farm categories',
            },
        ),
        migrations.CreateModel(
            name='Certification',
            fields=[
                ('farm', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='certification', serialize=False, to='registry.farm')),
                ('certified', models.BooleanField(default=False)),
                ('certifier', models.CharField(max_length=128)),
                ('level', models.CharField(max_length=50)),
                ('expiry', models.DateTimeField()),
                ('notes', models.CharField(blank=True, max_length=500)),
            ],
            options={
                'db_table': 'registry_certifications',
            },
        ),
        migrations.CreateModel(
            name='HistoryCounter',
            fields=[
                ('farm', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='history_counter', serialize=False, to='registry.farm')),
                ('count', models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MaxValueValidator(50)])),
            ],
            options={
                'db_table': 'registry_history_counters',
            },
        ),
        migrations.CreateModel(
            name='FarmStatus',
            fields=[
                ('farm', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='status', serialize=False, to='registry.farm')),
                ('status', models.CharField(default='Pending', max_length=20)),
                ('visible', models.BooleanField(default=True)),
                ('last_updated_at', models.DateTimeField()),
            ],
            options={
                'db_table': 'registry_farm_statuses',
                'verbose_name_plural': 'Farm statuses',
            },
        ),
        migrations.CreateModel(
            name='HistoryEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entry_id', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(50)])),
                ('action', models.CharField(max_length=50)),
                ('timestamp', models.DateTimeField()),
                ('performer', models.CharField(max_length=128)),
                ('details', models.CharField(blank=True, max_length=200)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='history_entries', to='registry.farm')),
            ],
            options={
                'db_table': 'registry_history_entries',
                'ordering': ['farm', 'entry_id'],
                'verbose_name_plural': 'History entries',
                'constraints': [
                    models.UniqueConstraint(fields=('farm', 'entry_id'), name='unique_history_entry_per_farm'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Collaborator',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('collaborator', models.CharField(max_length=128)),
                ('role', models.CharField(max_length=50)),
                ('permissions', models.JSONField(blank=True, default=list)),
                ('added_at', models.DateTimeField()),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='collaborators', to='registry.farm')),
            ],
            options={
                'db_table': 'registry_collaborators',
                'ordering': ['farm', 'added_at'],
                'constraints': [
                    models.UniqueConstraint(fields=('farm', 'collaborator'), name='unique_collaborator_per_farm'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RevenueShare',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('participant', models.CharField(max_length=128)),
                ('percentage', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('total_received', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=20, validators=[django.core.validators.MinValueValidator(0)])),
                ('last_payout_at', models.DateTimeField(blank=True, null=True)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='revenue_shares', to='registry.farm')),
            ],
            options={
                'db_table': 'registry_revenue_shares',
                'ordering': ['farm', 'participant'],
                'constraints': [
                    models.UniqueConstraint(fields=('farm', 'participant'), name='unique_revenue_share_per_farm'),
                    models.CheckConstraint(condition=models.Q(('percentage__lte', 100)), name='revenue_share_percentage_lte_100'),
                ],
            },
        ),
    ]
