# Generated manually on 2026-10-19
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Ministry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
                ('name', models.CharField(max_length=200, unique=True, verbose_name='Ministry Name')),
                ('code', models.CharField(blank=True, help_text='Short code used in proposal numbers (e.g., "MOH").', max_length=10, unique=True, verbose_name='Ministry Code')),
                ('minister_name', models.CharField(blank=True, max_length=150, verbose_name='Minister')),
                ('secretary_name', models.CharField(blank=True, max_length=150, verbose_name='Secretary')),
            ],
            options={
                'verbose_name': 'Ministry',
                'verbose_name_plural': 'Ministries',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Department',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
                ('name', models.CharField(max_length=200, verbose_name='Department Name')),
                ('code', models.CharField(max_length=20, verbose_name='Department Code')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('ministry', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='departments', to='core.ministry', verbose_name='Ministry')),
            ],
            options={
                'verbose_name': 'Department',
                'verbose_name_plural': 'Departments',
                'ordering': ['ministry__name', 'name'],
                'unique_together': {('ministry', 'code')},
            },
        ),
    ]
