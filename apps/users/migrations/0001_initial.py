# Generated manually on 2026-10-19
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid

import apps.users.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CustomUser',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Unique UUID for external reference.', unique=True, verbose_name='Public ID')),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='Email Address')),
                ('role', models.CharField(choices=[('Finance Ministry Admin', 'Finance Ministry Admin'), ('Budget Division Officer', 'Budget Division Officer'), ('Ministry Secretary', 'Ministry Secretary'), ('Department Head', 'Department Head'), ('Section Officer', 'Section Officer'), ('Auditor', 'Auditor')], default='Section Officer', max_length=30, verbose_name='Role')),
                ('designation', models.CharField(blank=True, max_length=100, verbose_name='Designation')),
                ('phone', models.CharField(blank=True, max_length=20, verbose_name='Phone Number')),
                ('department', models.ForeignKey(blank=True, help_text='Department this user belongs to for access control.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='core.department', verbose_name='Department')),
                ('ministry', models.ForeignKey(blank=True, help_text='Ministry this user belongs to. Null for central Finance Ministry staff.', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='core.ministry', verbose_name='Ministry')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'ordering': ['first_name', 'last_name'],
            },
            managers=[
                ('objects', apps.users.models.CustomUserManager()),
            ],
        ),
    ]
