# Generated manually on 2026-10-19
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Scheme',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
                ('name', models.CharField(max_length=255, verbose_name='Scheme Name')),
                ('code', models.CharField(max_length=30, unique=True, verbose_name='Scheme Code')),
                ('scheme_type', models.CharField(choices=[('Central Sector', 'Central Sector'), ('Centrally Sponsored', 'Centrally Sponsored'), ('Core Scheme', 'Core Scheme'), ('Sub Scheme', 'Sub Scheme')], default='Central Sector', max_length=30, verbose_name='Scheme Type')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('objectives', models.TextField(blank=True, verbose_name='Objectives')),
                ('start_date', models.DateField(blank=True, null=True, verbose_name='Start Date')),
                ('end_date', models.DateField(blank=True, null=True, verbose_name='End Date')),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='schemes', to='core.department', verbose_name='Department')),
                ('ministry', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='schemes', to='core.ministry', verbose_name='Ministry')),
            ],
            options={
                'verbose_name': 'Scheme',
                'verbose_name_plural': 'Schemes',
                'ordering': ['ministry__name', 'code'],
            },
        ),
        migrations.CreateModel(
            name='BudgetProposal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('proposal_number', models.CharField(help_text='Format: BP-<MINISTRY CODE>-<YYYY>-<NNNN>', max_length=40, unique=True, verbose_name='Proposal Number')),
                ('financial_year', models.CharField(help_text='Format: YYYY-YY (e.g., 2025-26)', max_length=7, verbose_name='Financial Year')),
                ('proposal_type', models.CharField(choices=[('Budget Estimate', 'Budget Estimate'), ('Revised Estimate', 'Revised Estimate'), ('Supplementary Grant', 'Supplementary Grant')], default='Budget Estimate', max_length=30, verbose_name='Proposal Type')),
                ('status', models.CharField(choices=[('Draft', 'Draft'), ('Submitted', 'Submitted'), ('Under Review', 'Under Review'), ('Approved', 'Approved'), ('Rejected', 'Rejected'), ('Revision Requested', 'Revision Requested')], default='Draft', max_length=30, verbose_name='Status')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18, verbose_name='Total Amount')),
                ('revenue_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18, verbose_name='Revenue Amount')),
                ('capital_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=18, verbose_name='Capital Amount')),
                ('justification', models.TextField(blank=True, verbose_name='Justification')),
                ('submitted_at', models.DateTimeField(blank=True, null=True, verbose_name='Submitted At')),
                ('approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Approved At')),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_proposals', to=settings.AUTH_USER_MODEL, verbose_name='Approved By')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='budgetproposal_created', to=settings.AUTH_USER_MODEL, verbose_name='Created By')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='budgetproposal_updated', to=settings.AUTH_USER_MODEL, verbose_name='Updated By')),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='budget_proposals', to='core.department', verbose_name='Department')),
                ('ministry', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='budget_proposals', to='core.ministry', verbose_name='Ministry')),
                ('scheme', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='proposals', to='budgeting.scheme', verbose_name='Scheme')),
            ],
            options={
                'verbose_name': 'Budget Proposal',
                'verbose_name_plural': 'Budget Proposals',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['financial_year', 'status'], name='proposal_fy_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='BudgetLineItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('head_of_account', models.CharField(max_length=50, verbose_name='Head of Account')),
                ('description', models.CharField(max_length=255, verbose_name='Description')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=18, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='Amount')),
                ('budget_type', models.CharField(choices=[('Revenue', 'Revenue'), ('Capital', 'Capital')], default='Revenue', max_length=10, verbose_name='Budget Type')),
                ('proposal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='line_items', to='budgeting.budgetproposal', verbose_name='Proposal')),
            ],
            options={
                'verbose_name': 'Budget Line Item',
                'verbose_name_plural': 'Budget Line Items',
                'ordering': ['proposal', 'id'],
            },
        ),
        migrations.CreateModel(
            name='BudgetAllocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('financial_year', models.CharField(max_length=7, verbose_name='Financial Year')),
                ('sanctioned_amount', models.DecimalField(decimal_places=2, max_digits=18, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))], verbose_name='Sanctioned Amount')),
                ('q1_allocation', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True, verbose_name='Q1 Allocation')),
                ('q2_allocation', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True, verbose_name='Q2 Allocation')),
                ('q3_allocation', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True, verbose_name='Q3 Allocation')),
                ('q4_allocation', models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True, verbose_name='Q4 Allocation')),
                ('status', models.CharField(choices=[('Active', 'Active'), ('Frozen', 'Frozen'), ('Exhausted', 'Exhausted')], default='Active', max_length=20, verbose_name='Status')),
                ('sanctioned_at', models.DateTimeField(blank=True, null=True, verbose_name='Sanctioned At')),
                ('proposal', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='allocation', to='budgeting.budgetproposal', verbose_name='Proposal')),
                ('sanctioned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sanctioned_allocations', to=settings.AUTH_USER_MODEL, verbose_name='Sanctioned By')),
                ('scheme', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='allocations', to='budgeting.scheme', verbose_name='Scheme')),
            ],
            options={
                'verbose_name': 'Budget Allocation',
                'verbose_name_plural': 'Budget Allocations',
                'ordering': ['-sanctioned_at', '-id'],
            },
        ),
    ]
