# Generated manually on 2026-10-19
from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ApprovalWorkflow',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('entity_type', models.CharField(choices=[('Budget Proposal', 'Budget Proposal'), ('Expenditure', 'Expenditure'), ('Reallocation', 'Reallocation'), ('Scheme', 'Scheme')], max_length=30, verbose_name='Entity Type')),
                ('entity_id', models.CharField(max_length=64, verbose_name='Entity ID')),
                ('current_stage', models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Current Stage')),
                ('total_stages', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='Total Stages')),
                ('status', models.CharField(choices=[('Draft', 'Draft'), ('Submitted', 'Submitted'), ('Under Review', 'Under Review'), ('Approved', 'Approved'), ('Rejected', 'Rejected'), ('Revision Requested', 'Revision Requested')], default='Submitted', max_length=30, verbose_name='Status')),
                ('submitted_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Submitted At')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Completed At')),
                ('submitted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submitted_workflows', to=settings.AUTH_USER_MODEL, verbose_name='Submitted By')),
            ],
            options={
                'verbose_name': 'Approval Workflow',
                'verbose_name_plural': 'Approval Workflows',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['entity_type', 'entity_id'], name='workflow_entity_idx'),
                    models.Index(fields=['status'], name='workflow_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ApprovalStage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, help_text='Stable identifier for use outside GBMS.', unique=True, verbose_name='Public ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('stage_number', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='Stage Number')),
                ('stage_name', models.CharField(max_length=100, verbose_name='Stage Name')),
                ('approver_role', models.CharField(choices=[('Finance Ministry Admin', 'Finance Ministry Admin'), ('Budget Division Officer', 'Budget Division Officer'), ('Ministry Secretary', 'Ministry Secretary'), ('Department Head', 'Department Head'), ('Section Officer', 'Section Officer'), ('Auditor', 'Auditor')], max_length=30, verbose_name='Approver Role')),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Approved', 'Approved'), ('Rejected', 'Rejected'), ('Delegated', 'Delegated')], default='Pending', max_length=20, verbose_name='Status')),
                ('comments', models.TextField(blank=True, null=True, verbose_name='Comments')),
                ('action_date', models.DateTimeField(blank=True, null=True, verbose_name='Action Date')),
                ('approver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approval_stages', to=settings.AUTH_USER_MODEL, verbose_name='Approver')),
                ('workflow', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stages', to='workflow.approvalworkflow', verbose_name='Workflow')),
            ],
            options={
                'verbose_name': 'Approval Stage',
                'verbose_name_plural': 'Approval Stages',
                'ordering': ['workflow', 'stage_number'],
                'unique_together': {('workflow', 'stage_number')},
            },
        ),
        migrations.CreateModel(
            name='WorkflowAction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stage_number', models.PositiveSmallIntegerField(verbose_name='Stage Number')),
                ('action', models.CharField(choices=[('Submitted', 'Submitted'), ('Approved', 'Approved'), ('Rejected', 'Rejected'), ('Revision Requested', 'Revision Requested'), ('Resubmitted', 'Resubmitted')], max_length=30, verbose_name='Action')),
                ('comments', models.TextField(blank=True, verbose_name='Comments')),
                ('from_status', models.CharField(blank=True, max_length=30, verbose_name='From Status')),
                ('to_status', models.CharField(max_length=30, verbose_name='To Status')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='workflow_actions', to=settings.AUTH_USER_MODEL, verbose_name='Actor')),
                ('workflow', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='actions', to='workflow.approvalworkflow', verbose_name='Workflow')),
            ],
            options={
                'verbose_name': 'Workflow Action',
                'verbose_name_plural': 'Workflow Actions',
                'ordering': ['created_at', 'id'],
            },
        ),
    ]
