"""
Management command to report approval workflows in an inconsistent state.
"""
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Count

from apps.core.exceptions import UnsupportedEntityTypeException
from apps.workflow.models import ApprovalWorkflow, TERMINAL_STATUSES
from apps.workflow.repositories import get_entity_model


def find_workflow_issues(workflow, stage_count: int, entity_status=None):
    """Return a list of human-readable problems for one workflow."""
    issues = []

    if stage_count != workflow.total_stages:
        issues.append(f'has {stage_count} stage(s) but total_stages is {workflow.total_stages}')

    if workflow.current_stage > workflow.total_stages:
        issues.append(f'current_stage {workflow.current_stage} exceeds total_stages {workflow.total_stages}')

    is_terminal = workflow.status in TERMINAL_STATUSES
    if is_terminal and workflow.completed_at is None:
        issues.append(f'is {workflow.status} but has no completed_at')
    elif not is_terminal and workflow.completed_at is not None:
        issues.append(f'is {workflow.status} but has completed_at set')

    if entity_status is not None and entity_status != workflow.status:
        issues.append(f'record status is {entity_status} but workflow status is {workflow.status}')

    return issues


class Command(BaseCommand):
    help = 'Report approval workflows whose stages, timestamps or record status are inconsistent'

    def add_arguments(self, parser):
        parser.add_argument(
            '--entity-type',
            type=str,
            help='Only check workflows for this entity type (e.g., "Budget Proposal")',
        )
        parser.add_argument(
            '--fail',
            action='store_true',
            help='Exit with an error when any issue is found',
        )

    def handle(self, *args, **options):
        workflows = ApprovalWorkflow.objects.annotate(stage_count=Count('stages')).order_by('id')
        if options.get('entity_type'):
            workflows = workflows.filter(entity_type=options['entity_type'])

        # Only the latest workflow of a record drives its status
        latest_ids = {}
        for workflow in workflows:
            latest_ids[(workflow.entity_type, workflow.entity_id)] = workflow.pk

        checked = 0
        problems = 0
        for workflow in workflows:
            checked += 1
            entity_status = None
            if latest_ids[(workflow.entity_type, workflow.entity_id)] == workflow.pk:
                entity_status = self._entity_status(workflow)

            for issue in find_workflow_issues(workflow, workflow.stage_count, entity_status):
                problems += 1
                self.stdout.write(
                    self.style.WARNING(
                        f'Workflow #{workflow.pk} ({workflow.entity_type} {workflow.entity_id}) {issue}'
                    )
                )

        if problems:
            message = f'{problems} issue(s) found in {checked} workflow(s)'
            if options.get('fail'):
                raise CommandError(message)
            self.stdout.write(self.style.ERROR(message))
        else:
            self.stdout.write(self.style.SUCCESS(f'Checked {checked} workflow(s); no issues found'))

    def _entity_status(self, workflow):
        try:
            model = get_entity_model(workflow.entity_type)
        except UnsupportedEntityTypeException:
            return None
        return model.objects.filter(pk=workflow.entity_id).values_list('status', flat=True).first()
