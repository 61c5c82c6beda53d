"""Initial schema: profiles, payroll, suspensions, tasks, inventory, settings, HR forms

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    # CURRENT_TIMESTAMP works on SQLite and Postgres
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    ]


def upgrade() -> None:
    # Skip if the app already created the tables with create_all()
    bind = op.get_bind()
    if 'profiles' in sa.inspect(bind).get_table_names():
        return

    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='EMPLOYEE'),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('position', sa.String(), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('strike_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_suspended', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('suspension_end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_terminated', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.CheckConstraint('strike_count >= 0', name='ck_profiles_strike_count_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_profiles_id'), 'profiles', ['id'], unique=False)
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=True)

    op.create_table(
        'salary_info',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('base_salary', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('current_salary', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_deductions', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('daily_rate', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(3), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_salary_info_id'), 'salary_info', ['id'], unique=False)
    op.create_index(op.f('ix_salary_info_user_id'), 'salary_info', ['user_id'], unique=True)

    op.create_table(
        'attendance',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='PRESENT'),
        sa.Column('clock_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deduction_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_attendance_user_date')
    )
    op.create_index(op.f('ix_attendance_id'), 'attendance', ['id'], unique=False)
    op.create_index(op.f('ix_attendance_user_id'), 'attendance', ['user_id'], unique=False)
    op.create_index(op.f('ix_attendance_date'), 'attendance', ['date'], unique=False)

    op.create_table(
        'suspensions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='PENDING'),
        sa.Column('suspension_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('suspension_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('strike_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('salary_deduction_percentage', sa.Numeric(5, 2), nullable=False, server_default='0'),
        *_timestamps(),
        sa.CheckConstraint('strike_number >= 0 AND strike_number <= 3', name='ck_suspensions_strike_number'),
        sa.CheckConstraint(
            'salary_deduction_percentage >= 0 AND salary_deduction_percentage <= 100',
            name='ck_suspensions_deduction_percentage',
        ),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['approved_by'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_suspensions_id'), 'suspensions', ['id'], unique=False)
    op.create_index(op.f('ix_suspensions_user_id'), 'suspensions', ['user_id'], unique=False)
    op.create_index(op.f('ix_suspensions_status'), 'suspensions', ['status'], unique=False)

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_email', sa.String(), nullable=True),
        sa.Column('customer_phone', sa.String(), nullable=True),
        sa.Column('customer_address', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('project_status', sa.String(), nullable=False, server_default='ACTIVE'),
        sa.Column('created_by', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_projects_id'), 'projects', ['id'], unique=False)

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('priority', sa.String(), nullable=False, server_default='MEDIUM'),
        sa.Column('status', sa.String(), nullable=False, server_default='PENDING'),
        sa.Column('assigned_to', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('customer_name', sa.String(), nullable=True),
        sa.Column('customer_phone', sa.String(), nullable=True),
        sa.Column('installation_address', sa.Text(), nullable=True),
        sa.Column('routers_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('poe_adapters_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('poles_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('anchors_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('inventory_deducted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paid_by', sa.Integer(), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['assigned_to'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['deleted_by'], ['profiles.id'], ),
        sa.ForeignKeyConstraint(['paid_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tasks_id'), 'tasks', ['id'], unique=False)
    op.create_index(op.f('ix_tasks_is_paid'), 'tasks', ['is_paid'], unique=False)
    op.create_index(op.f('ix_tasks_status'), 'tasks', ['status'], unique=False)
    op.create_index(op.f('ix_tasks_assigned_to'), 'tasks', ['assigned_to'], unique=False)
    op.create_index(op.f('ix_tasks_project_id'), 'tasks', ['project_id'], unique=False)
    op.create_index(op.f('ix_tasks_is_deleted'), 'tasks', ['is_deleted'], unique=False)

    op.create_table(
        'task_messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.Integer(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_task_messages_id'), 'task_messages', ['id'], unique=False)
    op.create_index(op.f('ix_task_messages_task_id'), 'task_messages', ['task_id'], unique=False)

    op.create_table(
        'task_attachments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.Integer(), nullable=False),
        sa.Column('uploaded_by', sa.Integer(), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('file_path', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['uploaded_by'], ['profiles.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_task_attachments_id'), 'task_attachments', ['id'], unique=False)
    op.create_index(op.f('ix_task_attachments_task_id'), 'task_attachments', ['task_id'], unique=False)

    op.create_table(
        'inventory_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('item_name', sa.String(), nullable=False),
        sa.Column('item_type', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('last_restocked_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity >= 0', name='ck_inventory_items_quantity_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_inventory_items_id'), 'inventory_items', ['id'], unique=False)
    op.create_index(op.f('ix_inventory_items_item_type'), 'inventory_items', ['item_type'], unique=False)

    op.create_table(
        'system_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('setting_key', sa.String(), nullable=False),
        sa.Column('setting_value', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_system_settings_id'), 'system_settings', ['id'], unique=False)
    op.create_index(op.f('ix_system_settings_setting_key'), 'system_settings', ['setting_key'], unique=True)

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('entity_type', sa.String(), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('meta_json', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['actor_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_audit_logs_id'), 'audit_logs', ['id'], unique=False)

    op.create_table(
        'biodata_submissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_hired_to', sa.String(), nullable=False),
        sa.Column('candidate_name', sa.String(), nullable=False),
        sa.Column('phone_number', sa.String(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', sa.String(), nullable=False),
        sa.Column('residential_address', sa.Text(), nullable=False),
        sa.Column('nationality', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=False),
        sa.Column('marital_status', sa.String(), nullable=False),
        sa.Column('last_employer_name_address', sa.Text(), nullable=False),
        sa.Column('last_employer_contact', sa.String(), nullable=False),
        sa.Column('first_previous_employer', sa.Text(), nullable=False),
        sa.Column('second_previous_employer', sa.Text(), nullable=False),
        sa.Column('pension_pin', sa.String(), nullable=True),
        sa.Column('pension_provider_name', sa.String(), nullable=True),
        sa.Column('certification', sa.Text(), nullable=True),
        sa.Column('next_of_kin_contact', sa.String(), nullable=False),
        sa.Column('next_of_kin_address', sa.Text(), nullable=False),
        *[sa.Column(name, sa.String(), nullable=True) for name in (
            'utility_bill_path',
            'education_certificate_path',
            'birth_certificate_path',
            'passport_photo_path',
            'id_card_path',
            'cv_path',
            'first_guarantor_form_path',
            'first_guarantor_id_path',
            'second_guarantor_form_path',
            'second_guarantor_id_path',
        )],
        sa.Column('status', sa.String(), nullable=False, server_default='PENDING'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_biodata_submissions_id'), 'biodata_submissions', ['id'], unique=False)
    op.create_index(op.f('ix_biodata_submissions_status'), 'biodata_submissions', ['status'], unique=False)

    op.create_table(
        'employee_audits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('current_job_title', sa.String(), nullable=False),
        sa.Column('job_description', sa.Text(), nullable=False),
        sa.Column('job_description_attached', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('department', sa.String(), nullable=True),
        sa.Column('grade', sa.String(), nullable=True),
        sa.Column('salary', sa.Numeric(12, 2), nullable=True),
        sa.Column('other_financial_benefit', sa.Text(), nullable=True),
        sa.Column('home_address', sa.Text(), nullable=True),
        sa.Column('home_telephone', sa.String(), nullable=True),
        sa.Column('manages_staff', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('number_of_employees', sa.Integer(), nullable=True),
        sa.Column('management_experience', sa.Text(), nullable=True),
        sa.Column('people_supervised', sa.Text(), nullable=True),
        sa.Column('employment_history', sa.JSON(), nullable=False),
        sa.Column('unpaid_roles', sa.JSON(), nullable=False),
        sa.Column('education', sa.JSON(), nullable=False),
        sa.Column('training', sa.JSON(), nullable=False),
        sa.Column('professional_membership', sa.JSON(), nullable=False),
        sa.Column('skills_competency', sa.JSON(), nullable=False),
        sa.Column('signature', sa.String(), nullable=False),
        sa.Column('declaration_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='SUBMITTED'),
        sa.Column('audit_comments', sa.Text(), nullable=True),
        sa.Column('competency_rating', sa.String(), nullable=True),
        sa.Column('engagement_status', sa.String(), nullable=True),
        sa.Column('file_record_status', sa.String(), nullable=True),
        sa.Column('performance_scores', sa.Text(), nullable=True),
        sa.Column('final_rating', sa.String(), nullable=True),
        sa.Column('final_consultant_comments', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_employee_audits_id'), 'employee_audits', ['id'], unique=False)
    op.create_index(op.f('ix_employee_audits_user_id'), 'employee_audits', ['user_id'], unique=False)
    op.create_index(op.f('ix_employee_audits_status'), 'employee_audits', ['status'], unique=False)

    op.create_table(
        'growth_tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('target_roles', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_growth_tasks_id'), 'growth_tasks', ['id'], unique=False)
    op.create_index(op.f('ix_growth_tasks_is_active'), 'growth_tasks', ['is_active'], unique=False)

    op.create_table(
        'growth_task_completions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['task_id'], ['growth_tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('task_id', 'user_id', name='uq_growth_task_completions_task_user')
    )
    op.create_index(op.f('ix_growth_task_completions_id'), 'growth_task_completions', ['id'], unique=False)
    op.create_index(op.f('ix_growth_task_completions_task_id'), 'growth_task_completions', ['task_id'], unique=False)
    op.create_index(op.f('ix_growth_task_completions_user_id'), 'growth_task_completions', ['user_id'], unique=False)


def downgrade() -> None:
    for table in (
        'growth_task_completions',
        'growth_tasks',
        'employee_audits',
        'biodata_submissions',
        'audit_logs',
        'system_settings',
        'inventory_items',
        'task_attachments',
        'task_messages',
        'tasks',
        'projects',
        'suspensions',
        'attendance',
        'salary_info',
        'profiles',
    ):
        op.drop_table(table)
