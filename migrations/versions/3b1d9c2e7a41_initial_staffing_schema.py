"""initial staffing schema: employees, companies, placements, configurations, approvals

Revision ID: 3b1d9c2e7a41
Revises:
Create Date: 2026-10-18 10:12:44.118302
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

revision: str = '3b1d9c2e7a41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]


def upgrade() -> None:
    connection = op.get_bind()
    inspector = inspect(connection)
    tables = inspector.get_table_names()

    if 'employees' not in tables:
        op.create_table(
            'employees',
            *_audit_columns(),
            sa.Column('reference_id', sa.String(length=30), nullable=False),
            sa.Column('first_name', sa.String(length=50), nullable=False),
            sa.Column('last_name', sa.String(length=50), nullable=False),
            sa.Column('display_name', sa.String(length=120), nullable=True),
            sa.Column('email_id', sa.String(length=100), nullable=False, unique=True),
            sa.Column('employment_type_id', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('is_tenant_owner', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('status', sa.String(length=20), nullable=False, server_default='Active'),
            sa.Column('enable_login', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('relieving_date', sa.Date(), nullable=True),
            sa.Column('rejoin_date', sa.Date(), nullable=True),
            sa.Column('access_token', sa.Text(), nullable=True),
            sa.Column('refresh_token', sa.Text(), nullable=True),
            sa.Column('fcm_token', sa.Text(), nullable=True),
        )
        op.create_index('ix_employees_reference_id', 'employees', ['reference_id'], unique=True)
        print("✓ [3b1d9c2e7a41] Created employees")

    if 'timesheet_configurations' not in tables:
        op.create_table(
            'timesheet_configurations',
            *_audit_columns(),
            sa.Column('cycle_id', sa.Integer(), nullable=False),
            sa.Column('day_start_id', sa.Integer(), nullable=True),
            sa.Column('default_hours', sa.String(length=5), nullable=False, server_default='08:00'),
            sa.Column('ts_mandatory', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_global', sa.Boolean(), nullable=False, server_default=sa.false()),
        )
        print("✓ [3b1d9c2e7a41] Created timesheet_configurations")

    if 'invoice_configurations' not in tables:
        op.create_table(
            'invoice_configurations',
            *_audit_columns(),
            sa.Column('cycle_id', sa.Integer(), nullable=False),
            sa.Column('day_start_id', sa.Integer(), nullable=True),
            sa.Column('net_pay_days', sa.Integer(), nullable=False, server_default='30'),
            sa.Column('is_global', sa.Boolean(), nullable=False, server_default=sa.false()),
        )
        print("✓ [3b1d9c2e7a41] Created invoice_configurations")

    if 'approval_settings' not in tables:
        op.create_table(
            'approval_settings',
            *_audit_columns(),
            sa.Column('approval_module', sa.Integer(), nullable=False),
            sa.Column('is_global', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('approval_count', sa.Integer(), nullable=False, server_default='0'),
        )
        print("✓ [3b1d9c2e7a41] Created approval_settings")

    if 'approval_levels' not in tables:
        op.create_table(
            'approval_levels',
            *_audit_columns(),
            sa.Column('approval_setting_id', sa.Integer(), sa.ForeignKey('approval_settings.id'), nullable=False),
            sa.Column('level', sa.Integer(), nullable=False),
        )
        op.create_index('ix_approval_levels_approval_setting_id', 'approval_levels', ['approval_setting_id'])
        print("✓ [3b1d9c2e7a41] Created approval_levels")

    if 'approval_users' not in tables:
        op.create_table(
            'approval_users',
            *_audit_columns(),
            sa.Column('approval_level_id', sa.Integer(), sa.ForeignKey('approval_levels.id'), nullable=False),
            sa.Column('approver_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        )
        op.create_index('ix_approval_users_approval_level_id', 'approval_users', ['approval_level_id'])
        op.create_index('ix_approval_users_approver_id', 'approval_users', ['approver_id'])
        print("✓ [3b1d9c2e7a41] Created approval_users")

    if 'companies' not in tables:
        op.create_table(
            'companies',
            *_audit_columns(),
            sa.Column('reference_id', sa.String(length=30), nullable=False),
            sa.Column('name', sa.String(length=150), nullable=False),
            sa.Column('entity_type', sa.String(length=20), nullable=False, server_default='client'),
            sa.Column('timesheet_configuration_id', sa.Integer(), sa.ForeignKey('timesheet_configurations.id'), nullable=True),
            sa.Column('timesheet_approval_id', sa.Integer(), sa.ForeignKey('approval_settings.id'), nullable=True),
            sa.Column('invoice_configuration_id', sa.Integer(), sa.ForeignKey('invoice_configurations.id'), nullable=True),
            sa.Column('invoice_approval_id', sa.Integer(), sa.ForeignKey('approval_settings.id'), nullable=True),
        )
        op.create_index('ix_companies_reference_id', 'companies', ['reference_id'], unique=True)
        print("✓ [3b1d9c2e7a41] Created companies")

    if 'placements' not in tables:
        op.create_table(
            'placements',
            *_audit_columns(),
            sa.Column('reference_id', sa.String(length=30), nullable=False),
            sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
            sa.Column('client_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
            sa.Column('start_date', sa.Date(), nullable=False),
            sa.Column('end_date', sa.Date(), nullable=True),
            sa.Column('timesheet_start_date', sa.Date(), nullable=True),
            sa.Column('timesheet_settings_config_type', sa.Integer(), nullable=True),
            sa.Column('timesheet_approval_config_type', sa.Integer(), nullable=True),
            sa.Column('timesheet_configuration_id', sa.Integer(), sa.ForeignKey('timesheet_configurations.id'), nullable=True),
            sa.Column('timesheet_approval_id', sa.Integer(), sa.ForeignKey('approval_settings.id'), nullable=True),
            sa.Column('invoice_approval_id', sa.Integer(), sa.ForeignKey('approval_settings.id'), nullable=True),
            sa.Column('invoice_start_date', sa.Date(), nullable=True),
            sa.Column('invoice_settings_config_type', sa.Integer(), nullable=True),
            sa.Column('invoice_approval_config_type', sa.Integer(), nullable=True),
            sa.Column('invoice_configuration_id', sa.Integer(), sa.ForeignKey('invoice_configurations.id'), nullable=True),
        )
        op.create_index('ix_placements_reference_id', 'placements', ['reference_id'], unique=True)
        op.create_index('ix_placements_employee_id', 'placements', ['employee_id'])
        op.create_index('ix_placements_client_id', 'placements', ['client_id'])
        print("✓ [3b1d9c2e7a41] Created placements")


def downgrade() -> None:
    for table in (
        'placements', 'companies', 'approval_users', 'approval_levels',
        'approval_settings', 'invoice_configurations', 'timesheet_configurations', 'employees',
    ):
        op.drop_table(table)
