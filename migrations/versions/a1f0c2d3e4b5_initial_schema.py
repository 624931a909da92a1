"""Initial maintenance tracking schema

Revision ID: a1f0c2d3e4b5
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f0c2d3e4b5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


activity_status = sa.Enum('COMPLETED', 'PENDING', 'IN_PROGRESS', name='activitystatus')
activity_priority = sa.Enum('NO', 'LOW', 'MEDIUM', 'HIGH', 'IMMEDIATE', name='activitypriority')


def upgrade() -> None:
    op.create_table(
        'maintenance_types',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(150), nullable=False),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('maintenance_types.id'), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('path', sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_maintenance_types_id', 'maintenance_types', ['id'])
    op.create_index('ix_maintenance_types_user_id', 'maintenance_types', ['user_id'])
    op.create_index('ix_maintenance_types_parent_id', 'maintenance_types', ['parent_id'])

    op.create_table(
        'activities',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'name', name='uq_activity_user_name'),
    )
    op.create_index('ix_activities_id', 'activities', ['id'])
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])

    op.create_table(
        'activity_maintenance_types',
        sa.Column('activity_id', sa.Uuid(), sa.ForeignKey('activities.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('maintenance_type_id', sa.Uuid(), sa.ForeignKey('maintenance_types.id', ondelete='CASCADE'),
                  primary_key=True),
    )

    op.create_table(
        'maintenance_plans',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'name', name='uq_maintenance_plan_user_name'),
    )
    op.create_index('ix_maintenance_plans_id', 'maintenance_plans', ['id'])
    op.create_index('ix_maintenance_plans_user_id', 'maintenance_plans', ['user_id'])

    op.create_table(
        'maintenance_stages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('maintenance_plan_id', sa.Uuid(), sa.ForeignKey('maintenance_plans.id'), nullable=False),
        sa.Column('maintenance_type_id', sa.Uuid(), sa.ForeignKey('maintenance_types.id'), nullable=False),
        sa.Column('stage_index', sa.Integer(), nullable=False),
        sa.Column('kilometers', sa.Float(), nullable=False, server_default='0'),
        sa.Column('days', sa.Float(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('ix_maintenance_stages_id', 'maintenance_stages', ['id'])
    op.create_index('ix_maintenance_stages_user_id', 'maintenance_stages', ['user_id'])
    op.create_index('ix_maintenance_stages_maintenance_plan_id', 'maintenance_stages', ['maintenance_plan_id'])

    op.create_table(
        'equipment',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('license_plate', sa.String(50), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('maintenance_plan_id', sa.Uuid(), sa.ForeignKey('maintenance_plans.id'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'license_plate', name='uq_equipment_user_license_plate'),
        sa.UniqueConstraint('user_id', 'code', name='uq_equipment_user_code'),
    )
    op.create_index('ix_equipment_id', 'equipment', ['id'])
    op.create_index('ix_equipment_user_id', 'equipment', ['user_id'])

    op.create_table(
        'spare_parts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('factory_code', sa.String(100), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'factory_code', name='uq_spare_part_user_factory_code'),
    )
    op.create_index('ix_spare_parts_id', 'spare_parts', ['id'])
    op.create_index('ix_spare_parts_user_id', 'spare_parts', ['user_id'])

    op.create_table(
        'mileage_records',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('equipment_id', sa.Uuid(), sa.ForeignKey('equipment.id'), nullable=False),
        sa.Column('record_date', sa.Date(), nullable=False),
        sa.Column('kilometers', sa.Float(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('equipment_id', 'record_date', name='uq_mileage_record_equipment_date'),
    )
    op.create_index('ix_mileage_records_id', 'mileage_records', ['id'])
    op.create_index('ix_mileage_records_user_id', 'mileage_records', ['user_id'])
    op.create_index('ix_mileage_records_equipment_id', 'mileage_records', ['equipment_id'])

    op.create_table(
        'maintenance_records',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('equipment_id', sa.Uuid(), sa.ForeignKey('equipment.id'), nullable=False),
        sa.Column('maintenance_type_id', sa.Uuid(), sa.ForeignKey('maintenance_types.id'), nullable=False),
        sa.Column('mileage_record_id', sa.Uuid(), sa.ForeignKey('mileage_records.id'), nullable=True),
        sa.Column('start_datetime', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_datetime', sa.DateTime(timezone=True), nullable=True),
        sa.Column('observations', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_maintenance_records_id', 'maintenance_records', ['id'])
    op.create_index('ix_maintenance_records_user_id', 'maintenance_records', ['user_id'])
    op.create_index('ix_maintenance_records_equipment_id', 'maintenance_records', ['equipment_id'])

    op.create_table(
        'maintenance_spare_parts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('maintenance_record_id', sa.Uuid(),
                  sa.ForeignKey('maintenance_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('spare_part_id', sa.Uuid(), sa.ForeignKey('spare_parts.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('maintenance_record_id', 'spare_part_id', name='uq_maintenance_spare_part'),
    )
    op.create_index('ix_maintenance_spare_parts_id', 'maintenance_spare_parts', ['id'])
    op.create_index('ix_maintenance_spare_parts_maintenance_record_id', 'maintenance_spare_parts',
                    ['maintenance_record_id'])

    op.create_table(
        'maintenance_activities',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('maintenance_record_id', sa.Uuid(),
                  sa.ForeignKey('maintenance_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('activity_id', sa.Uuid(), sa.ForeignKey('activities.id'), nullable=False),
        sa.Column('status', activity_status, nullable=False),
        sa.Column('priority', activity_priority, nullable=False),
        sa.Column('observations', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('maintenance_record_id', 'activity_id', name='uq_maintenance_activity'),
    )
    op.create_index('ix_maintenance_activities_id', 'maintenance_activities', ['id'])
    op.create_index('ix_maintenance_activities_maintenance_record_id', 'maintenance_activities',
                    ['maintenance_record_id'])


def downgrade() -> None:
    op.drop_table('maintenance_activities')
    op.drop_table('maintenance_spare_parts')
    op.drop_table('maintenance_records')
    op.drop_table('mileage_records')
    op.drop_table('spare_parts')
    op.drop_table('equipment')
    op.drop_table('maintenance_stages')
    op.drop_table('maintenance_plans')
    op.drop_table('activity_maintenance_types')
    op.drop_table('activities')
    op.drop_table('maintenance_types')
    activity_priority.drop(op.get_bind(), checkfirst=True)
    activity_status.drop(op.get_bind(), checkfirst=True)
