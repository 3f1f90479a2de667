"""Initial calendar schema: calendars, calendar_terms, calendar_days

Revision ID: 001_initial_calendar
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_calendar'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    if 'calendars' in sa.inspect(op.get_bind()).get_table_names():
        return
    op.create_table(
        'calendars',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('fiscal_year', sa.Integer(), nullable=False),
        sa.Column('fiscal_start', sa.Date(), nullable=False),
        sa.Column('fiscal_end', sa.Date(), nullable=False),
        sa.Column('disable_saturday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('memo', sa.Text(), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('fiscal_year', 'name', name='uq_calendar_year_name')
    )
    op.create_index(op.f('ix_calendars_id'), 'calendars', ['id'], unique=False)
    op.create_index(op.f('ix_calendars_fiscal_year'), 'calendars', ['fiscal_year'], unique=False)

    op.create_table(
        'calendar_terms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('calendar_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('order', sa.Integer(), nullable=True),
        sa.Column('short_name', sa.String(64), nullable=True),
        sa.Column('class_count', sa.Integer(), nullable=True),
        sa.Column('holiday_flag', sa.Integer(), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['calendar_id'], ['calendars.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('calendar_id', 'name', name='uq_calendar_term_name')
    )
    op.create_index(op.f('ix_calendar_terms_id'), 'calendar_terms', ['id'], unique=False)
    op.create_index(op.f('ix_calendar_terms_calendar_id'), 'calendar_terms', ['calendar_id'], unique=False)

    op.create_table(
        'calendar_days',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('calendar_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('term_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('is_holiday', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('national_holiday_name', sa.String(255), nullable=True),
        sa.Column('class_weekday', sa.Integer(), nullable=True),
        sa.Column('class_order', sa.Integer(), nullable=True),
        sa.Column('notification_reasons', sa.String(64), nullable=True),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('CURRENT_TIMESTAMP'),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(['calendar_id'], ['calendars.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['term_id'], ['calendar_terms.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('calendar_id', 'date', name='uq_calendar_day_date')
    )
    op.create_index(op.f('ix_calendar_days_id'), 'calendar_days', ['id'], unique=False)
    op.create_index(op.f('ix_calendar_days_calendar_id'), 'calendar_days', ['calendar_id'], unique=False)
    op.create_index(op.f('ix_calendar_days_date'), 'calendar_days', ['date'], unique=False)
    op.create_index(op.f('ix_calendar_days_term_id'), 'calendar_days', ['term_id'], unique=False)
    op.create_index('ix_calendar_days_calendar_type', 'calendar_days', ['calendar_id', 'type'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_calendar_days_calendar_type', table_name='calendar_days')
    op.drop_index(op.f('ix_calendar_days_term_id'), table_name='calendar_days')
    op.drop_index(op.f('ix_calendar_days_date'), table_name='calendar_days')
    op.drop_index(op.f('ix_calendar_days_calendar_id'), table_name='calendar_days')
    op.drop_index(op.f('ix_calendar_days_id'), table_name='calendar_days')
    op.drop_table('calendar_days')
    op.drop_index(op.f('ix_calendar_terms_calendar_id'), table_name='calendar_terms')
    op.drop_index(op.f('ix_calendar_terms_id'), table_name='calendar_terms')
    op.drop_table('calendar_terms')
    op.drop_index(op.f('ix_calendars_fiscal_year'), table_name='calendars')
    op.drop_index(op.f('ix_calendars_id'), table_name='calendars')
    op.drop_table('calendars')
