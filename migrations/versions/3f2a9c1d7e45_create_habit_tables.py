"""Create user, habit, habit_completion and notification tables

Revision ID: 3f2a9c1d7e45
Revises: 
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2a9c1d7e45'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=200), nullable=False),
        sa.Column('date_joined', sa.DateTime(), nullable=True),
        sa.Column('notifications_enabled', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username')
    )

    op.create_table('habit',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_time', sa.String(length=40), nullable=False),
        sa.Column('target_time', sa.String(length=40), nullable=False),
        sa.Column('icon_id', sa.Integer(), nullable=False),
        sa.Column('repeats', sa.JSON(), nullable=False),
        sa.Column('streak', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('habit', schema=None) as batch_op:
        batch_op.create_index('ix_habit_user_id', ['user_id'], unique=False)

    op.create_table('habit_completion',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('habit_id', sa.Integer(), nullable=False),
        sa.Column('timestamp', sa.String(length=40), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('on_time', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['habit_id'], ['habit.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('habit_id', 'date', name='_habit_date_uc')
    )
    with op.batch_alter_table('habit_completion', schema=None) as batch_op:
        batch_op.create_index('ix_habit_completion_habit_id', ['habit_id'], unique=False)

    op.create_table('notification',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=40), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('habit_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['habit_id'], ['habit.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('notification', schema=None) as batch_op:
        batch_op.create_index('ix_notification_user_id', ['user_id'], unique=False)


def downgrade():
    with op.batch_alter_table('notification', schema=None) as batch_op:
        batch_op.drop_index('ix_notification_user_id')
    op.drop_table('notification')

    with op.batch_alter_table('habit_completion', schema=None) as batch_op:
        batch_op.drop_index('ix_habit_completion_habit_id')
    op.drop_table('habit_completion')

    with op.batch_alter_table('habit', schema=None) as batch_op:
        batch_op.drop_index('ix_habit_user_id')
    op.drop_table('habit')

    op.drop_table('user')
