"""add average_time and bonus_points to user_stats

Revision ID: 7c8d9e0f1a2b
Revises: 1a2b3c4d5e6f
Create Date: 2025-09-10 16:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c8d9e0f1a2b'
down_revision = '1a2b3c4d5e6f'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    cols = {c['name'] for c in insp.get_columns('user_stats')}
    with op.batch_alter_table('user_stats') as batch_op:
        if 'average_time' not in cols:
            batch_op.add_column(sa.Column('average_time', sa.Integer(), nullable=False, server_default='0'))
        if 'bonus_points' not in cols:
            batch_op.add_column(sa.Column('bonus_points', sa.Integer(), nullable=False, server_default='0'))


def downgrade():
    with op.batch_alter_table('user_stats') as batch_op:
        batch_op.drop_column('bonus_points')
        batch_op.drop_column('average_time')
