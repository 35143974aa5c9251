"""perth questions

Revision ID: 8b2e4f6a1c93
Revises: 3f1c2a9d7b41
Create Date: 2026-10-20 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '8b2e4f6a1c93'
down_revision: Union[str, Sequence[str], None] = '3f1c2a9d7b41'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'perth_questions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id', name='pk_perth_questions'),
    )
    op.create_index('ix_perth_questions_created_at', 'perth_questions', ['created_at'])


def downgrade():
    op.drop_index('ix_perth_questions_created_at', table_name='perth_questions')
    op.drop_table('perth_questions')
