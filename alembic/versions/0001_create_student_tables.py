"""Create students and upload history tables.

Revision ID: 0001_create_student_tables
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_student_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'students',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), primary_key=True, autoincrement=True),
        sa.Column('student_id', sa.String(length=100), nullable=False),
        sa.Column('student_name', sa.String(length=255), nullable=False),
        sa.Column('total_marks', sa.Float(), nullable=False),
        sa.Column('marks_obtained', sa.Float(), nullable=False),
        sa.Column('percentage', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_students_student_id', 'students', ['student_id'], unique=True)
    op.create_index('ix_students_created_at', 'students', ['created_at'])

    op.create_table(
        'upload_history',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), primary_key=True, autoincrement=True),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('students_count', sa.Integer(), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_upload_history_uploaded_at', 'upload_history', ['uploaded_at'])


def downgrade() -> None:
    op.drop_index('ix_upload_history_uploaded_at', table_name='upload_history')
    op.drop_table('upload_history')
    op.drop_index('ix_students_created_at', table_name='students')
    op.drop_index('ix_students_student_id', table_name='students')
    op.drop_table('students')
