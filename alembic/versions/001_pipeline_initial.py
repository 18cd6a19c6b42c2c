"""Create job and candidate tables

Revision ID: 001_pipeline_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_pipeline_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Creates:
    1. job, with its open/closed status check
    2. candidate, with the stage check and the owner + created_at index
       used by the newest-first pipeline load
    """
    op.create_table(
        'job',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='open'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint("status IN ('open', 'closed')", name='ck_job_status'),
    )
    op.create_index('ix_job_owner_id', 'job', ['owner_id'])

    op.create_table(
        'candidate',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            'job_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('job.id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('linkedin_url', sa.String(length=500), nullable=True),
        sa.Column('resume_url', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('stage', sa.String(length=20), nullable=False, server_default='applied'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint(
            "stage IN ('applied', 'screening', 'interview', 'offer', 'hired', 'rejected')",
            name='ck_candidate_stage',
        ),
    )
    op.create_index('ix_candidate_owner_id', 'candidate', ['owner_id'])
    op.create_index('ix_candidate_job_id', 'candidate', ['job_id'])
    op.create_index('ix_candidate_stage', 'candidate', ['stage'])
    op.create_index('ix_candidate_owner_created', 'candidate', ['owner_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_candidate_owner_created', table_name='candidate')
    op.drop_index('ix_candidate_stage', table_name='candidate')
    op.drop_index('ix_candidate_job_id', table_name='candidate')
    op.drop_index('ix_candidate_owner_id', table_name='candidate')
    op.drop_table('candidate')
    op.drop_index('ix_job_owner_id', table_name='job')
    op.drop_table('job')
