"""onboarding_pipeline

Revision ID: 0001_onboarding_pipeline
Revises:
Create Date: 2026-10-19

Candidate pipeline, onboarding links/forms/documents and HRD decision tables.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_onboarding_pipeline'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')

STATUS_TYPE = sa.Enum(
    'new', 'screening', 'screened_pass', 'screened_fail', 'submitted',
    'interview_scheduled', 'interview_passed', 'interview_failed',
    'onboarding', 'onboarding_completed', 'contract_requested', 'hired', 'rejected',
    name='candidate_status',
    native_enum=False,
    length=32,
)


def _tenant_columns():
    return [
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('tenant_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create the onboarding pipeline tables."""

    # 1. candidate
    op.create_table(
        'candidate',
        *_tenant_columns(),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('employment_type', sa.String(length=20), nullable=False),
        sa.Column('status', STATUS_TYPE, nullable=False),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_candidate_tenant_id', 'candidate', ['tenant_id'])
    op.create_index('ix_candidate_status', 'candidate', ['status'])

    # 2. candidate_status_event (append-only)
    op.create_table(
        'candidate_status_event',
        *_tenant_columns(),
        sa.Column('candidate_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('from_status', STATUS_TYPE, nullable=False),
        sa.Column('to_status', STATUS_TYPE, nullable=False),
        sa.Column('actor', sa.String(length=100), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidate.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_candidate_status_event_tenant_id', 'candidate_status_event', ['tenant_id'])
    op.create_index('ix_candidate_status_event_candidate_id', 'candidate_status_event', ['candidate_id'])

    # 3. onboarding_link
    op.create_table(
        'onboarding_link',
        *_tenant_columns(),
        sa.Column('candidate_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('token', sa.String(length=128), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('issued_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidate.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index('ix_onboarding_link_tenant_id', 'onboarding_link', ['tenant_id'])
    op.create_index('ix_onboarding_link_candidate_issued', 'onboarding_link', ['candidate_id', 'issued_at'])

    # 4. onboarding_form
    op.create_table(
        'onboarding_form',
        *_tenant_columns(),
        sa.Column('candidate_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('id_number', sa.String(length=32), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('ktp_rt_rw', sa.String(length=20), nullable=True),
        sa.Column('ktp_village', sa.String(length=100), nullable=True),
        sa.Column('ktp_sub_district', sa.String(length=100), nullable=True),
        sa.Column('ktp_city', sa.String(length=100), nullable=True),
        sa.Column('ktp_province', sa.String(length=100), nullable=True),
        sa.Column('domicile_address', sa.Text(), nullable=True),
        sa.Column('place_of_birth', sa.String(length=100), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=10), nullable=True),
        sa.Column('religion', sa.String(length=30), nullable=True),
        sa.Column('marital_status', sa.String(length=20), nullable=True),
        sa.Column('bank_name', sa.String(length=100), nullable=True),
        sa.Column('bank_account_number', sa.String(length=50), nullable=True),
        sa.Column('bank_account_holder', sa.String(length=200), nullable=True),
        sa.Column('npwp_number', sa.String(length=32), nullable=True),
        sa.Column('emergency_contact_name', sa.String(length=200), nullable=True),
        sa.Column('emergency_contact_relationship', sa.String(length=50), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(length=50), nullable=True),
        sa.Column('employment_start_date', sa.Date(), nullable=True),
        sa.Column('employment_duration_months', sa.Integer(), nullable=True),
        sa.Column('employment_salary', sa.String(length=50), nullable=True),
        sa.Column('declaration', JSON_TYPE, nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('data_reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('data_reviewed_by', sa.String(length=100), nullable=True),
        sa.Column('submitted_for_hrd_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hrd_approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hrd_rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hrd_decided_by', sa.String(length=100), nullable=True),
        sa.Column('hrd_comment', sa.Text(), nullable=True),
        sa.Column('locked_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidate.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('candidate_id'),
        sa.CheckConstraint(
            'hrd_approved_at IS NULL OR hrd_rejected_at IS NULL',
            name='ck_onboarding_form_single_decision',
        ),
    )
    op.create_index('ix_onboarding_form_tenant_id', 'onboarding_form', ['tenant_id'])

    # 5. onboarding_document
    op.create_table(
        'onboarding_document',
        *_tenant_columns(),
        sa.Column('candidate_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('document_type', sa.String(length=10), nullable=False),
        sa.Column('file_ref', sa.String(length=500), nullable=False),
        sa.Column('original_filename', sa.String(length=255), nullable=True),
        sa.Column('content_type', sa.String(length=100), nullable=False),
        sa.Column('size_bytes', sa.Integer(), nullable=False),
        sa.Column('extracted_data', JSON_TYPE, nullable=True),
        sa.Column('ocr_confidence', sa.Float(), nullable=True),
        sa.Column('needs_review', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('uploaded_by', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidate.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_onboarding_document_tenant_id', 'onboarding_document', ['tenant_id'])
    op.create_index(
        'ix_onboarding_document_candidate_type',
        'onboarding_document',
        ['candidate_id', 'document_type'],
    )

    # 6. hrd_decision (append-only)
    op.create_table(
        'hrd_decision',
        *_tenant_columns(),
        sa.Column('form_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('candidate_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('decision', sa.String(length=20), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('actor', sa.String(length=100), nullable=False),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['form_id'], ['onboarding_form.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidate.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_hrd_decision_tenant_id', 'hrd_decision', ['tenant_id'])
    op.create_index('ix_hrd_decision_form_id', 'hrd_decision', ['form_id'])


def downgrade() -> None:
    """Drop the onboarding pipeline tables."""
    op.drop_table('hrd_decision')
    op.drop_table('onboarding_document')
    op.drop_table('onboarding_form')
    op.drop_table('onboarding_link')
    op.drop_table('candidate_status_event')
    op.drop_table('candidate')
