"""Create claim portal tables"""

from alembic import op
import sqlalchemy as sa


revision = '7a41c0d2e9b3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(150), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('email', sa.String(150), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('national_id', sa.String(50), nullable=False),
        sa.Column('program_id', sa.String(50), nullable=False),
        sa.Column('phone_number', sa.String(30), nullable=False),
        sa.Column('current_address', sa.Text(), nullable=False),
        sa.Column('country_of_study', sa.String(100), nullable=False),
        sa.Column('university', sa.String(200), nullable=False),
        sa.Column('field_of_study', sa.String(200), nullable=False),
        sa.Column('degree_level', sa.String(50), nullable=False),
        sa.Column('sponsor_group', sa.String(100), nullable=False),
        sa.Column('sponsorship_period', sa.String(100), nullable=False),
        sa.Column('bank_name', sa.String(200), nullable=False),
        sa.Column('bank_address', sa.Text(), nullable=False),
        sa.Column('account_number', sa.String(100), nullable=False),
        sa.Column('swift_code', sa.String(50), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='student'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # One named unique constraint per identifying column
    constraints = [
        ('uq_users_username', 'username'),
        ('uq_users_email', 'email'),
        ('uq_users_national_id', 'national_id'),
        ('uq_users_program_id', 'program_id'),
    ]
    with op.batch_alter_table('users') as batch:
        for name, column in constraints:
            batch.create_unique_constraint(name, [column])

    op.create_table(
        'claims',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('claim_type', sa.String(255), nullable=False),
        sa.Column('claim_details', sa.JSON(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('claim_period', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('receipt_file', sa.String(255), nullable=False),
        sa.Column('supporting_doc_file', sa.String(255), nullable=True),
        sa.Column('bank_name', sa.String(200), nullable=False),
        sa.Column('bank_address', sa.Text(), nullable=False),
        sa.Column('account_number', sa.String(100), nullable=False),
        sa.Column('swift_code', sa.String(50), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('review_comment', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_claims_user_id', 'claims', ['user_id'])
    op.create_index('ix_claims_status', 'claims', ['status'])

    op.create_table(
        'academic_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('semester', sa.String(50), nullable=False),
        sa.Column('year', sa.String(20), nullable=False),
        sa.Column('gpa', sa.Float(), nullable=True),
        sa.Column('ects_credits', sa.Integer(), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_academic_records_user_id', 'academic_records', ['user_id'])

    op.create_table(
        'courses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('academic_record_id', sa.Integer(),
                  sa.ForeignKey('academic_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('credits', sa.Integer(), nullable=False),
        sa.Column('grade', sa.String(10), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
    )
    op.create_index('ix_courses_academic_record_id', 'courses', ['academic_record_id'])

    op.create_table(
        'study_plans',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('semester', sa.String(50), nullable=False),
        sa.Column('year', sa.String(20), nullable=False),
        sa.Column('planned_courses', sa.JSON(), nullable=False),
        sa.Column('total_credits', sa.Integer(), nullable=False),
    )
    op.create_index('ix_study_plans_user_id', 'study_plans', ['user_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade():
    for index, table in [
        ('ix_notifications_user_id', 'notifications'),
        ('ix_study_plans_user_id', 'study_plans'),
        ('ix_courses_academic_record_id', 'courses'),
        ('ix_academic_records_user_id', 'academic_records'),
        ('ix_claims_status', 'claims'),
        ('ix_claims_user_id', 'claims'),
    ]:
        op.drop_index(index, table_name=table)

    for table in ['notifications', 'study_plans', 'courses', 'academic_records', 'claims', 'users']:
        op.drop_table(table)
