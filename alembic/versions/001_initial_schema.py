"""Create companies, permissions and jobs schema

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _pk():
    return sa.Column('id', sa.BigInteger(), nullable=False, autoincrement=True)


def _timestamps(updated: bool = True):
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())
        )
    return columns


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'users',
        _pk(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'companies',
        _pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(length=255), nullable=True),
        sa.Column('industry_type', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'cost_centers',
        _pk(),
        sa.Column('company_id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('budget', sa.Numeric(12, 2), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_cost_center_company', 'cost_centers', ['company_id'])

    op.create_table(
        'clients',
        _pk(),
        sa.Column('company_id', sa.BigInteger(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('contact_person', sa.String(length=255), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
    )
    op.create_index('idx_client_company', 'clients', ['company_id'])
    op.create_index('idx_client_company_active', 'clients', ['company_id', 'is_active'])

    op.create_table(
        'professions',
        _pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_professions_category', 'professions', ['category'])

    op.create_table(
        'jobs',
        _pk(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('company_id', sa.BigInteger(), nullable=False),
        sa.Column('cost_center_id', sa.BigInteger(), nullable=True),
        sa.Column('profession_id', sa.BigInteger(), nullable=False),
        sa.Column('recruiter_id', sa.BigInteger(), nullable=True),
        sa.Column('client_id', sa.BigInteger(), nullable=True),
        sa.Column('created_by', sa.BigInteger(), nullable=True),
        sa.Column('department', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('contract_type', sa.String(length=50), nullable=False, server_default='clt'),
        sa.Column('salary_min', sa.Numeric(12, 2), nullable=True),
        sa.Column('salary_max', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='draft'),
        sa.Column('sla_deadline', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id']),
        sa.ForeignKeyConstraint(['cost_center_id'], ['cost_centers.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['profession_id'], ['professions.id']),
        sa.ForeignKeyConstraint(['recruiter_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
    )
    op.create_index('idx_job_company_status', 'jobs', ['company_id', 'status'])
    op.create_index('idx_job_profession', 'jobs', ['profession_id'])
    op.create_index('idx_job_created', 'jobs', ['created_at'])

    op.create_table(
        'user_company_roles',
        _pk(),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('company_id', sa.BigInteger(), nullable=False),
        sa.Column('cost_center_id', sa.BigInteger(), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['cost_center_id'], ['cost_centers.id'], ondelete='SET NULL'),
    )
    op.create_index(
        'idx_ucr_user_company_active',
        'user_company_roles',
        ['user_id', 'company_id', 'is_active'],
    )
    op.create_index('idx_ucr_company', 'user_company_roles', ['company_id'])

    op.create_table(
        'role_permissions',
        _pk(),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('permission', sa.String(length=50), nullable=False),
        sa.Column('is_granted', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('role', 'permission', name='uq_role_permission'),
    )
    op.create_index(
        'idx_role_permission_role_granted', 'role_permissions', ['role', 'is_granted']
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('idx_role_permission_role_granted', table_name='role_permissions')
    op.drop_table('role_permissions')
    op.drop_index('idx_ucr_company', table_name='user_company_roles')
    op.drop_index('idx_ucr_user_company_active', table_name='user_company_roles')
    op.drop_table('user_company_roles')
    op.drop_index('idx_job_created', table_name='jobs')
    op.drop_index('idx_job_profession', table_name='jobs')
    op.drop_index('idx_job_company_status', table_name='jobs')
    op.drop_table('jobs')
    op.drop_index('ix_professions_category', table_name='professions')
    op.drop_table('professions')
    op.drop_index('idx_client_company_active', table_name='clients')
    op.drop_index('idx_client_company', table_name='clients')
    op.drop_table('clients')
    op.drop_index('idx_cost_center_company', table_name='cost_centers')
    op.drop_table('cost_centers')
    op.drop_table('companies')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
