"""initial schema

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the CloudBook schema from scratch:
- admin: tenant root accounts (with OTP state)
- employees, customers, products, invoices: tenant-owned records
- currencies, generals, terms, permissions: one settings row per tenant
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def _tenant_fk():
    return sa.ForeignKeyConstraint(['user_id'], ['admin.id'], ondelete='CASCADE')


def upgrade():
    # ============================================================================
    # admin: tenant root
    # ============================================================================
    op.create_table(
        'admin',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('last_name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('contact', sa.String(length=64), nullable=False),
        sa.Column('company', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('role', sa.String(length=64), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=512), nullable=True),
        sa.Column('logo', sa.String(length=512), nullable=True),
        sa.Column('otp', sa.String(length=64), nullable=True),
        sa.Column('otp_expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_admin_email', 'admin', ['email'], unique=True)

    # ============================================================================
    # employees: staff logins, email unique per tenant
    # ============================================================================
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('contact', sa.String(length=64), nullable=False),
        sa.Column('department', sa.String(length=128), nullable=False),
        sa.Column('role', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'email', name='uq_employees_user_email'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_employees_user_id', 'employees', ['user_id'])
    op.create_index('ix_employees_email', 'employees', ['email'])

    # ============================================================================
    # customers
    # ============================================================================
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('delivery', sa.Text(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('contact', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=True),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_customers_user_id', 'customers', ['user_id'])

    # ============================================================================
    # products: one row per stock unit, product_id shared by the units
    # ============================================================================
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('category', sa.String(length=128), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('unit', sa.String(length=32), nullable=False),
        sa.Column('attribute', sa.JSON(), nullable=True),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_products_user_id', 'products', ['user_id'])
    op.create_index('ix_products_product_id', 'products', ['product_id'])
    op.create_index('ix_products_user_product', 'products', ['user_id', 'product_id'])

    # ============================================================================
    # invoices: customer and items are JSON snapshots
    # ============================================================================
    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('invoice_id', sa.String(length=64), nullable=False),
        sa.Column('customer', sa.JSON(), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('invoice_date', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('subtotal', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('tax', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('discount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('total', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('paid_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('due_amount', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('pay_type', sa.String(length=32), nullable=True),
        sa.Column('sub_invoice', sa.JSON(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_invoices_user_id', 'invoices', ['user_id'])

    # ============================================================================
    # Settings: one row per tenant
    # ============================================================================
    op.create_table(
        'currencies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('currency', sa.JSON(), nullable=False),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_currencies_user'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_currencies_user_id', 'currencies', ['user_id'])

    op.create_table(
        'generals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('department', sa.JSON(), nullable=False),
        sa.Column('role', sa.JSON(), nullable=False),
        sa.Column('category', sa.JSON(), nullable=False),
        sa.Column('size', sa.JSON(), nullable=True),
        sa.Column('color', sa.JSON(), nullable=True),
        sa.Column('material', sa.JSON(), nullable=True),
        sa.Column('weight', sa.JSON(), nullable=True),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_generals_user'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_generals_user_id', 'generals', ['user_id'])

    op.create_table(
        'terms',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('terms', sa.JSON(), nullable=False),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_terms_user'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_terms_user_id', 'terms', ['user_id'])

    op.create_table(
        'permissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=False),
        _tenant_fk(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', name='uq_permissions_user'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_permissions_user_id', 'permissions', ['user_id'])


def downgrade():
    for table in ('permissions', 'terms', 'generals', 'currencies', 'invoices', 'products', 'customers', 'employees'):
        op.drop_index(f'ix_{table}_user_id', table_name=table)
    op.drop_index('ix_products_product_id', table_name='products')
    op.drop_index('ix_products_user_product', table_name='products')
    op.drop_index('ix_employees_email', table_name='employees')
    op.drop_index('ix_admin_email', table_name='admin')

    for table in ('permissions', 'terms', 'generals', 'currencies', 'invoices', 'products', 'customers', 'employees', 'admin'):
        op.drop_table(table)
