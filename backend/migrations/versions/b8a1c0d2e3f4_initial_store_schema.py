"""initial store schema

Revision ID: b8a1c0d2e3f4
Revises:
Create Date: 2025-05-01 00:00:00.000000

Creates the game store schema with the published table and column names:
- Customer_address, Customer, Invoice
- Employee, Employee_pay_rate
- Game_item, Game_inventory
- Audit_log: append-only trail of Game_item mutations

No triggers or views are created here: auditing is done by the catalog
service and the report views are query functions.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b8a1c0d2e3f4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'Customer_address',
        sa.Column('Address_id', sa.Integer(), nullable=False),
        sa.Column('Street_address', sa.String(length=100), nullable=False),
        sa.Column('City', sa.String(length=168), nullable=False),
        sa.Column('State', sa.String(length=2), nullable=False),
        sa.Column('Zip_code', sa.String(length=10), nullable=False),
        sa.PrimaryKeyConstraint('Address_id'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'Employee',
        sa.Column('Employee_id', sa.Integer(), nullable=False),
        sa.Column('First_name', sa.String(length=256), nullable=False),
        sa.Column('Last_name', sa.String(length=256), nullable=False),
        sa.Column('DOB', sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint('Employee_id'),
        sqlite_autoincrement=True
    )

    # ============================================================================
    # Game_item: catalog. Unit_sold is the counter the catalog CRUD matches on.
    # ============================================================================
    op.create_table(
        'Game_item',
        sa.Column('Game_id', sa.Integer(), nullable=False),
        sa.Column('Game_name', sa.String(length=256), nullable=False),
        sa.Column('Game_platform', sa.String(length=100), nullable=False),
        sa.Column('Game_genre', sa.String(length=50), nullable=True),
        sa.Column('Release_year', sa.String(length=4), nullable=False),
        sa.Column('Unit_sold', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('Game_item_description', sa.String(length=1024), nullable=False),
        sa.CheckConstraint('"Unit_sold" >= 0', name='ck_game_item_unit_sold_non_negative'),
        sa.PrimaryKeyConstraint('Game_id'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'Customer',
        sa.Column('Customer_id', sa.Integer(), nullable=False),
        sa.Column('Customer_first_name', sa.String(length=256), nullable=False),
        sa.Column('Customer_last_name', sa.String(length=256), nullable=False),
        sa.Column('Address_id', sa.Integer(), nullable=False),
        sa.Column('Phone_number', sa.String(length=11), nullable=False),
        sa.ForeignKeyConstraint(['Address_id'], ['Customer_address.Address_id'],
                                name='fk_Customer_Customer_address'),
        sa.PrimaryKeyConstraint('Customer_id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_Customer_Address_id', 'Customer', ['Address_id'])

    op.create_table(
        'Game_inventory',
        sa.Column('Game_id', sa.Integer(), nullable=False),
        sa.Column('Unit_on_hand', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('Unit_sold', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('Price', sa.Numeric(precision=9, scale=2), nullable=False),
        sa.CheckConstraint('"Unit_on_hand" >= 0', name='ck_game_inventory_on_hand_non_negative'),
        sa.CheckConstraint('"Unit_sold" >= 0', name='ck_game_inventory_sold_non_negative'),
        sa.CheckConstraint('"Price" >= 0', name='ck_game_inventory_price_non_negative'),
        sa.ForeignKeyConstraint(['Game_id'], ['Game_item.Game_id'], ),
        sa.PrimaryKeyConstraint('Game_id')
    )

    # End_date NULL = current role
    op.create_table(
        'Employee_pay_rate',
        sa.Column('Employee_id', sa.Integer(), nullable=False),
        sa.Column('Start_date', sa.Date(), nullable=False),
        sa.Column('End_date', sa.Date(), nullable=True),
        sa.Column('Employee_wage', sa.Numeric(precision=4, scale=2), nullable=False),
        sa.Column('Employee_position', sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(['Employee_id'], ['Employee.Employee_id'],
                                name='fk_Employee_pay_rate_Employee'),
        sa.PrimaryKeyConstraint('Employee_id', 'Start_date')
    )

    op.create_table(
        'Invoice',
        sa.Column('Invoice_id', sa.Integer(), nullable=False),
        sa.Column('Customer_id', sa.Integer(), nullable=False),
        sa.Column('Item_amount', sa.Integer(), nullable=False),
        sa.Column('Subtotal', sa.Numeric(precision=9, scale=2), nullable=False),
        sa.Column('Tax', sa.Numeric(precision=9, scale=2), nullable=False),
        sa.Column('Created_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['Customer_id'], ['Customer.Customer_id'],
                                name='fk_Invoice_Customer'),
        sa.PrimaryKeyConstraint('Invoice_id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_Invoice_Customer_id', 'Invoice', ['Customer_id'])

    # ============================================================================
    # Audit_log: append-only; written only by the catalog service
    # ============================================================================
    op.create_table(
        'Audit_log',
        sa.Column('Log_id', sa.Integer(), nullable=False),
        sa.Column('Table_name', sa.String(length=50), nullable=False),
        sa.Column('Action_type', sa.String(length=10), nullable=False),
        sa.Column('Record_id', sa.Integer(), nullable=False),
        sa.Column('Changed_at', sa.DateTime(), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('Changed_by', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('Log_id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_audit_log_table_record', 'Audit_log', ['Table_name', 'Record_id'])


def downgrade():
    """Drop all tables (destructive operation)."""
    op.drop_table('Audit_log')
    op.drop_table('Invoice')
    op.drop_table('Employee_pay_rate')
    op.drop_table('Game_inventory')
    op.drop_table('Customer')
    op.drop_table('Game_item')
    op.drop_table('Employee')
    op.drop_table('Customer_address')
