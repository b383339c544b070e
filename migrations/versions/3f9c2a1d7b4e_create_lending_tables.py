"""Create profiles, books and borrow_requests tables

Revision ID: 3f9c2a1d7b4e
Revises: 
Create Date: 2026-10-18 10:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a1d7b4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CATEGORIES = ('Fiction', 'Non-Fiction', 'Science', 'Technology', 'History', 'Biography', 'Other')
STATUSES = ('pending', 'accepted', 'declined')


def upgrade() -> None:
    op.create_table('profiles',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('avatar_url', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('books',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('author', sa.String(length=255), nullable=False),
        sa.Column('cover_url', sa.String(length=1000), nullable=True),
        sa.Column('category', sa.Enum(*CATEGORIES, name='book_category', native_enum=False, length=20), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_books_owner_id', 'books', ['owner_id'])
    op.create_index('idx_books_category', 'books', ['category'])
    op.create_index('idx_books_created_at', 'books', ['created_at'])

    op.create_table('borrow_requests',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('book_id', sa.String(length=36), nullable=False),
        sa.Column('requester_id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('status', sa.Enum(*STATUSES, name='borrow_request_status', native_enum=False, length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['book_id'], ['books.id']),
        sa.ForeignKeyConstraint(['requester_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('book_id', 'requester_id', name='uix_borrow_requests_book_requester')
    )
    op.create_index('idx_borrow_requests_owner_id', 'borrow_requests', ['owner_id'])
    op.create_index('idx_borrow_requests_requester_id', 'borrow_requests', ['requester_id'])
    op.create_index('idx_borrow_requests_status', 'borrow_requests', ['status'])


def downgrade() -> None:
    op.drop_index('idx_borrow_requests_status', table_name='borrow_requests')
    op.drop_index('idx_borrow_requests_requester_id', table_name='borrow_requests')
    op.drop_index('idx_borrow_requests_owner_id', table_name='borrow_requests')
    op.drop_table('borrow_requests')

    op.drop_index('idx_books_created_at', table_name='books')
    op.drop_index('idx_books_category', table_name='books')
    op.drop_index('idx_books_owner_id', table_name='books')
    op.drop_table('books')

    op.drop_table('profiles')
