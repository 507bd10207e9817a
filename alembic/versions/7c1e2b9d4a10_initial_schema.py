"""initial schema: users, listings, saved listings, reviews, support chat

Revision ID: 7c1e2b9d4a10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c1e2b9d4a10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'User',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('bio', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='USER'),
        sa.Column('ownerVerified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('credits', sa.Float(), nullable=True, server_default='0'),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updatedAt', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_User_email', 'User', ['email'], unique=True)
    op.create_index('ix_User_role', 'User', ['role'])
    op.create_index('ix_User_createdAt', 'User', ['createdAt'])
    op.create_index('idx_user_role_created', 'User', ['role', 'createdAt'])

    op.create_table(
        'Listing',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(), nullable=False, server_default='UAH'),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('area', sa.Float(), nullable=True),
        sa.Column('rooms', sa.Integer(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),
        sa.Column('amenities', sa.JSON(), nullable=True),
        sa.Column('availableFrom', sa.DateTime(timezone=True), nullable=True),
        sa.Column('availableTo', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='PENDING_REVIEW'),
        sa.Column('ownerId', sa.String(), sa.ForeignKey('User.id', ondelete='CASCADE'), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updatedAt', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_Listing_type', 'Listing', ['type'])
    op.create_index('ix_Listing_category', 'Listing', ['category'])
    op.create_index('ix_Listing_price', 'Listing', ['price'])
    op.create_index('ix_Listing_status', 'Listing', ['status'])
    op.create_index('ix_Listing_ownerId', 'Listing', ['ownerId'])
    op.create_index('ix_Listing_createdAt', 'Listing', ['createdAt'])
    op.create_index('idx_listing_status_created', 'Listing', ['status', 'createdAt'])
    op.create_index('idx_listing_status_price', 'Listing', ['status', 'price'])

    op.create_table(
        'SavedListing',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('userId', sa.String(), sa.ForeignKey('User.id', ondelete='CASCADE'), nullable=False),
        sa.Column('listingId', sa.String(), sa.ForeignKey('Listing.id', ondelete='CASCADE'), nullable=False),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('userId', 'listingId', name='uq_saved_user_listing'),
    )
    op.create_index('ix_SavedListing_userId', 'SavedListing', ['userId'])
    op.create_index('ix_SavedListing_listingId', 'SavedListing', ['listingId'])

    op.create_table(
        'Review',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('userId', sa.String(), sa.ForeignKey('User.id', ondelete='CASCADE'), nullable=False),
        sa.Column('listingId', sa.String(), sa.ForeignKey('Listing.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updatedAt', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('userId', 'listingId', name='uq_review_user_listing'),
    )
    op.create_index('ix_Review_userId', 'Review', ['userId'])
    op.create_index('ix_Review_listingId', 'Review', ['listingId'])

    op.create_table(
        'conversations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('User.id', ondelete='CASCADE'), nullable=False),
        sa.Column('admin_id', sa.String(), sa.ForeignKey('User.id', ondelete='SET NULL'), nullable=True),
        sa.Column('subject', sa.Text(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='open'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('last_message_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_conversations_user_id', 'conversations', ['user_id'])
    op.create_index('ix_conversations_admin_id', 'conversations', ['admin_id'])
    op.create_index('ix_conversations_status', 'conversations', ['status'])
    op.create_index('ix_conversations_last_message_at', 'conversations', ['last_message_at'])
    op.create_index('idx_conversations_status_last', 'conversations', ['status', 'last_message_at'])

    op.create_table(
        'messages',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('conversation_id', sa.String(), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.String(), sa.ForeignKey('User.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_messages_conversation_id', 'messages', ['conversation_id'])
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])
    op.create_index('idx_messages_conversation_read', 'messages', ['conversation_id', 'read'])


def downgrade() -> None:
    op.drop_table('messages')
    op.drop_table('conversations')
    op.drop_table('Review')
    op.drop_table('SavedListing')
    op.drop_table('Listing')
    op.drop_table('User')
