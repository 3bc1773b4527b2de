"""create users, subjects, tutoring requests and chat tables

Revision ID: peerlearn_001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'peerlearn_001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def _base_indexes(table: str):
    op.create_index(op.f(f'ix_{table}_id'), table, ['id'])
    op.create_index(op.f(f'ix_{table}_created_at'), table, ['created_at'])
    op.create_index(op.f(f'ix_{table}_is_deleted'), table, ['is_deleted'])


def _drop_base_indexes(table: str):
    op.drop_index(op.f(f'ix_{table}_is_deleted'), table_name=table)
    op.drop_index(op.f(f'ix_{table}_created_at'), table_name=table)
    op.drop_index(op.f(f'ix_{table}_id'), table_name=table)


def upgrade() -> None:
    op.create_table('users',
        *_base_columns(),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('users')
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_full_name'), 'users', ['full_name'])

    op.create_table('subjects',
        *_base_columns(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('subjects')
    op.create_index(op.f('ix_subjects_name'), 'subjects', ['name'], unique=True)

    tutoring_status = sa.Enum('pending', 'accepted', 'rejected', name='tutoring_request_status')
    op.create_table('tutoring_requests',
        *_base_columns(),
        sa.Column('from_user_id', sa.Uuid(), nullable=False),
        sa.Column('to_user_id', sa.Uuid(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False, server_default=''),
        sa.Column('status', tutoring_status, nullable=False, server_default='pending'),
        sa.ForeignKeyConstraint(['from_user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['to_user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id']),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('tutoring_requests')
    op.create_index(op.f('ix_tutoring_requests_from_user_id'), 'tutoring_requests', ['from_user_id'])
    op.create_index(op.f('ix_tutoring_requests_to_user_id'), 'tutoring_requests', ['to_user_id'])
    op.create_index(op.f('ix_tutoring_requests_subject_id'), 'tutoring_requests', ['subject_id'])
    op.create_index('idx_tutoring_request_from_time', 'tutoring_requests', ['from_user_id', 'created_at'])
    op.create_index('idx_tutoring_request_to_time', 'tutoring_requests', ['to_user_id', 'created_at'])

    op.create_table('chat_rooms',
        *_base_columns(),
        sa.Column('tutoring_request_id', sa.Uuid(), nullable=True),
        sa.Column('course_id', sa.Uuid(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_activity', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['tutoring_request_id'], ['tutoring_requests.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tutoring_request_id')
    )
    _base_indexes('chat_rooms')
    op.create_index(op.f('ix_chat_rooms_course_id'), 'chat_rooms', ['course_id'])
    op.create_index('idx_chat_room_active_activity', 'chat_rooms', ['is_active', 'last_activity'])

    op.create_table('chat_room_participants',
        *_base_columns(),
        sa.Column('chat_room_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['chat_room_id'], ['chat_rooms.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('chat_room_id', 'user_id', name='uq_chat_room_participant')
    )
    _base_indexes('chat_room_participants')
    op.create_index(op.f('ix_chat_room_participants_chat_room_id'), 'chat_room_participants', ['chat_room_id'])
    op.create_index(op.f('ix_chat_room_participants_user_id'), 'chat_room_participants', ['user_id'])

    message_type = sa.Enum('text', 'file', 'system', name='chat_message_type')
    op.create_table('chat_messages',
        *_base_columns(),
        sa.Column('chat_room_id', sa.Uuid(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('message_type', message_type, nullable=False, server_default='text'),
        sa.ForeignKeyConstraint(['chat_room_id'], ['chat_rooms.id']),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    _base_indexes('chat_messages')
    op.create_index(op.f('ix_chat_messages_chat_room_id'), 'chat_messages', ['chat_room_id'])
    op.create_index(op.f('ix_chat_messages_sender_id'), 'chat_messages', ['sender_id'])
    op.create_index('idx_chat_message_room_time', 'chat_messages', ['chat_room_id', 'created_at'])

    op.create_table('message_read_receipts',
        *_base_columns(),
        sa.Column('message_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('read_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['message_id'], ['chat_messages.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('message_id', 'user_id', name='uq_message_read_receipt')
    )
    _base_indexes('message_read_receipts')
    op.create_index(op.f('ix_message_read_receipts_message_id'), 'message_read_receipts', ['message_id'])
    op.create_index(op.f('ix_message_read_receipts_user_id'), 'message_read_receipts', ['user_id'])


def downgrade() -> None:
    op.drop_index(op.f('ix_message_read_receipts_user_id'), table_name='message_read_receipts')
    op.drop_index(op.f('ix_message_read_receipts_message_id'), table_name='message_read_receipts')
    _drop_base_indexes('message_read_receipts')
    op.drop_table('message_read_receipts')

    op.drop_index('idx_chat_message_room_time', table_name='chat_messages')
    op.drop_index(op.f('ix_chat_messages_sender_id'), table_name='chat_messages')
    op.drop_index(op.f('ix_chat_messages_chat_room_id'), table_name='chat_messages')
    _drop_base_indexes('chat_messages')
    op.drop_table('chat_messages')

    op.drop_index(op.f('ix_chat_room_participants_user_id'), table_name='chat_room_participants')
    op.drop_index(op.f('ix_chat_room_participants_chat_room_id'), table_name='chat_room_participants')
    _drop_base_indexes('chat_room_participants')
    op.drop_table('chat_room_participants')

    op.drop_index('idx_chat_room_active_activity', table_name='chat_rooms')
    op.drop_index(op.f('ix_chat_rooms_course_id'), table_name='chat_rooms')
    _drop_base_indexes('chat_rooms')
    op.drop_table('chat_rooms')

    op.drop_index('idx_tutoring_request_to_time', table_name='tutoring_requests')
    op.drop_index('idx_tutoring_request_from_time', table_name='tutoring_requests')
    op.drop_index(op.f('ix_tutoring_requests_subject_id'), table_name='tutoring_requests')
    op.drop_index(op.f('ix_tutoring_requests_to_user_id'), table_name='tutoring_requests')
    op.drop_index(op.f('ix_tutoring_requests_from_user_id'), table_name='tutoring_requests')
    _drop_base_indexes('tutoring_requests')
    op.drop_table('tutoring_requests')

    op.drop_index(op.f('ix_subjects_name'), table_name='subjects')
    _drop_base_indexes('subjects')
    op.drop_table('subjects')

    op.drop_index(op.f('ix_users_full_name'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    _drop_base_indexes('users')
    op.drop_table('users')

    sa.Enum(name='chat_message_type').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='tutoring_request_status').drop(op.get_bind(), checkfirst=True)
