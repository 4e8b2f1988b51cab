"""initial schema: user, chat, chat_message, contest_submission

Revision ID: 3f9a1c2d7e10
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9a1c2d7e10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    from sqlalchemy import inspect
    existing_tables = inspect(op.get_bind()).get_table_names()

    # db.create_all may already have built the tables
    if 'user' not in existing_tables:
        op.create_table('user',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('username', sa.String(length=80), nullable=False),
            sa.Column('email', sa.String(length=120), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=True),
            sa.Column('google_id', sa.String(length=100), nullable=True),
            sa.Column('avatar', sa.String(length=500), nullable=True),
            sa.Column('is_google_auth', sa.Boolean(), nullable=False),
            sa.Column('contest_level', sa.String(length=20), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        with op.batch_alter_table('user', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_user_username'), ['username'], unique=True)
            batch_op.create_index(batch_op.f('ix_user_email'), ['email'], unique=True)
            batch_op.create_index(batch_op.f('ix_user_google_id'), ['google_id'], unique=True)

    if 'chat' not in existing_tables:
        op.create_table('chat',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(length=200), nullable=False),
            sa.Column('last_updated', sa.DateTime(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
            sa.PrimaryKeyConstraint('id'),
        )
        with op.batch_alter_table('chat', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_chat_user_id'), ['user_id'], unique=False)
            batch_op.create_index(batch_op.f('ix_chat_last_updated'), ['last_updated'], unique=False)

    if 'chat_message' not in existing_tables:
        op.create_table('chat_message',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('chat_id', sa.Integer(), nullable=False),
            sa.Column('role', sa.String(length=20), nullable=False),
            sa.Column('content', sa.Text(), nullable=False),
            sa.Column('timestamp', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['chat_id'], ['chat.id'], ),
            sa.PrimaryKeyConstraint('id'),
        )
        with op.batch_alter_table('chat_message', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_chat_message_chat_id'), ['chat_id'], unique=False)

    if 'contest_submission' not in existing_tables:
        op.create_table('contest_submission',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('problem_title', sa.String(length=300), nullable=False),
            sa.Column('problem_description', sa.Text(), nullable=True),
            sa.Column('difficulty', sa.String(length=20), nullable=True),
            sa.Column('topic', sa.String(length=100), nullable=True),
            sa.Column('language', sa.String(length=20), nullable=True),
            sa.Column('code', sa.Text(), nullable=True),
            sa.Column('solved', sa.Boolean(), nullable=False),
            sa.Column('attempts', sa.Integer(), nullable=False),
            sa.Column('last_attempted_at', sa.DateTime(), nullable=False),
            sa.Column('solved_at', sa.DateTime(), nullable=True),
            sa.Column('test_cases_json', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'problem_title', name='uq_contest_submission_user_title'),
        )
        with op.batch_alter_table('contest_submission', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_contest_submission_user_id'), ['user_id'], unique=False)
            batch_op.create_index(batch_op.f('ix_contest_submission_difficulty'), ['difficulty'], unique=False)


def downgrade():
    op.drop_table('contest_submission')
    op.drop_table('chat_message')
    op.drop_table('chat')
    op.drop_table('user')
