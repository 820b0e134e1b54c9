"""Initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 12:00:00.000000

Users, teams, invitations, manuals with sections and blocks, sharing,
versions, notifications and uploaded files.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    'team_role': ('OWNER', 'EDITOR', 'VIEWER'),
    'invitation_status': ('PENDING', 'ACCEPTED', 'REJECTED', 'EXPIRED'),
    'block_type': ('HEADING1', 'HEADING2', 'HEADING3', 'BODY', 'IMAGE', 'VIDEO', 'TABLE', 'CODE', 'DIVIDER'),
    'access_type': ('TITLE_ONLY', 'FULL_ACCESS'),
    'notification_type': ('MANUAL_SHARED', 'PERMISSION_CHANGED', 'MEMBER_JOINED', 'INVITATION_RECEIVED'),
}


def enum(name: str) -> postgresql.ENUM:
    # Типы создаются один раз в upgrade(), team_role используется в трех таблицах
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def uuid_pk() -> sa.Column:
    return sa.Column('uuid', sa.UUID(as_uuid=True), primary_key=True)


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def fk(target: str, ondelete: Union[str, None] = 'CASCADE', nullable: bool = False, name: str = None) -> sa.Column:
    return sa.Column(name, sa.UUID(as_uuid=True), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'users',
        uuid_pk(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('profile_image', sa.String(500), nullable=True),
        sa.Column('reset_token', sa.String(128), unique=True, nullable=True),
        sa.Column('reset_token_expiry', sa.DateTime(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'teams',
        uuid_pk(),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.String(200), nullable=True),
        sa.Column('icon', sa.String(500), nullable=True),
        fk('users.uuid', ondelete=None, name='owner_id'),
        *timestamps(),
    )

    op.create_table(
        'team_members',
        uuid_pk(),
        fk('users.uuid', name='user_id'),
        fk('teams.uuid', name='team_id'),
        sa.Column('role', enum('team_role'), nullable=False),
        *timestamps(),
        sa.UniqueConstraint('user_id', name='uq_team_members_user_id'),
    )
    op.create_index('ix_team_members_team_id', 'team_members', ['team_id'])

    op.create_table(
        'invitations',
        uuid_pk(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', enum('team_role'), nullable=False),
        sa.Column('token', sa.String(128), nullable=False),
        fk('teams.uuid', name='team_id'),
        fk('users.uuid', name='sender_id'),
        fk('users.uuid', ondelete='SET NULL', nullable=True, name='receiver_id'),
        sa.Column('status', enum('invitation_status'), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        *timestamps(),
    )
    op.create_index('ix_invitations_email', 'invitations', ['email'])
    op.create_index('ix_invitations_token', 'invitations', ['token'], unique=True)

    op.create_table(
        'manuals',
        uuid_pk(),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        fk('users.uuid', name='owner_id'),
        fk('teams.uuid', name='team_id'),
        *timestamps(),
    )
    op.create_index('ix_manuals_owner_id', 'manuals', ['owner_id'])
    op.create_index('ix_manuals_team_id', 'manuals', ['team_id'])

    op.create_table(
        'manual_sections',
        uuid_pk(),
        fk('manuals.uuid', name='manual_id'),
        fk('manual_sections.uuid', nullable=True, name='parent_id'),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('depth', sa.Integer(), nullable=False, server_default='1'),
        *timestamps(),
    )
    op.create_index('ix_manual_sections_manual_id', 'manual_sections', ['manual_id'])
    op.create_index('ix_manual_sections_parent_id', 'manual_sections', ['parent_id'])

    op.create_table(
        'content_blocks',
        uuid_pk(),
        fk('manual_sections.uuid', name='section_id'),
        sa.Column('type', enum('block_type'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        *timestamps(),
    )
    op.create_index('ix_content_blocks_section_id', 'content_blocks', ['section_id'])

    op.create_table(
        'manual_shares',
        uuid_pk(),
        fk('manuals.uuid', name='manual_id'),
        fk('users.uuid', name='user_id'),
        sa.Column('permission', enum('team_role'), nullable=False),
        sa.Column('shared_at', sa.DateTime(), nullable=False),
        *timestamps(),
        sa.UniqueConstraint('manual_id', 'user_id', name='uq_manual_share_user'),
    )
    op.create_index('ix_manual_shares_manual_id', 'manual_shares', ['manual_id'])
    op.create_index('ix_manual_shares_user_id', 'manual_shares', ['user_id'])

    op.create_table(
        'external_share_links',
        uuid_pk(),
        fk('manuals.uuid', name='manual_id'),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('access_type', enum('access_type'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_external_share_links_manual_id', 'external_share_links', ['manual_id'])
    op.create_index('ix_external_share_links_token', 'external_share_links', ['token'], unique=True)

    op.create_table(
        'manual_versions',
        uuid_pk(),
        fk('manuals.uuid', name='manual_id'),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('summary', sa.String(500), nullable=True),
        fk('users.uuid', name='created_by'),
        *timestamps(),
    )
    op.create_index('ix_manual_versions_manual_id', 'manual_versions', ['manual_id'])

    op.create_table(
        'notifications',
        uuid_pk(),
        sa.Column('type', enum('notification_type'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        fk('users.uuid', name='user_id'),
        sa.Column('related_id', sa.String(64), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamps(),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    op.create_table(
        'files',
        uuid_pk(),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('stored_filename', sa.String(255), unique=True, nullable=False),
        sa.Column('mime_type', sa.String(100), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('path', sa.String(500), nullable=False),
        fk('users.uuid', name='uploaded_by'),
        fk('manuals.uuid', ondelete='SET NULL', nullable=True, name='manual_id'),
        *timestamps(),
    )


def downgrade() -> None:
    for table in (
        'files', 'notifications', 'manual_versions', 'external_share_links', 'manual_shares',
        'content_blocks', 'manual_sections', 'manuals', 'invitations', 'team_members', 'teams', 'users',
    ):
        op.drop_table(table)
    for name in reversed(list(ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name};")
