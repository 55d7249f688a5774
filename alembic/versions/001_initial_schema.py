"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

ScoutMe Database Schema
=======================

Accounts: users
Canonical entities: clubs, player_profiles (shared across matches)
Per-match entities: matches, match_clubs, match_players
Worker output: analyses
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create enums first
    match_status_enum = postgresql.ENUM(
        'PENDING', 'PROCESSING', 'COMPLETED', 'FAILED',
        name='match_status', create_type=False
    )
    match_status_enum.create(op.get_bind(), checkfirst=True)

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('uid', sa.String(128), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('photo_url', sa.String(1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('uid'),
        sa.UniqueConstraint('email')
    )

    # =========================================================================
    # CANONICAL ENTITIES
    # =========================================================================

    op.create_table(
        'clubs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('logo_url', sa.String(1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', 'country', name='uq_club_name_country')
    )
    op.create_index('ix_clubs_country', 'clubs', ['country'])

    op.create_table(
        'player_profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('primary_position', sa.String(50), nullable=True),
        sa.Column('avatar', sa.String(1000), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'first_name', 'last_name', 'date_of_birth', 'country',
            name='uq_player_profile_identity'
        )
    )
    op.create_index('ix_player_profiles_last_name', 'player_profiles', ['last_name'])

    # =========================================================================
    # MATCHES
    # =========================================================================

    op.create_table(
        'matches',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_uid', sa.String(128), nullable=False),
        sa.Column('video_url', sa.String(1000), nullable=False),
        sa.Column('line_up_image', sa.String(1000), nullable=True),
        sa.Column('level', sa.String(50), nullable=True),
        sa.Column('status', match_status_enum, nullable=False, server_default='PENDING'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['user_uid'], ['users.uid']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_matches_user_created', 'matches', ['user_uid', 'created_at'])
    op.create_index('ix_matches_created_at', 'matches', ['created_at'])

    op.create_table(
        'match_clubs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('club_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('jersey_color', sa.String(50), nullable=True),
        sa.Column('team_type', sa.String(50), nullable=False),
        sa.Column('is_your_team', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['match_id'], ['matches.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['club_id'], ['clubs.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('match_id', 'team_type', name='uq_match_club_team_type')
    )
    op.create_index('ix_match_clubs_club', 'match_clubs', ['club_id'])

    op.create_table(
        'match_players',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_club_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player_profile_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=False, server_default=sa.text("'1900-01-01'")),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('jersey_number', sa.Integer(), nullable=False),
        sa.Column('position', sa.String(50), nullable=False),
        sa.Column('team_type', sa.String(50), nullable=False),
        sa.Column('is_your_team', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['match_id'], ['matches.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['match_club_id'], ['match_clubs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['player_profile_id'], ['player_profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_match_players_match', 'match_players', ['match_id'])
    op.create_index('ix_match_players_profile', 'match_players', ['player_profile_id'])

    # =========================================================================
    # WORKER OUTPUT
    # =========================================================================

    op.create_table(
        'analyses',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('result', postgresql.JSONB(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['match_id'], ['matches.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('match_id')
    )


def downgrade() -> None:
    op.drop_table('analyses')
    op.drop_index('ix_match_players_profile', table_name='match_players')
    op.drop_index('ix_match_players_match', table_name='match_players')
    op.drop_table('match_players')
    op.drop_index('ix_match_clubs_club', table_name='match_clubs')
    op.drop_table('match_clubs')
    op.drop_index('ix_matches_created_at', table_name='matches')
    op.drop_index('ix_matches_user_created', table_name='matches')
    op.drop_table('matches')
    op.drop_index('ix_player_profiles_last_name', table_name='player_profiles')
    op.drop_table('player_profiles')
    op.drop_index('ix_clubs_country', table_name='clubs')
    op.drop_table('clubs')
    op.drop_table('users')

    op.execute('DROP TYPE IF EXISTS match_status')
