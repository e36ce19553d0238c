"""Create translations, scanned_strings and languages tables

Revision ID: create_translation_tables
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_translation_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'translations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('object_id', sa.String(64), nullable=False),
        sa.Column('object_type', sa.String(50), nullable=False),
        sa.Column('field_name', sa.String(100), nullable=False),
        sa.Column('language_code', sa.String(10), nullable=False),
        sa.Column('original_content', sa.Text(), nullable=True),
        sa.Column('original_hash', sa.String(32), nullable=True),
        sa.Column('translated_content', sa.Text(), nullable=True),
        sa.Column('is_auto_translated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('object_id', 'object_type', 'field_name', 'language_code',
                            name='unique_translation')
    )
    op.create_index('ix_translations_language_code', 'translations', ['language_code'])
    op.create_index('ix_translations_original_hash', 'translations', ['original_hash'])
    op.create_index('idx_translation_object', 'translations', ['object_id', 'object_type', 'language_code'])

    op.create_table(
        'scanned_strings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('object_id', sa.String(64), nullable=False),
        sa.Column('string_text', sa.Text(), nullable=False),
        sa.Column('domain', sa.String(100), nullable=False, server_default='default'),
        sa.Column('context', sa.String(255), nullable=True),
        sa.Column('page_url', sa.String(500), nullable=True),
        sa.Column('first_seen', sa.DateTime(), nullable=False),
        sa.Column('last_seen', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('object_id')
    )
    op.create_index('ix_scanned_strings_domain', 'scanned_strings', ['domain'])
    op.create_index('ix_scanned_strings_last_seen', 'scanned_strings', ['last_seen'])

    op.create_table(
        'languages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('native_name', sa.String(100), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )


def downgrade():
    op.drop_table('languages')
    op.drop_index('ix_scanned_strings_last_seen', table_name='scanned_strings')
    op.drop_index('ix_scanned_strings_domain', table_name='scanned_strings')
    op.drop_table('scanned_strings')
    op.drop_index('idx_translation_object', table_name='translations')
    op.drop_index('ix_translations_original_hash', table_name='translations')
    op.drop_index('ix_translations_language_code', table_name='translations')
    op.drop_table('translations')
