"""Create sites, site_hosts, accounts, memberships and system_log tables

Revision ID: 3f1a9c2d7e44
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7e44'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create the site admin schema."""
    op.create_table(
        'sites',
        sa.Column('id', UUID(as_uuid=True), nullable=False),

        # Identity and routing
        sa.Column('alias_id', sa.String(length=36), nullable=False),
        sa.Column('site_name', sa.String(length=255), nullable=False),
        sa.Column('folder_name', sa.String(length=50), nullable=True),
        sa.Column('preferred_host_name', sa.String(length=250), nullable=True),
        sa.Column('is_server_admin_site', sa.Boolean(), nullable=False, server_default='false'),

        # Basic settings
        sa.Column('time_zone_id', sa.String(length=50), nullable=False, server_default='UTC'),
        sa.Column('theme', sa.String(length=100), nullable=True),
        sa.Column('forced_culture', sa.String(length=10), nullable=True),
        sa.Column('forced_ui_culture', sa.String(length=10), nullable=True),
        sa.Column('site_is_closed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('site_is_closed_message', sa.Text(), nullable=True),
        sa.Column('google_analytics_profile_id', sa.String(length=25), nullable=True),
        sa.Column('add_this_profile_id', sa.String(length=50), nullable=True),

        # Company info
        sa.Column('company_name', sa.String(length=250), nullable=True),
        sa.Column('company_street_address', sa.String(length=250), nullable=True),
        sa.Column('company_street_address2', sa.String(length=250), nullable=True),
        sa.Column('company_locality', sa.String(length=200), nullable=True),
        sa.Column('company_region', sa.String(length=200), nullable=True),
        sa.Column('company_postal_code', sa.String(length=20), nullable=True),
        sa.Column('company_country', sa.String(length=10), nullable=True),
        sa.Column('company_phone', sa.String(length=20), nullable=True),
        sa.Column('company_fax', sa.String(length=20), nullable=True),
        sa.Column('company_public_email', sa.String(length=100), nullable=True),
        sa.Column('company_website', sa.String(length=255), nullable=True),

        # Mail
        sa.Column('default_email_from_address', sa.String(length=100), nullable=True),
        sa.Column('default_email_from_alias', sa.String(length=100), nullable=True),
        sa.Column('smtp_server', sa.String(length=200), nullable=True),
        sa.Column('smtp_port', sa.Integer(), nullable=False, server_default='25'),
        sa.Column('smtp_user', sa.String(length=500), nullable=True),
        sa.Column('smtp_password', sa.String(length=500), nullable=True),
        sa.Column('smtp_preferred_encoding', sa.String(length=20), nullable=True),
        sa.Column('smtp_requires_auth', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('smtp_use_ssl', sa.Boolean(), nullable=False, server_default='false'),

        # SMS
        sa.Column('sms_from', sa.String(length=100), nullable=True),
        sa.Column('sms_client_id', sa.String(length=255), nullable=True),
        sa.Column('sms_secure_token', sa.String(length=500), nullable=True),

        # Security
        sa.Column('allow_new_registration', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('allow_persistent_login', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('disable_db_auth', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('really_delete_users', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('require_approval_before_login', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('require_confirmed_email', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('require_confirmed_phone', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('use_email_for_login', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('account_approval_email_csv', sa.Text(), nullable=True),

        # Captcha
        sa.Column('recaptcha_public_key', sa.String(length=255), nullable=True),
        sa.Column('recaptcha_private_key', sa.String(length=255), nullable=True),
        sa.Column('use_invisible_recaptcha', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('captcha_on_login', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('captcha_on_registration', sa.Boolean(), nullable=False, server_default='false'),

        # Social logins
        sa.Column('facebook_app_id', sa.String(length=100), nullable=True),
        sa.Column('facebook_app_secret', sa.String(length=500), nullable=True),
        sa.Column('google_client_id', sa.String(length=100), nullable=True),
        sa.Column('google_client_secret', sa.String(length=500), nullable=True),
        sa.Column('microsoft_client_id', sa.String(length=100), nullable=True),
        sa.Column('microsoft_client_secret', sa.String(length=500), nullable=True),
        sa.Column('twitter_consumer_key', sa.String(length=100), nullable=True),
        sa.Column('twitter_consumer_secret', sa.String(length=500), nullable=True),
        sa.Column('oid_connect_display_name', sa.String(length=150), nullable=True),
        sa.Column('oid_connect_app_id', sa.String(length=255), nullable=True),
        sa.Column('oid_connect_app_secret', sa.String(length=500), nullable=True),
        sa.Column('oid_connect_authority', sa.String(length=255), nullable=True),

        # Login and registration page content
        sa.Column('login_info_top', sa.Text(), nullable=True),
        sa.Column('login_info_bottom', sa.Text(), nullable=True),
        sa.Column('registration_preamble', sa.Text(), nullable=True),
        sa.Column('registration_agreement', sa.Text(), nullable=True),
        sa.Column('terms_updated_utc', sa.DateTime(), nullable=True),

        *_timestamps(),

        sa.PrimaryKeyConstraint('id', name='pk_sites'),
        sa.UniqueConstraint('alias_id', name='uq_sites_alias_id'),
        sa.UniqueConstraint('folder_name', name='uq_sites_folder_name'),
    )

    op.create_table(
        'site_hosts',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('site_id', UUID(as_uuid=True), nullable=False),
        sa.Column('host_name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_site_hosts'),
        sa.ForeignKeyConstraint(['site_id'], ['sites.id'], name='fk_site_hosts_site_id_sites', ondelete='CASCADE'),
        sa.UniqueConstraint('host_name', name='uq_site_hosts_host_name'),
    )
    op.create_index('ix_site_hosts_site_id', 'site_hosts', ['site_id'])

    op.create_table(
        'accounts',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('login_name', sa.String(length=50), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('role', sa.Enum('admin', 'member', name='accountrole'), nullable=False, server_default='member'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_accounts'),
        sa.UniqueConstraint('email', name='uq_accounts_email'),
    )

    op.create_table(
        'memberships',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('account_id', UUID(as_uuid=True), nullable=False),
        sa.Column('site_id', UUID(as_uuid=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_memberships'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], name='fk_memberships_account_id_accounts', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['site_id'], ['sites.id'], name='fk_memberships_site_id_sites', ondelete='CASCADE'),
        sa.UniqueConstraint('account_id', 'site_id', name='uix_account_site'),
    )

    op.create_table(
        'system_log',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('log_date_utc', sa.DateTime(), nullable=False),
        sa.Column('ip_address', sa.String(length=50), nullable=True),
        sa.Column('culture', sa.String(length=10), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('short_url', sa.String(length=255), nullable=True),
        sa.Column('thread', sa.String(length=255), nullable=True),
        sa.Column('log_level', sa.String(length=20), nullable=False),
        sa.Column('logger', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_system_log'),
    )
    op.create_index('ix_system_log_log_date_utc', 'system_log', ['log_date_utc'])


def downgrade() -> None:
    """Drop the site admin schema."""
    op.drop_index('ix_system_log_log_date_utc', table_name='system_log')
    op.drop_table('system_log')
    op.drop_table('memberships')
    op.drop_table('accounts')
    op.drop_index('ix_site_hosts_site_id', table_name='site_hosts')
    op.drop_table('site_hosts')
    op.drop_table('sites')
    sa.Enum(name='accountrole').drop(op.get_bind(), checkfirst=True)
