"""
Management command to provision a new tenant.

Registers the tenant in the master database, registers its connection and
migrates its database. Optionally creates the first staff administrator.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import BaseCommand, CommandError
from django.core.validators import validate_slug
from django.db import transaction

from core_identity.models import StaffUser
from tenants.connections import get_master_connection, normalize_tenant_key, register_tenant_connection
from tenants.models import Tenant


class Command(BaseCommand):
    help = 'Register a tenant, create its database connection and run migrations on it'

    def add_arguments(self, parser):
        parser.add_argument('key', type=str, help='Tenant key (also the subdomain)')
        parser.add_argument('company_name', type=str, help='Company display name')
        parser.add_argument(
            '--db-name',
            type=str,
            help='Database name (default: TENANT_DB_NAME_TEMPLATE with the key)'
        )
        parser.add_argument(
            '--db-alias',
            type=str,
            help='Connection alias (default: tenant_<key>)'
        )
        parser.add_argument(
            '--admin-email',
            type=str,
            help='Create a staff administrator with this email'
        )
        parser.add_argument(
            '--admin-password',
            type=str,
            help='Password for the staff administrator'
        )
        parser.add_argument(
            '--skip-migrate',
            action='store_true',
            help='Register the tenant without migrating its database'
        )

    def handle(self, *args, **options):
        key = normalize_tenant_key(options['key'])
        company_name = options['company_name'].strip()

        try:
            validate_slug(key)
        except ValidationError:
            raise CommandError(f"Invalid tenant key: {options['key']}")

        if not company_name:
            raise CommandError("Company name is required")

        admin_email = options.get('admin_email')
        if admin_email and not options.get('admin_password'):
            raise CommandError("--admin-password is required with --admin-email")

        master = get_master_connection()
        if Tenant.objects.using(master).filter(key=key).exists():
            raise CommandError(f"Tenant '{key}' already exists")

        db_alias = options.get('db_alias') or f"tenant_{key.replace('-', '_')}"
        db_name = options.get('db_name') or settings.TENANT_DB_NAME_TEMPLATE.format(key=key)

        self.stdout.write(f"Provisioning tenant: {key}")

        tenant = Tenant.objects.using(master).create(
            key=key,
            company_name=company_name,
            db_alias=db_alias,
            db_name=db_name,
        )
        register_tenant_connection(db_alias, db_name)

        if not options.get('skip_migrate'):
            call_command('migrate', database=db_alias, interactive=False, verbosity=options['verbosity'])

        if admin_email:
            self._create_admin(db_alias, admin_email, options['admin_password'])

        self.stdout.write(self.style.SUCCESS(f"""
Tenant provisioned successfully!

Key: {tenant.key}
Company: {tenant.company_name}
Database alias: {tenant.db_alias}
Database name: {tenant.db_name}
Administrator: {admin_email or 'N/A'}
"""))

    def _create_admin(self, db_alias, email, password):
        with transaction.atomic(using=db_alias):
            admin = StaffUser(
                email=email,
                first_name='Admin',
                role=StaffUser.Role.ADMIN,
            )
            admin.set_password(password)
            admin.save(using=db_alias)
        return admin
