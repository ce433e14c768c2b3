# freight_core/common/management/commands/ensure_roles.py

from django.core.management.base import BaseCommand

from freight_core.iam.services import ensure_default_roles


class Command(BaseCommand):
    help = "Ensure the default roles (Admin, Customer, Supplier, CHA, Back Office) exist (idempotent)."

    def handle(self, *args, **options):
        roles = ensure_default_roles()
        names = ", ".join(role.name for role in roles.values())
        self.stdout.write(self.style.SUCCESS(f"Roles ensured: {names}"))
