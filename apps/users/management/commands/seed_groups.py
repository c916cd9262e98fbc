from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from apps.users.constants import UserRole, groups_for_roles


GROUPS = sorted(groups_for_roles(UserRole))


class Command(BaseCommand):
    help = 'Create the default employee and HR user groups'

    def handle(self, *args, **kwargs):
        for group_name in GROUPS:
            _, created = Group.objects.get_or_create(name=group_name)
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created group: {group_name}"))
            else:
                self.stdout.write(self.style.WARNING(f"Group already exists: {group_name}"))

        self.stdout.write(self.style.SUCCESS("All groups processed."))
