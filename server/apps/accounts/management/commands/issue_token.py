"""Management command to issue an API bearer token for a user."""

from typing import Any

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from server.apps.accounts.logic.token_operations import issue_token


class Command(BaseCommand):
    """Print a bearer token for the given username."""

    help = 'Issue an API bearer token for a user'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument('username')
        parser.add_argument(
            '--lifetime',
            type=int,
            default=None,
            help='Token lifetime in seconds (default: from settings)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the user does not exist or is inactive.
        """
        username = options['username']
        user = get_user_model().objects.filter(username=username).first()
        if user is None:
            raise CommandError(f'User not found: {username}')
        if not user.is_active:
            raise CommandError(f'User is inactive: {username}')

        self.stdout.write(issue_token(user, options['lifetime']))
