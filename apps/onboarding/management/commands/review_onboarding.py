"""List, approve or reject onboarding applications through the API."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from apps.onboarding.client import OnboardingAPI
from apps.onboarding.constants import ApplicationStatus
from apps.onboarding.errors import OnboardingError, ValidationFailure
from apps.onboarding.wizard import ReviewBoard


class Command(BaseCommand):
    help = "Review onboarding applications as an HR user"

    def add_arguments(self, parser):
        parser.add_argument("action", choices=["list", "show", "approve", "reject"])
        parser.add_argument("application_id", nargs="?", type=int)
        parser.add_argument("--base-url", default="http://localhost:8000/")
        parser.add_argument("--username", required=True)
        parser.add_argument("--password", required=True)
        parser.add_argument(
            "--status",
            choices=ApplicationStatus.values,
            default=ApplicationStatus.PENDING,
        )
        parser.add_argument("--feedback", default="")

    def handle(self, *args, **options):
        action = options["action"]
        application_id = options["application_id"]
        if action != "list" and application_id is None:
            raise CommandError(f"'{action}' needs an application id.")

        api = OnboardingAPI(options["base_url"])
        board = ReviewBoard(api, status=options["status"])
        try:
            api.login(options["username"], options["password"])
            if action == "list":
                self._list(board.refresh())
            elif action == "show":
                self._show(board.select(application_id))
            elif action == "approve":
                record = board.approve(application_id)
                self.stdout.write(self.style.SUCCESS(f"Application {record['id']} approved."))
            else:
                record = board.reject(options["feedback"], application_id)
                self.stdout.write(self.style.WARNING(f"Application {record['id']} rejected."))
        except ValidationFailure as exc:
            for field, messages in exc.errors.items():
                self.stderr.write(f"{field}: {'; '.join(messages)}")
            raise CommandError("The request was not valid.") from exc
        except OnboardingError as exc:
            raise CommandError(str(exc)) from exc

    def _list(self, applications):
        if not applications:
            self.stdout.write("No applications.")
            return
        for application in applications:
            self.stdout.write(
                f"{application['id']:>5}  {application['firstName']} {application['lastName']}"
                f"  <{application['email']}>  {application['status']}  {application['submittedAt']}"
            )

    def _show(self, application):
        citizenship = application["citizenshipStatus"]
        self.stdout.write(f"{application['firstName']} {application['lastName']} ({application['status']})")
        self.stdout.write(f"Email: {application['email']}")
        self.stdout.write(f"Permanent resident: {citizenship['isPermanentResident']}")
        if not citizenship["isPermanentResident"]:
            self.stdout.write(
                f"Work authorization: {citizenship['workAuthorizationType']}"
                f" {citizenship['startDate']} to {citizenship['expirationDate']}"
            )
        for document in application.get("documents", []):
            self.stdout.write(f"- {document['type']}: {document['fileName']} {document['fileUrl']}")
        if application.get("rejectionFeedback"):
            self.stdout.write(f"Feedback: {application['rejectionFeedback']}")
