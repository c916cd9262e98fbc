"""Submit an onboarding application through the API from the command line."""

from __future__ import annotations

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.onboarding.client import OnboardingAPI
from apps.onboarding.errors import OnboardingError, UploadFailure, ValidationFailure
from apps.onboarding.wizard import OnboardingSession


def _parse_document(value: str) -> tuple[str, Path]:
    document_type, separator, path = value.partition("=")
    if not separator or not document_type or not path:
        raise CommandError(f"Documents must look like TYPE=PATH, got {value!r}.")
    return document_type, Path(path)


class Command(BaseCommand):
    help = "Submit (or resubmit) an onboarding application from a JSON payload"

    def add_arguments(self, parser):
        parser.add_argument("payload", help="Path to the JSON application payload.")
        parser.add_argument("--base-url", default="http://localhost:8000/")
        parser.add_argument("--username", required=True)
        parser.add_argument("--password", required=True)
        parser.add_argument(
            "--document",
            action="append",
            default=[],
            metavar="TYPE=PATH",
            help="Stage a local file for upload, e.g. driver_license=./license.pdf",
        )

    def handle(self, *args, **options):
        try:
            payload = json.loads(Path(options["payload"]).read_text())
        except (OSError, ValueError) as exc:
            raise CommandError(f"Unable to read payload: {exc}") from exc

        api = OnboardingAPI(options["base_url"])
        session = OnboardingSession(api)
        try:
            api.login(options["username"], options["password"])
            session.load()
            for value in options["document"]:
                document_type, path = _parse_document(value)
                if not path.is_file():
                    raise CommandError(f"No such file: {path}")
                session.stage_document(document_type, path.name, path.open("rb"))
            application = session.submit(payload)
        except ValidationFailure as exc:
            for field, messages in exc.errors.items():
                self.stderr.write(f"{field}: {'; '.join(messages)}")
            raise CommandError("The application is not valid.") from exc
        except UploadFailure as exc:
            uploaded = ", ".join(document.file_name for document in exc.uploaded) or "none"
            raise CommandError(f"{exc} (already uploaded: {uploaded})") from exc
        except (OnboardingError, ValueError) as exc:
            raise CommandError(str(exc)) from exc
        finally:
            session.clear_staged()

        self.stdout.write(
            self.style.SUCCESS(
                f"Application {application['id']} submitted, status: {application['status']}"
            )
        )
