import json
from datetime import datetime, timezone as dt_timezone
from io import BytesIO

import pytest
import requests
from requests.adapters import BaseAdapter

from apps.onboarding.client import OnboardingAPI
from apps.onboarding.documents import DocumentReference
from apps.onboarding.errors import (
    InvalidStateTransition,
    NetworkFailure,
    SubmissionInProgress,
    UploadFailure,
    ValidationFailure,
)
from apps.onboarding.lifecycle import ApplicationState
from apps.onboarding.wizard import OnboardingSession, ReviewBoard
from tests.utils import PDF_BYTES, application_payload, document_payload, visa_status

pytestmark = pytest.mark.django_db


def _uploaded(document_type, name):
    return DocumentReference(
        document_type=document_type,
        file_name=name,
        file_url=f"https://files.example.com/uploaded/{name}",
        upload_date=datetime(2024, 2, 1, tzinfo=dt_timezone.utc),
    )


@pytest.fixture
def api(mocker):
    return mocker.Mock(spec=OnboardingAPI)


@pytest.fixture
def session(api):
    return OnboardingSession(api)


def test_load_tracks_never_submitted(session, api):
    api.fetch_application.return_value = None

    assert session.load() is None
    assert session.status == ApplicationState.NEVER_SUBMITTED


def test_invalid_values_never_touch_the_network(session, api):
    session.stage_document("driver_license", "license.pdf", BytesIO(PDF_BYTES))

    with pytest.raises(ValidationFailure) as excinfo:
        session.submit(application_payload(email="nope", documents=[]))

    assert "email" in excinfo.value.errors
    api.upload_file.assert_not_called()
    api.submit_application.assert_not_called()
    assert session.in_flight is False


def test_staged_files_are_uploaded_in_order_and_merged(session, api):
    license_file = BytesIO(PDF_BYTES)
    permit_file = BytesIO(PDF_BYTES)
    session.stage_document("driver_license", "license.pdf", license_file)
    session.stage_document("work_authorization", "permit.pdf", permit_file)
    api.upload_file.side_effect = [
        _uploaded("driver_license", "license.pdf"),
        _uploaded("work_authorization", "permit.pdf"),
    ]
    api.submit_application.return_value = {"id": 4, "status": "pending", "documents": []}

    result = session.submit(
        application_payload(citizenshipStatus=visa_status("H4"), documents=[document_payload("other", "cv.pdf")])
    )

    assert result["status"] == "pending"
    assert [call.args[1] for call in api.upload_file.call_args_list] == ["license.pdf", "permit.pdf"]
    posted = api.submit_application.call_args.args[0]
    assert [document["fileName"] for document in posted["documents"]] == [
        "license.pdf",
        "permit.pdf",
        "cv.pdf",
    ]
    assert session.staged == {}
    assert license_file.closed and permit_file.closed
    assert session.status == ApplicationState.PENDING


def test_persisted_documents_are_kept_on_resubmit(session, api):
    persisted = document_payload(name="old-license.pdf")
    session.application = {"id": 4, "status": "rejected", "documents": [persisted]}
    api.submit_application.return_value = {"id": 4, "status": "pending"}

    session.submit(application_payload(documents=[]))

    posted = api.submit_application.call_args.args[0]
    assert [document["fileUrl"] for document in posted["documents"]] == [persisted["fileUrl"]]


def test_upload_failure_reports_already_uploaded_files(session, api):
    session.stage_document("driver_license", "license.pdf", BytesIO(PDF_BYTES))
    session.stage_document("other", "cv.pdf", BytesIO(PDF_BYTES))
    first = _uploaded("driver_license", "license.pdf")
    api.upload_file.side_effect = [first, NetworkFailure("timed out")]

    with pytest.raises(UploadFailure) as excinfo:
        session.submit(application_payload(documents=[]))

    assert excinfo.value.file_name == "cv.pdf"
    assert excinfo.value.uploaded == [first]
    api.submit_application.assert_not_called()
    assert set(session.staged) == {"driver_license", "other"}


def test_second_submit_while_in_flight_is_refused(session, api):
    session.in_flight = True

    with pytest.raises(SubmissionInProgress):
        session.submit(application_payload())

    api.submit_application.assert_not_called()


def test_approved_application_cannot_be_resubmitted(session, api):
    session.application = {"id": 1, "status": "approved"}

    with pytest.raises(InvalidStateTransition):
        session.submit(application_payload())

    api.submit_application.assert_not_called()


def test_restaging_a_type_releases_the_previous_file(session):
    first = BytesIO(PDF_BYTES)
    second = BytesIO(PDF_BYTES)

    session.stage_document("driver_license", "a.pdf", first)
    session.stage_document("driver_license", "b.pdf", second)

    assert first.closed
    assert not second.closed
    assert session.staged["driver_license"].file_name == "b.pdf"


def test_rejection_feedback_only_shown_while_rejected(session):
    session.application = {"status": "rejected", "rejectionFeedback": "Missing signature"}
    assert session.rejection_feedback == "Missing signature"

    session.application = {"status": "pending", "rejectionFeedback": "Missing signature"}
    assert session.rejection_feedback == ""


def test_review_board_only_reviews_pending(api):
    board = ReviewBoard(api, status="approved")

    assert board.can_review is False
    with pytest.raises(InvalidStateTransition):
        board.approve(1)
    api.approve.assert_not_called()


def test_review_board_refreshes_after_decision(api):
    board = ReviewBoard(api)
    api.list_applications.return_value = []
    api.get_application.return_value = {"application": {"id": 9, "status": "pending"}, "canReview": True}
    api.approve.return_value = {"id": 9, "status": "approved"}

    board.select(9)
    record = board.approve()

    assert record["status"] == "approved"
    api.approve.assert_called_once_with(9)
    api.list_applications.assert_called_once_with("pending")


def test_review_board_requires_feedback_to_reject(api):
    board = ReviewBoard(api)

    with pytest.raises(ValidationFailure):
        board.reject("  ", application_id=9)

    api.reject.assert_not_called()


def test_review_board_switches_status_filter(api):
    api.list_applications.return_value = [{"id": 1}]
    board = ReviewBoard(api)

    assert board.set_status("rejected") == [{"id": 1}]
    assert board.can_review is False
    with pytest.raises(ValidationFailure):
        board.set_status("all")


def test_missing_visa_type_never_touches_the_network(session, api):
    citizenship = visa_status()
    del citizenship["workAuthorizationType"]
    session.stage_document("driver_license", "license.pdf", BytesIO(PDF_BYTES))
    session.stage_document("work_authorization", "permit.pdf", BytesIO(PDF_BYTES))

    with pytest.raises(ValidationFailure) as excinfo:
        session.submit(application_payload(citizenshipStatus=citizenship, documents=[]))

    assert excinfo.value.errors == {
        "citizenshipStatus.workAuthorizationType": ["Work authorization type is required."]
    }
    api.upload_file.assert_not_called()
    api.submit_application.assert_not_called()


class _ScriptedAdapter(BaseAdapter):
    """Answer each request with the next scripted status and body."""

    def __init__(self, replies):
        super().__init__()
        self.replies = list(replies)
        self.requests = []

    def send(self, request, **kwargs):
        self.requests.append(request)
        status_code, body = self.replies.pop(0)
        response = requests.Response()
        response.status_code = status_code
        response._content = json.dumps(body).encode()
        response.headers["Content-Type"] = "application/json"
        response.encoding = "utf-8"
        response.request = request
        response.url = request.url
        return response

    def close(self):
        pass


def _stored(name):
    return 201, {
        "fileName": name,
        "fileUrl": f"http://testserver/media/onboarding/1/{name}",
        "uploadDate": "2024-02-01T00:00:00Z",
    }


def test_staged_files_are_resent_in_full_after_an_upload_failure():
    adapter = _ScriptedAdapter(
        [
            _stored("license.pdf"),
            (500, {"detail": "storage offline"}),
            _stored("license.pdf"),
            _stored("cv.pdf"),
            (201, {"id": 1, "status": "pending", "documents": []}),
        ]
    )
    http = requests.Session()
    http.mount("http://testserver/", adapter)
    session = OnboardingSession(OnboardingAPI("http://testserver", token="t", session=http))
    session.stage_document("driver_license", "license.pdf", BytesIO(PDF_BYTES))
    session.stage_document("other", "cv.pdf", BytesIO(PDF_BYTES))

    with pytest.raises(UploadFailure) as excinfo:
        session.submit(application_payload(documents=[]))
    assert excinfo.value.file_name == "cv.pdf"

    result = session.submit(application_payload(documents=[]))

    assert result["status"] == "pending"
    uploads = [request for request in adapter.requests if request.url.endswith("/api/files/upload/")]
    assert len(uploads) == 4
    for request in uploads:
        assert PDF_BYTES in request.body
