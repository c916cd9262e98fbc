from datetime import datetime, timezone as dt_timezone

from apps.onboarding.documents import DocumentReference, document_types, merge_documents


def _reference(url, document_type="driver_license", name="file.pdf"):
    return DocumentReference(
        document_type=document_type,
        file_name=name,
        file_url=url,
        upload_date=datetime(2024, 1, 1, tzinfo=dt_timezone.utc),
    )


def test_merge_keeps_first_reference_for_each_url():
    uploaded = [_reference("https://f/a.pdf", name="new.pdf")]
    persisted = [_reference("https://f/a.pdf", name="old.pdf"), _reference("https://f/b.pdf")]

    merged = merge_documents(uploaded, persisted)

    assert [document.file_url for document in merged] == ["https://f/a.pdf", "https://f/b.pdf"]
    assert merged[0].file_name == "new.pdf"


def test_merge_with_no_documents_is_empty():
    assert merge_documents([], []) == []


def test_from_payload_parses_upload_date():
    reference = DocumentReference.from_payload(
        {
            "type": "opt_receipt",
            "fileName": "receipt.pdf",
            "fileUrl": "https://f/receipt.pdf",
            "uploadDate": "2024-03-01T12:30:00Z",
        }
    )

    assert reference.document_type == "opt_receipt"
    assert reference.upload_date == datetime(2024, 3, 1, 12, 30, tzinfo=dt_timezone.utc)
    assert reference.to_payload()["fileUrl"] == "https://f/receipt.pdf"


def test_from_payload_defaults_missing_upload_date():
    reference = DocumentReference.from_payload(
        {"type": "other", "fileName": "x.png", "fileUrl": "https://f/x.png"}
    )

    assert reference.upload_date is not None


def test_document_types():
    documents = [_reference("https://f/a"), _reference("https://f/b", document_type="opt_receipt")]

    assert document_types(documents) == {"driver_license", "opt_receipt"}
