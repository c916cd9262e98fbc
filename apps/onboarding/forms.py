import logging
import mimetypes
from pathlib import Path

from django import forms
from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_MAX_BYTES = 5 * 1024 * 1024


class DocumentUploadForm(forms.Form):
    """Checks a single uploaded document before it is stored."""

    ALLOWED_CONTENT_TYPES = ['application/pdf', 'image/jpeg', 'image/png']
    _SIGNATURES = {
        'application/pdf': (b'%PDF',),
        'image/png': (b'\x89PNG\r\n\x1a\n',),
        'image/jpeg': (b'\xff\xd8\xff',),
    }
    _EXTENSIONS = {
        '.pdf': 'application/pdf',
        '.png': 'image/png',
        '.jpg': 'image/jpeg',
        '.jpeg': 'image/jpeg',
    }

    file = forms.FileField()

    @property
    def max_bytes(self) -> int:
        return getattr(settings, 'ONBOARDING_UPLOAD_MAX_BYTES', DEFAULT_UPLOAD_MAX_BYTES)

    def clean_file(self):
        file_obj = self.cleaned_data['file']

        if file_obj.size > self.max_bytes:
            megabytes = self.max_bytes / (1024 * 1024)
            raise forms.ValidationError(f"File size must be under {megabytes:g}MB.")

        content_type = self._determine_content_type(file_obj)
        if content_type not in self.ALLOWED_CONTENT_TYPES:
            logger.warning(
                "Rejected upload %s with MIME %s not in %s",
                file_obj.name,
                content_type,
                ", ".join(self.ALLOWED_CONTENT_TYPES),
            )
            raise forms.ValidationError("Only PDF, JPG, or PNG files are allowed.")

        expected_types = self._expected_content_types(file_obj, content_type)
        if not self._has_valid_signature(file_obj, expected_types):
            logger.warning(
                "Rejected upload %s due to invalid signature. Expected one of %s",
                file_obj.name,
                ", ".join(expected_types),
            )
            raise forms.ValidationError("Only PDF, JPG, or PNG files are allowed.")

        return file_obj

    def _determine_content_type(self, file_obj) -> str | None:
        content_type = getattr(file_obj, 'content_type', None)
        if content_type and content_type != 'application/octet-stream':
            return content_type
        guessed, _ = mimetypes.guess_type(getattr(file_obj, 'name', '') or '')
        return guessed or content_type

    def _expected_content_types(self, file_obj, content_type):
        expected = []
        if content_type in self._SIGNATURES:
            expected.append(content_type)

        guessed = self._EXTENSIONS.get(Path(getattr(file_obj, 'name', '') or '').suffix.lower())
        if guessed and guessed not in expected:
            expected.append(guessed)
        return expected

    def _has_valid_signature(self, file_obj, expected_types):
        chunk = self._read_file_signature(file_obj)
        if not chunk:
            return False

        for expected in expected_types:
            for signature in self._SIGNATURES.get(expected, ()):
                if chunk.startswith(signature):
                    return True
        return False

    def _read_file_signature(self, file_obj, size: int = 10) -> bytes:
        file_obj.seek(0)
        try:
            return file_obj.read(size) or b""
        finally:
            file_obj.seek(0)
