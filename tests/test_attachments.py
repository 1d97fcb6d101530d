import pytest

from pathy_admin.attachments import MB, load_attachment, prepare_attachment, validate_attachment
from pathy_admin.errors import AttachmentError
from pathy_admin.models.chat import AttachmentKind


def test_image_over_five_megabytes_rejected():
    with pytest.raises(AttachmentError) as exc:
        validate_attachment("image/jpeg", 6 * MB)
    assert "5MB" in str(exc.value)


def test_four_megabyte_image_accepted():
    assert validate_attachment("image/png", 4 * MB) is AttachmentKind.IMAGE


def test_ninety_megabyte_video_accepted():
    assert validate_attachment("video/mp4", 90 * MB) is AttachmentKind.VIDEO


def test_pdf_over_hundred_megabytes_rejected():
    with pytest.raises(AttachmentError):
        validate_attachment("application/pdf", 110 * MB)


def test_size_exactly_at_limit_accepted():
    assert validate_attachment("image/webp", 5 * MB) is AttachmentKind.IMAGE


@pytest.mark.parametrize("content_type", ["image/gif", "application/zip", "text/plain", ""])
def test_types_outside_allow_list_rejected(content_type):
    with pytest.raises(AttachmentError) as exc:
        validate_attachment(content_type, 10)
    assert exc.value.details == {"content_type": content_type}


def test_prepare_guesses_type_from_name():
    attachment = prepare_attachment("report.pdf", b"%PDF-1.4")
    assert attachment.content_type == "application/pdf"
    assert attachment.kind is AttachmentKind.DOCUMENT
    assert attachment.as_file() == ("report.pdf", b"%PDF-1.4", "application/pdf")


def test_load_attachment_checks_size_before_reading(tmp_path):
    big = tmp_path / "progress.jpg"
    with big.open("wb") as fh:
        fh.truncate(6 * MB)
    with pytest.raises(AttachmentError):
        load_attachment(big)

    small = tmp_path / "meal.jpg"
    small.write_bytes(b"\xff\xd8\xff" + b"0" * 100)
    attachment = load_attachment(small)
    assert attachment.kind is AttachmentKind.IMAGE
    assert attachment.size == 103
