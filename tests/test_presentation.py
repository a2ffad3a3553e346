import os

import pytest

from presentation import (
    PPT_SIGNATURE,
    PRESENTATION_MAX_FILE_SIZE_BYTES,
    get_presentation_extension,
    presentation_storage_path,
    validate_presentation,
)

PPTX_MIME = 'application/vnd.openxmlformats-officedocument.presentationml.presentation'
PPT_MIME = 'application/vnd.ms-powerpoint'
PPTX_BYTES = b'PK\x03\x04' + b'\x00' * 64


def test_extension_is_lowercased():
    assert get_presentation_extension(' Deck.PPTX ') == '.pptx'
    assert get_presentation_extension('README') == ''


def test_accepts_pptx_and_ppt():
    assert validate_presentation('deck.pptx', PPTX_MIME, PPTX_BYTES) is None
    assert validate_presentation('deck.ppt', PPT_MIME, PPT_SIGNATURE + b'\x00' * 8) is None


@pytest.mark.parametrize('filename, mimetype, data, message', [
    ('', PPTX_MIME, PPTX_BYTES, 'No file uploaded'),
    ('deck.pdf', 'application/pdf', b'%PDF-1.7', 'Only .ppt and .pptx files are allowed'),
    ('deck.pptx', 'application/zip', PPTX_BYTES, 'File type is not a PowerPoint presentation'),
    ('deck.pptx', PPTX_MIME, b'', 'Uploaded file is empty'),
    ('deck.pptx', PPTX_MIME, b'PK\x03\x04' + b'\x00' * PRESENTATION_MAX_FILE_SIZE_BYTES,
     'File is larger than 5 MB'),
    ('deck.pptx', PPTX_MIME, b'%PDF-1.7 renamed', 'File contents do not match a PowerPoint presentation'),
    ('deck.ppt', PPT_MIME, PPTX_BYTES, 'File contents do not match a PowerPoint presentation'),
])
def test_rejections(filename, mimetype, data, message):
    assert validate_presentation(filename, mimetype, data) == message


def test_storage_path_is_sanitised(tmp_path):
    relative, full = presentation_storage_path(str(tmp_path), 'team-1', '../../etc/Final Deck.pptx')
    assert relative == os.path.join('registrations', 'team-1', 'etc_Final_Deck.pptx')
    assert full == os.path.join(str(tmp_path), relative)
