import os

from werkzeug.utils import secure_filename

PRESENTATION_REGISTRATIONS_FOLDER = 'registrations'
PRESENTATION_MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024

PRESENTATION_ALLOWED_EXTENSIONS = ('.ppt', '.pptx')
PRESENTATION_ALLOWED_MIME_TYPES = (
    'application/vnd.ms-powerpoint',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation',
)

# OLE2 compound document
PPT_SIGNATURE = bytes([0xd0, 0xcf, 0x11, 0xe0, 0xa1, 0xb1, 0x1a, 0xe1])
# ZIP local file, empty archive and spanned archive headers
PPTX_SIGNATURES = (
    bytes([0x50, 0x4b, 0x03, 0x04]),
    bytes([0x50, 0x4b, 0x05, 0x06]),
    bytes([0x50, 0x4b, 0x07, 0x08]),
)


def get_presentation_extension(filename):
    normalized = (filename or '').strip().lower()
    return os.path.splitext(normalized)[1]


def is_presentation_extension_allowed(filename):
    return get_presentation_extension(filename) in PRESENTATION_ALLOWED_EXTENSIONS


def is_presentation_mime_type_allowed(mimetype):
    return (mimetype or '').strip().lower() in PRESENTATION_ALLOWED_MIME_TYPES


def is_presentation_signature_allowed(data, extension):
    extension = (extension or '').strip().lower()
    if extension == '.ppt':
        return data.startswith(PPT_SIGNATURE)
    if extension == '.pptx':
        return any(data.startswith(signature) for signature in PPTX_SIGNATURES)
    return False


def validate_presentation(filename, mimetype, data):
    """Return an error message for an unacceptable upload, or None."""
    if not filename:
        return 'No file uploaded'
    if not is_presentation_extension_allowed(filename):
        return 'Only .ppt and .pptx files are allowed'
    if not is_presentation_mime_type_allowed(mimetype):
        return 'File type is not a PowerPoint presentation'
    if not data:
        return 'Uploaded file is empty'
    if len(data) > PRESENTATION_MAX_FILE_SIZE_BYTES:
        return 'File is larger than 5 MB'
    if not is_presentation_signature_allowed(data, get_presentation_extension(filename)):
        return 'File contents do not match a PowerPoint presentation'
    return None


def presentation_storage_path(upload_folder, team_id, filename):
    safe_name = secure_filename(filename) or f'presentation{get_presentation_extension(filename)}'
    relative = os.path.join(PRESENTATION_REGISTRATIONS_FOLDER, secure_filename(str(team_id)), safe_name)
    return relative, os.path.join(upload_folder, relative)
