"""
Derives local filenames from the original filenames listed in a manifest.
"""

import re

SUBJECT_MARKER = "sub-"
_SEPARATOR_PATTERN = re.compile(r"[-.]")


def extract_sub_identifier(file_name: str) -> str:
    """
    Returns the subject label embedded in a BIDS-style filename.

    The label is the text between the first ``sub-`` and the next ``-`` or
    ``.``. Filenames without the marker are returned unchanged.

    Examples:
        >>> extract_sub_identifier("sub-042-ses-01_scan.nii.gz")
        '042'
        >>> extract_sub_identifier("recording.wav")
        'recording.wav'
    """
    idx = file_name.find(SUBJECT_MARKER)
    if idx == -1:
        return file_name

    remainder = file_name[idx + len(SUBJECT_MARKER) :]
    match = _SEPARATOR_PATTERN.search(remainder)
    if match:
        return remainder[: match.start()]
    return remainder
