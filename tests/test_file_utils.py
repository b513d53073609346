"""Unit tests for file list encoding and output path helpers."""

import json

import pytest
from pydantic import ValidationError

from common.types import File
from horizon.file_utils import (
    encode_as_json_in_temporary_file,
    finder_style_safe_path,
    remove_temporary_file,
)
from horizon.schemas import decode_file_list, encode_file_list


def test_encode_file_list_is_sorted_json_array():
    data = encode_file_list({File('b.txt', 'QmB'), File('a.txt', 'QmA')})

    assert json.loads(data) == [
        {'name': 'a.txt', 'hash': 'QmA'},
        {'name': 'b.txt', 'hash': 'QmB'},
    ]


def test_encode_empty_file_list():
    assert encode_file_list([]) == b'[]'


def test_decode_accepts_missing_hash():
    assert decode_file_list(b'[{"name": "a.txt"}]') == [File('a.txt', None)]


@pytest.mark.parametrize('payload', [b'', b'{}', b'[1]', b'[{"hash": "QmA"}]'])
def test_decode_rejects_wrong_shape(payload):
    with pytest.raises(ValidationError):
        decode_file_list(payload)


def test_temporary_file_holds_encoded_list():
    files = [File('a.txt', 'QmA')]

    path = encode_as_json_in_temporary_file(files)

    try:
        assert path.suffix == '.json'
        assert decode_file_list(path.read_bytes()) == files
    finally:
        remove_temporary_file(path)

    assert not path.exists()
    assert not path.parent.exists()


def test_temporary_file_write_failure_returns_none(monkeypatch):
    def failing_mkdtemp(prefix=None):
        raise OSError('no space left on device')

    monkeypatch.setattr('horizon.file_utils.tempfile.mkdtemp', failing_mkdtemp)

    assert encode_as_json_in_temporary_file([File('a.txt', 'QmA')]) is None


def test_remove_missing_temporary_file_is_tolerated(tmp_path):
    remove_temporary_file(tmp_path / 'gone' / 'list.json')


class TestFinderStyleSafePath:
    """Test choosing non-overwriting output paths."""

    def test_free_path_is_used_as_is(self, tmp_path):
        target = tmp_path / 'report.pdf'

        assert finder_style_safe_path(File('report.pdf', 'QmR'), target) == target

    def test_existing_file_gets_numbered_suffix(self, tmp_path):
        (tmp_path / 'report.pdf').write_text('old')
        (tmp_path / 'report (2).pdf').write_text('older')

        result = finder_style_safe_path(File('report.pdf', 'QmR'), tmp_path / 'report.pdf')

        assert result == tmp_path / 'report (3).pdf'

    def test_directory_target_uses_file_name(self, tmp_path):
        assert finder_style_safe_path(File('report.pdf', 'QmR'), tmp_path) == tmp_path / 'report.pdf'

    def test_directory_target_with_existing_file(self, tmp_path):
        (tmp_path / 'notes').write_text('no extension')

        result = finder_style_safe_path(File('notes', 'QmN'), tmp_path)

        assert result == tmp_path / 'notes (2)'
