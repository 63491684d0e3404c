import json

import pytest

from core.exceptions import DirectoryQueryError
from utils.json_source import iter_json_accounts


def test_reads_attribute_export(tmp_path) -> None:
    path = tmp_path / 'accounts.json'
    path.write_text(json.dumps([
        {'sAMAccountName': 'alice', 'memberOf': ['CN=Staff,DC=corp'], 'primaryGroupID': 513},
        {'sAMAccountName': ['bob', 'bob2'], 'lastLogonTimestamp': '133000000000000000'},
    ]), encoding='utf-8')

    records = list(iter_json_accounts(str(path)))

    assert [record.username for record in records] == ['alice', 'bob']
    assert records[0].member_of == ('CN=Staff,DC=corp',)
    assert records[1].last_logon_timestamp == 133000000000000000


def test_invalid_json_is_fatal(tmp_path) -> None:
    path = tmp_path / 'broken.json'
    path.write_text('[{"sAMAccountName": ', encoding='utf-8')

    with pytest.raises(DirectoryQueryError):
        list(iter_json_accounts(str(path)))


def test_non_array_is_fatal(tmp_path) -> None:
    path = tmp_path / 'object.json'
    path.write_text('{"sAMAccountName": "alice"}', encoding='utf-8')

    with pytest.raises(DirectoryQueryError):
        list(iter_json_accounts(str(path)))


def test_missing_file_is_fatal(tmp_path) -> None:
    with pytest.raises(DirectoryQueryError):
        list(iter_json_accounts(str(tmp_path / 'missing.json')))
