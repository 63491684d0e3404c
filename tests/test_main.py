import json

from main import build_parser, run_file_audit, write_outputs
from processors.report_builder import load_armored


def write_export(tmp_path):
    path = tmp_path / 'accounts.json'
    path.write_text(json.dumps([
        {'sAMAccountName': 'alice', 'department': 'IT', 'primaryGroupID': 512},
        {'sAMAccountName': 'HealthMailbox01'},
        {'sAMAccountName': 'bob', 'userAccountControl': 514},
    ]), encoding='utf-8')
    return path


def test_file_audit_writes_armored_model_and_csv(tmp_path) -> None:
    export = write_export(tmp_path)
    output = tmp_path / 'model.txt'
    csv_path = tmp_path / 'accounts.csv'
    args = build_parser().parse_args(['file', str(export), '--output', str(output), '--csv', str(csv_path)])

    model = run_file_audit(args.input_file)
    write_outputs(model, args)

    data = load_armored(output.read_text(encoding='utf-8'))
    assert data['stats']['total'] == 2
    assert data['stats']['never'] == 2
    assert data['accounts'][0]['is_admin'] is True
    assert csv_path.exists()


def test_json_format_option(tmp_path) -> None:
    export = write_export(tmp_path)
    output = tmp_path / 'model.json'
    args = build_parser().parse_args(['file', str(export), '--output', str(output), '--format', 'json'])

    write_outputs(run_file_audit(args.input_file), args)

    assert json.loads(output.read_text(encoding='utf-8'))['department_labels'] == ['IT', 'Unknown']
