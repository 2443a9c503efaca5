import os
from datetime import datetime, timezone

AUDIT_HEADER = 'Timestamp,Username,Action,Path,Details'


def ensure_csv_header(path, header_line):
    if not os.path.exists(path):
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(header_line + '\n')


def log_event(log_path, username, action, path='', details=''):
    """Append one quoted line to the audit log CSV."""
    ensure_csv_header(log_path, AUDIT_HEADER)
    ts = datetime.now(timezone.utc).isoformat()
    fields = [ts, username, action, path, str(details).replace('"', "'")]
    line = ','.join(f'"{value}"' for value in fields) + '\n'
    with open(log_path, 'a', encoding='utf-8') as f:
        f.write(line)
