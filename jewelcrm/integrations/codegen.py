"""
Source generation for builder integrations.

The output is a standalone Python module: the integration's triggers,
conditions and actions are embedded as literals next to a small ``handle``
entry point that evaluates the conditions against an incoming record and
dispatches each configured action.
"""
import pprint
import re

from .models import CustomIntegration

TEMPLATE_LABELS = dict(CustomIntegration.TEMPLATE_CHOICES)

HANDLER_SOURCE = '''

OPERATORS = {
    'equals': lambda actual, expected: actual == expected,
    'not_equals': lambda actual, expected: actual != expected,
    'contains': lambda actual, expected: expected in (actual or ''),
    'greater_than': lambda actual, expected: actual is not None and actual > expected,
    'less_than': lambda actual, expected: actual is not None and actual < expected,
    'regex': lambda actual, expected: re.search(expected, str(actual or '')) is not None,
}


def map_fields(record):
    if not DATA_MAPPING:
        return dict(record)
    return {target: record.get(source) for source, target in DATA_MAPPING.items()}


def matches(record):
    """All conditions must hold"""
    for condition in CONDITIONS:
        check = OPERATORS[condition['operator']]
        if not check(record.get(condition['field']), condition.get('value')):
            return False
    return True


def run_action(action, payload):
    handler = ACTION_HANDLERS.get(action['type'])
    if handler is None:
        raise NotImplementedError(f"No handler registered for action '{action['type']}'")
    return handler(action.get('config', {}), payload)


# Register callables here: {'http_request': send_request, ...}
ACTION_HANDLERS = {}


def handle(record):
    if not matches(record):
        return {'skipped': True, 'results': []}
    payload = map_fields(record)
    return {'skipped': False, 'results': [run_action(action, payload) for action in ACTIONS]}
'''


def _identifier(name):
    slug = re.sub(r'[^0-9a-zA-Z]+', '_', name).strip('_').lower()
    return slug or 'integration'


def _literal(name, value):
    return f"{name} = {pprint.pformat(value, indent=4, width=100, sort_dicts=False)}\n"


def _docstring(text):
    """Module docstring for ``text``; quotes, backslashes and control characters are escaped"""
    escaped = text.replace('\\', '\\\\').replace('"', '\\"')
    escaped = ''.join(ch if ch == '\n' or ch.isprintable() else repr(ch)[1:-1] for ch in escaped)
    return f'"""\n{escaped}\n"""'


def generate_code(data):
    """Render a builder payload (validated, camelCase keys) as Python source"""
    configuration = data.get('configuration') or {}
    metadata = data.get('metadata') or {}
    schedule = data.get('schedule') or {}
    error_handling = configuration.get('errorHandling') or {}

    doc = [f"{data['name']} ({TEMPLATE_LABELS.get(data['template'], data['template'])})"]
    if data.get('description'):
        doc += ['', data['description']]
    doc += ['', f"Module: {_identifier(data['name'])}  version {metadata.get('version', '1.0.0')}"]

    parts = [_docstring('\n'.join(doc)), '\nimport re\n\n\n']
    parts.append(_literal('TEMPLATE', data['template']))
    parts.append(_literal('TRIGGERS', configuration.get('triggers', [])))
    parts.append(_literal('CONDITIONS', configuration.get('conditions', [])))
    parts.append(_literal('ACTIONS', configuration.get('actions', [])))
    parts.append(_literal('DATA_MAPPING', configuration.get('dataMapping', {})))
    parts.append(_literal('RETRY_COUNT', error_handling.get('retryCount', 3)))
    parts.append(_literal('RETRY_DELAY_MS', error_handling.get('retryDelay', 5000)))
    parts.append(_literal('FALLBACK_ACTION', error_handling.get('fallbackAction', '')))
    if schedule.get('enabled'):
        parts.append(_literal('SCHEDULE', {
            'cron': schedule.get('cronExpression', ''),
            'timezone': schedule.get('timezone', 'UTC'),
        }))
    if data.get('permissions'):
        parts.append(_literal('PERMISSIONS', data['permissions']))
    parts.append(HANDLER_SOURCE)
    return ''.join(parts)
