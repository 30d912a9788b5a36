class AuditError(Exception):
    """Invalid operation on an audit session"""
    status_code = 400


class StepError(AuditError):
    """Operation not allowed on the current wizard step"""
    status_code = 409


class ItemNotFound(AuditError):
    status_code = 404


class AuditSessionNotFound(AuditError):
    status_code = 404


class AuditPermissionDenied(AuditError):
    status_code = 403
