"""
Response envelope shared by every API endpoint.

Success bodies are ``{"data": ...}`` (list endpoints add ``pagination``);
failures are ``{"error": "<message>"}`` with optional field ``details``.
"""
from django.core.paginator import Paginator
from rest_framework import status
from rest_framework.response import Response


def success(data, status_code=status.HTTP_200_OK, **extra):
    body = {'data': data}
    body.update(extra)
    return Response(body, status=status_code)


def failure(message, status_code=status.HTTP_400_BAD_REQUEST, details=None):
    body = {'error': str(message)}
    if details:
        body['details'] = details
    return Response(body, status=status_code)


def first_error_message(errors):
    """Flatten DRF serializer errors into a single readable message"""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = first_error_message(value)
            if message:
                if field in ('non_field_errors', 'detail'):
                    return message
                return f"{field}: {message}"
        return 'Invalid request'
    if isinstance(errors, (list, tuple)):
        for value in errors:
            message = first_error_message(value)
            if message:
                return message
        return 'Invalid request'
    return str(errors)


def validation_failure(errors):
    return failure(first_error_message(errors), details=errors)


def parse_int(value, default, minimum=1, maximum=None):
    """Parse a query parameter as int, falling back to the default on bad input"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < minimum:
        return default
    if maximum is not None and number > maximum:
        return maximum
    return number


def paginate(request, queryset, serializer_class, default_limit=50, max_limit=1000):
    """Paginate a queryset with ``page``/``limit`` query params into the envelope"""
    page = parse_int(request.query_params.get('page'), 1)
    limit = parse_int(request.query_params.get('limit'), default_limit, maximum=max_limit)

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)
    serializer = serializer_class(page_obj, many=True)

    return success(serializer.data, pagination={
        'count': paginator.count,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
    })
