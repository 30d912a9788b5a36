"""CSV export helpers shared by list endpoints and panels"""
import csv
import io

from django.http import HttpResponse


class UnknownColumnError(ValueError):
    def __init__(self, columns):
        self.columns = list(columns)
        super().__init__(f"Unknown columns: {', '.join(self.columns)}")


def select_columns(available, requested=None):
    """
    Resolve the requested column keys against ``available`` (``[(key, label), ...]``).

    Returns the matching ``(key, label)`` pairs in the requested order. No
    request means every available column in its default order.
    """
    if not requested:
        return list(available)

    labels = dict(available)
    unknown = [key for key in requested if key not in labels]
    if unknown:
        raise UnknownColumnError(unknown)

    selected = []
    seen = set()
    for key in requested:
        if key in seen:
            continue
        seen.add(key)
        selected.append((key, labels[key]))
    return selected


def rows_to_csv(columns, rows):
    """Render dict rows as CSV text with exactly ``columns``, in order"""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([label for _, label in columns])
    for row in rows:
        writer.writerow([row.get(key, '') for key, _ in columns])
    return buffer.getvalue()


def csv_response(filename, columns, rows):
    response = HttpResponse(rows_to_csv(columns, rows), content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
