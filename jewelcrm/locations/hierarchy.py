"""Helpers for walking the location hierarchy"""
from collections import defaultdict

from .models import Location


def descendant_codes(codes):
    """
    Expand location codes to include every descendant.

    Unknown codes are kept as-is so callers can still match free-form
    location strings. The result preserves the order of first appearance.
    """
    rows = list(Location.objects.values_list('id', 'code', 'parent_id'))
    children = defaultdict(list)
    id_by_code = {}
    for pk, code, parent_id in rows:
        id_by_code[code] = pk
        children[parent_id].append((pk, code))

    result = []
    seen = set()
    for code in codes:
        stack = [(id_by_code.get(code), code)]
        while stack:
            pk, current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            result.append(current)
            if pk is not None:
                stack.extend(reversed(children.get(pk, [])))
    return result


def build_tree(queryset=None):
    """Nest locations as ``{id, code, name, type, ..., children: [...]}`` dicts"""
    if queryset is None:
        queryset = Location.objects.filter(is_active=True)

    nodes = {}
    order = []
    for location in queryset.order_by('name'):
        nodes[location.id] = {
            'id': location.id,
            'code': location.code,
            'name': location.name,
            'type': location.location_type,
            'capacity': location.capacity,
            'security_level': location.security_level,
            'parent_id': location.parent_id,
            'children': [],
        }
        order.append(location.id)

    roots = []
    for pk in order:
        node = nodes[pk]
        parent = nodes.get(node['parent_id'])
        if parent is None:
            # Parents filtered out (inactive) promote their children to roots
            roots.append(node)
        else:
            parent['children'].append(node)
    return roots
