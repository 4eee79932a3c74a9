from django import template

from community.utils import time_ago as _time_ago

register = template.Library()


@register.filter
def time_ago(value):
    if not value:
        return ''
    return _time_ago(value)


@register.filter
def get_item(dictionary, key):
    """Get an item from a dictionary using bracket notation"""
    try:
        return dictionary.get(key, [])
    except AttributeError:
        return []
