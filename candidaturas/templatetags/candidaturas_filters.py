from django import template

from constants import (
    AVAILABILITY_CHOICES,
    SCHEDULE_CHOICES,
    STATUS_BADGE_CLASSES,
    STATUS_CHOICES,
    VEHICLE_TYPE_CHOICES,
)

register = template.Library()

STATUS_LABELS = dict(STATUS_CHOICES)
AVAILABILITY_LABELS = dict(AVAILABILITY_CHOICES)
SCHEDULE_LABELS = dict(SCHEDULE_CHOICES)
VEHICLE_LABELS = dict(VEHICLE_TYPE_CHOICES)


@register.filter
def status_label(value):
    return STATUS_LABELS.get(value, value)


@register.filter
def status_badge(value):
    return STATUS_BADGE_CLASSES.get(value, 'bg-secondary')


@register.filter
def availability_label(value):
    return AVAILABILITY_LABELS.get(value, value)


@register.filter
def schedule_label(value):
    return SCHEDULE_LABELS.get(value, value)


@register.filter
def vehicle_label(value):
    return VEHICLE_LABELS.get(value, value)


@register.filter
def vehicle_summary(vehicle_types, limit=2):
    """Shows the first vehicles and a "+N" counter for the rest: "Carro, Van +1"."""
    if not vehicle_types:
        return ''
    try:
        limit = int(limit)
    except (ValueError, TypeError):
        limit = 2
    labels = [VEHICLE_LABELS.get(tag, tag) for tag in vehicle_types]
    summary = ', '.join(labels[:limit])
    if len(labels) > limit:
        summary += f" +{len(labels) - limit}"
    return summary


@register.filter
def sim_nao(value):
    return 'Sim' if value else 'Não'
