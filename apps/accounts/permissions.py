"""
Capability checks.

Every state-mutating operation asks is_allowed(principal, action, resource)
(or require_permission, which raises). Role branching lives here and
nowhere else.
"""
from apps.appointments.models import AppointmentStatus
from apps.core.exceptions import UnauthorizedError

from .principal import Role


class Action:
    BOOK                = 'appointment.book'
    VIEW                = 'appointment.view'
    CONFIRM             = 'appointment.confirm'
    CANCEL              = 'appointment.cancel'
    COMPLETE            = 'appointment.complete'
    MARK_PAID           = 'appointment.mark_paid'
    MANAGE_AVAILABILITY = 'barber.manage_availability'
    MANAGE_SERVICES     = 'service.manage'
    MANAGE_SETTINGS     = 'settings.manage'
    VIEW_EARNINGS       = 'earnings.view'


# Relationship to the appointment required for each action (admins bypass).
_APPOINTMENT_ACTORS = {
    Action.VIEW:      {Role.CLIENT, Role.BARBER},
    Action.CONFIRM:   {Role.BARBER},
    Action.COMPLETE:  {Role.BARBER},
    Action.MARK_PAID: {Role.BARBER},
}

_ADMIN_ONLY = {Action.MANAGE_SERVICES, Action.MANAGE_SETTINGS}


def relations(principal, appointment) -> set:
    """The roles `principal` plays with respect to `appointment`."""
    found = set()
    if principal.is_admin:
        found.add(Role.ADMIN)
    if principal.owns(appointment.barber_id):
        found.add(Role.BARBER)
    if principal.booked(appointment):
        found.add(Role.CLIENT)
    return found


def is_allowed(principal, action, resource=None) -> bool:
    if principal is None:
        return False
    if principal.is_admin:
        return True
    if action == Action.BOOK:
        return True
    if action in _ADMIN_ONLY:
        return False
    if action in (Action.MANAGE_AVAILABILITY, Action.VIEW_EARNINGS):
        return resource is not None and principal.owns(getattr(resource, 'pk', resource))
    if resource is None:
        return False

    played = relations(principal, resource)
    if action == Action.CANCEL:
        # Clients may only withdraw a request the barber has not confirmed yet.
        if Role.BARBER in played:
            return True
        return Role.CLIENT in played and resource.status == AppointmentStatus.PENDING
    return bool(played & _APPOINTMENT_ACTORS.get(action, set()))


def require_permission(principal, action, resource=None):
    if not is_allowed(principal, action, resource):
        raise UnauthorizedError('You do not have permission to perform this action.')
