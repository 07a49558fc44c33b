# users/permissions.py

from rest_framework.permissions import BasePermission

from users.models import Role


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()
    message = "Your role is not allowed to perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


# ---------------- ROLE PERMISSIONS ----------------
class IsCustomer(HasRole):
    allowed_roles = {Role.CUSTOMER}


class IsRetailer(HasRole):
    allowed_roles = {Role.RETAILER}


class IsCourier(HasRole):
    """
    Delivery people only. Claim / decline / available-orders live behind this.
    """

    allowed_roles = {Role.DELIVERY_PERSON}
    message = "Only delivery accounts can take or decline deliveries."
