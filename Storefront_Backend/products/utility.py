from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.response import Response


class BaseResponseMixin:
    """
    Mixin that provides standard response formatting
    """

    def get_response(self, status_code, message, data=None):
        """Format the API response"""
        response_data = {
            "status": "success" if status_code < 400 else "error",
            "status_code": status_code,
            "message": message
        }

        if data is not None:
            response_data["data"] = data
        return Response(response_data, status=status_code)
    

# Permissions
class IsSellerPermission(IsAuthenticated):
    """Permission class for sellers"""
    message = "Only sellers can manage shops"

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_seller)
    

class IsShopOwner(BasePermission):
    """Object permission: the shop (or the product's shop) belongs to the caller"""
    message = "You do not own this shop"

    def has_object_permission(self, request, view, obj):
        shop = getattr(obj, "shop", obj)
        return bool(request.user and request.user.is_authenticated and shop.owner_id == request.user.id)
