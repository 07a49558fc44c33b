# orders/admin.py

"""
ORDERS ADMIN

Read-mostly: status and courier are driven by services, and history rows
are append-only, so they are shown but not edited here.
"""

from django.contrib import admin

from orders.models import DeliveryHistory, Order, OrderItem, OrderRejection, Rating


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "product_name", "quantity", "price")


class DeliveryHistoryInline(admin.TabularInline):
    model = DeliveryHistory
    extra = 0
    can_delete = False
    readonly_fields = ("from_status", "to_status", "action", "note", "courier", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "store", "customer", "courier", "status", "total_amount", "payment_status", "created_at")
    list_filter = ("status", "payment_status")
    search_fields = ("id", "store__name", "customer__email", "courier__email")
    readonly_fields = (
        "customer",
        "store",
        "courier",
        "status",
        "total_amount",
        "paid_amount",
        "delivery_earning",
        "created_at",
        "updated_at",
    )
    inlines = [OrderItemInline, DeliveryHistoryInline]


@admin.register(OrderRejection)
class OrderRejectionAdmin(admin.ModelAdmin):
    list_display = ("order", "courier", "rejected_at", "reofferable_after")
    search_fields = ("order__id", "courier__email")
    readonly_fields = ("order", "courier", "reason", "rejected_at", "reofferable_after")


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ("order", "rating_type", "rating", "rater", "created_at")
    list_filter = ("rating_type", "rating")
